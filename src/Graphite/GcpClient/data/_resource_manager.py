# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Cloud Resource Manager v1 request wrapper."""

from __future__ import annotations

from typing import Any, Dict, List

from ._base import _ApiWrapper


class _CloudResourceManagerWrapper(_ApiWrapper):
    def list_projects(self) -> List[Dict[str, Any]]:
        return self._list_all(self.service.projects(), "projects")
