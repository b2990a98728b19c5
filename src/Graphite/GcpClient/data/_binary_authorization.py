# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Binary Authorization v1beta1 request wrapper."""

from __future__ import annotations

from typing import Any, Dict, List

from ._base import _ApiWrapper


class _BinaryAuthorizationWrapper(_ApiWrapper):
    def _attestors(self) -> Any:
        return self.service.projects().attestors()

    def list_attestors(self, project_id: str) -> List[Dict[str, Any]]:
        return self._list_all(self._attestors(), "attestors", parent=f"projects/{project_id}")

    def get_attestor(self, project_id: str, attestor: str) -> Dict[str, Any]:
        return self._execute(self._attestors().get(name=f"projects/{project_id}/attestors/{attestor}"))
