# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Cloud Resource Manager client for the GCP client library."""

from __future__ import annotations

from typing import Any, Dict, Tuple

from ..data._resource_manager import _CloudResourceManagerWrapper
from ..utils._resources import process_resource_list, sort_key

__all__ = ["CloudResourceManagerClient"]


class CloudResourceManagerClient:
    """Client for listing the projects visible to the credentials."""

    def __init__(self, resource_manager: _CloudResourceManagerWrapper) -> None:
        self._resource_manager = resource_manager

    def list_projects(self) -> Tuple[Dict[str, Any], ...]:
        """List every accessible project, sorted by ``projectId``."""
        return process_resource_list(self._resource_manager.list_projects(), sort_key("projectId"))
