# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Binary Authorization client for the GCP client library."""

from __future__ import annotations

from typing import Any, Dict, Tuple

from ..core._validation import _require_text
from ..data._binary_authorization import _BinaryAuthorizationWrapper
from ..utils._resources import process_resource_list, sort_key

__all__ = ["BinaryAuthorizationClient"]


class BinaryAuthorizationClient:
    """Client for Binary Authorization attestors.

    :param binary_authorization: Wrapper around the generated ``binaryauthorization`` service.
    :type binary_authorization: ~Graphite.GcpClient.data._binary_authorization._BinaryAuthorizationWrapper
    """

    def __init__(self, binary_authorization: _BinaryAuthorizationWrapper) -> None:
        self._binary_authorization = binary_authorization

    def list_attestors(self, project_id: str) -> Tuple[Dict[str, Any], ...]:
        """List the project's attestors, sorted by name."""
        _require_text(project_id=project_id)
        return process_resource_list(self._binary_authorization.list_attestors(project_id), sort_key("name"))

    def get_attestor(self, project_id: str, attestor: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, attestor=attestor)
        return self._binary_authorization.get_attestor(project_id, attestor)
