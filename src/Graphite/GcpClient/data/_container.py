# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""GKE (``container`` v1) request wrapper plus the registry manifest lookup."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from ..common.constants import REGISTRY_DIGEST_HEADER, REGISTRY_MANIFEST_ACCEPT, REGISTRY_MANIFEST_URL
from ..core._auth import _AuthManager
from ..core._http import _HttpClient
from ._base import _ApiWrapper


class _ContainerWrapper(_ApiWrapper):
    """
    Flat methods over the generated ``container`` v1 service.

    :param service_factory: Builds the generated service on first use.
    :param auth: Supplies bearer tokens for registry calls.
    :param http: Retrying ``requests`` client used for registry calls.
    :param num_retries: Passed to every generated request.
    """

    def __init__(
        self,
        service_factory: Callable[[], Any],
        auth: _AuthManager,
        http: _HttpClient,
        num_retries: int = 5,
    ) -> None:
        super().__init__(service_factory, num_retries)
        self._auth = auth
        self._http = http

    def _clusters(self) -> Any:
        return self.service.projects().locations().clusters()

    def get_cluster(self, project_id: str, location: str, cluster: str) -> Dict[str, Any]:
        name = f"projects/{project_id}/locations/{location}/clusters/{cluster}"
        return self._execute(self._clusters().get(name=name))

    def list_clusters(self, project_id: str, location: str) -> List[Dict[str, Any]]:
        # clusters.list is not paginated
        response = self._execute(self._clusters().list(parent=f"projects/{project_id}/locations/{location}"))
        return (response or {}).get("clusters") or []

    def get_manifest_digest(self, host: str, project_id: str, name: str, tag: str) -> Optional[str]:
        """``GET`` the image manifest and return its ``Docker-Content-Digest`` header."""
        url = REGISTRY_MANIFEST_URL.format(host=host, project=project_id, name=name, tag=tag)
        token = self._auth._acquire_token()
        headers = {
            "Authorization": f"{token.scheme} {token.access_token}",
            "Accept": REGISTRY_MANIFEST_ACCEPT,
        }
        response = self._http._request("get", url, headers=headers)
        return response.headers.get(REGISTRY_DIGEST_HEADER)
