# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""GKE client for the GCP client library."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..common.constants import LOCATION_WILDCARD
from ..core._error_codes import VALIDATION_INVALID_RESOURCE_URI
from ..core._validation import _require_text
from ..core.errors import ValidationError
from ..data._container import _ContainerWrapper
from ..utils._resources import process_resource_list, sort_key

__all__ = ["ContainerClient"]


class ContainerClient:
    """Client for GKE clusters and container registry images.

    :param container: Wrapper around the generated ``container`` v1 service.
    :type container: ~Graphite.GcpClient.data._container._ContainerWrapper

    Example::

        container = factory.container_client()
        for cluster in container.list_all_clusters("my-project"):
            print(cluster["name"], cluster["location"])

        digest = container.get_digest("gcr.io/my-project/app", "latest")
    """

    def __init__(self, container: _ContainerWrapper) -> None:
        self._container = container

    def get_cluster(self, project_id: str, location: str, cluster: str) -> Dict[str, Any]:
        """Fetch a cluster by project, location (zone or region) and name."""
        _require_text(project_id=project_id, location=location, cluster=cluster)
        return self._container.get_cluster(project_id, location, cluster)

    def list_all_clusters(self, project_id: str) -> Tuple[Dict[str, Any], ...]:
        """List the project's clusters across every location, sorted by name."""
        _require_text(project_id=project_id)
        return process_resource_list(self._container.list_clusters(project_id, LOCATION_WILDCARD), sort_key("name"))

    def get_digest(self, resource_uri: str, tag: str) -> Optional[str]:
        """Resolve an image tag to its content digest.

        :param resource_uri: Image location without tag, as ``host/project/name``. ``name``
            may itself contain slashes.
        :type resource_uri: str
        :param tag: Image tag, e.g. ``"latest"``.
        :type tag: str
        :return: The ``Docker-Content-Digest`` header of the manifest, e.g. ``"sha256:..."``.
        :rtype: str or None
        :raises ~Graphite.GcpClient.core.errors.ValidationError: If ``resource_uri`` lacks a non-empty
            host, project or name, or ``tag`` is empty.
        """
        _require_text(resource_uri=resource_uri, tag=tag)
        parts = resource_uri.split("/", 2)
        if len(parts) < 3 or not parts[0] or not parts[1] or not parts[2].rstrip("/"):
            raise ValidationError(
                f"resource_uri must look like host/project/name, got {resource_uri!r}.",
                subcode=VALIDATION_INVALID_RESOURCE_URI,
                details={"argument": "resource_uri"},
            )
        host, project_id, name = parts
        return self._container.get_manifest_digest(host, project_id, name, tag)
