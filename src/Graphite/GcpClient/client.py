# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import google_auth_httplib2
import httplib2
import requests
from google.auth.credentials import Credentials
from googleapiclient import discovery
from googleapiclient.http import HttpRequest, set_user_agent

from .common.constants import (
    BINARY_AUTHORIZATION_API,
    CLOUD_KMS_API,
    CLOUD_RESOURCE_MANAGER_API,
    COMPUTE_API,
    CONTAINER_ANALYSIS_API,
    CONTAINER_API,
)
from .core._auth import _AuthManager
from .core._http import _HttpClient
from .core._validation import _require_text
from .core.config import GcpClientConfig
from .data._binary_authorization import _BinaryAuthorizationWrapper
from .data._cloud_kms import _CloudKMSWrapper
from .data._compute import _ComputeWrapper
from .data._container import _ContainerWrapper
from .data._container_analysis import _ContainerAnalysisWrapper
from .data._resource_manager import _CloudResourceManagerWrapper
from .operations.binary_authorization import BinaryAuthorizationClient
from .operations.cloud_kms import CloudKMSClient
from .operations.compute import ComputeClient
from .operations.container import ContainerClient
from .operations.container_analysis import ContainerAnalysisClient
from .operations.resource_manager import CloudResourceManagerClient

_LIBRARY_LOGGER = "Graphite.GcpClient"

logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


class ClientFactory:
    """
    Entry point of the GCP client library.

    The factory holds the credentials, the application name reported as the
    User-Agent of every request, and the configuration. It hands out one client
    per Google Cloud API. Generated API services are built on the first call made
    through a client, so constructing the factory or a client never touches the
    network.

    **Context Manager Support (Recommended)**::

        with ClientFactory(credentials, "my-app") as factory:
            compute = factory.compute_client()
            regions = compute.list_regions("my-project")
        # Registry HTTP session closed

    **Without Context Manager**::

        factory = ClientFactory(credentials, "my-app")
        try:
            projects = factory.cloud_resource_manager_client().list_projects()
        finally:
            factory.close()

    Every generated request runs on its own authorized ``httplib2`` transport, so
    clients can be shared between threads.

    :param credentials: google-auth credentials, for example from :func:`google.auth.default`.
    :type credentials: ~google.auth.credentials.Credentials
    :param application_name: Name sent as the User-Agent of every request.
    :type application_name: :class:`str`
    :param config: Optional configuration for retries, timeouts, polling and logging.
        If not provided, defaults are loaded from :meth:`~Graphite.GcpClient.core.config.GcpClientConfig.from_env`.
    :type config: ~Graphite.GcpClient.core.config.GcpClientConfig or None

    :raises TypeError: If ``credentials`` is not a google-auth credentials object.
    :raises ~Graphite.GcpClient.core.errors.ValidationError: If ``application_name`` is empty.

    Example::

        import google.auth
        from Graphite.GcpClient import ClientFactory

        credentials, project_id = google.auth.default()
        with ClientFactory(credentials, "my-app") as factory:
            for cluster in factory.container_client().list_all_clusters(project_id):
                print(cluster["name"])
    """

    def __init__(
        self,
        credentials: Credentials,
        application_name: str,
        config: Optional[GcpClientConfig] = None,
    ) -> None:
        self.auth = _AuthManager(credentials)
        _require_text(application_name=application_name)
        self._application_name = application_name
        self._config = config or GcpClientConfig.from_env()
        if self._config.log_level:
            logging.getLogger(_LIBRARY_LOGGER).setLevel(self._config.log_level.upper())
        self._clients: Dict[str, Any] = {}
        self._http: Optional[_HttpClient] = None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

    def __enter__(self) -> "ClientFactory":
        """
        Enter the context manager.

        Creates a ``requests`` session reused by registry calls made within the context.

        :return: The factory instance.
        :rtype: ClientFactory
        """
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Release the registry HTTP session. Safe to call multiple times.

        Clients already handed out keep working; their generated services open a
        fresh transport per request.
        """
        if self._http is not None:
            self._http.close()
            self._http = None
        if self._session is not None and self._owns_session:
            self._session.close()
        self._session = None
        self._owns_session = False

    # ------------------------------------------------------------ plumbing

    def _authorized_http(self) -> google_auth_httplib2.AuthorizedHttp:
        http = google_auth_httplib2.AuthorizedHttp(
            self.auth.credentials, http=httplib2.Http(timeout=self._config.http_timeout)
        )
        return set_user_agent(http, self._application_name)

    def _build_request(self, http: Any, *args: Any, **kwargs: Any) -> HttpRequest:
        # httplib2.Http is not thread-safe, so each request gets its own transport.
        return HttpRequest(self._authorized_http(), *args, **kwargs)

    def _build_service(self, api: Tuple[str, str]) -> Any:
        name, version = api
        return discovery.build(
            name,
            version,
            http=self._authorized_http(),
            requestBuilder=self._build_request,
            cache_discovery=False,
        )

    def _service_factory(self, api: Tuple[str, str]):
        return lambda: self._build_service(api)

    def _get_http(self) -> _HttpClient:
        """Get or create the ``requests`` client used for registry calls."""
        if self._http is None:
            self._http = _HttpClient(
                retries=self._config.http_retries,
                backoff=self._config.http_backoff,
                timeout=self._config.http_timeout,
                session=self._session,
            )
        return self._http

    def _get_client(self, key: str, create) -> Any:
        client = self._clients.get(key)
        if client is None:
            client = self._clients[key] = create()
        return client

    # ------------------------------------------------------------- clients

    def compute_client(self) -> ComputeClient:
        """Client for Compute Engine v1.

        :rtype: ~Graphite.GcpClient.operations.compute.ComputeClient
        """
        return self._get_client(
            "compute",
            lambda: ComputeClient(
                _ComputeWrapper(self._service_factory(COMPUTE_API), self._config.num_retries), self._config
            ),
        )

    def container_client(self) -> ContainerClient:
        """Client for GKE (``container`` v1) and registry digest lookups.

        :rtype: ~Graphite.GcpClient.operations.container.ContainerClient
        """
        return self._get_client(
            "container",
            lambda: ContainerClient(
                _ContainerWrapper(
                    self._service_factory(CONTAINER_API), self.auth, self._get_http(), self._config.num_retries
                )
            ),
        )

    def cloud_kms_client(self) -> CloudKMSClient:
        """Client for Cloud KMS v1.

        :rtype: ~Graphite.GcpClient.operations.cloud_kms.CloudKMSClient
        """
        return self._get_client(
            "cloudkms",
            lambda: CloudKMSClient(_CloudKMSWrapper(self._service_factory(CLOUD_KMS_API), self._config.num_retries)),
        )

    def binary_authorization_client(self) -> BinaryAuthorizationClient:
        """Client for Binary Authorization v1beta1.

        :rtype: ~Graphite.GcpClient.operations.binary_authorization.BinaryAuthorizationClient
        """
        return self._get_client(
            "binaryauthorization",
            lambda: BinaryAuthorizationClient(
                _BinaryAuthorizationWrapper(self._service_factory(BINARY_AUTHORIZATION_API), self._config.num_retries)
            ),
        )

    def container_analysis_client(self) -> ContainerAnalysisClient:
        """Client for Container Analysis v1beta1.

        :rtype: ~Graphite.GcpClient.operations.container_analysis.ContainerAnalysisClient
        """
        return self._get_client(
            "containeranalysis",
            lambda: ContainerAnalysisClient(
                _ContainerAnalysisWrapper(self._service_factory(CONTAINER_ANALYSIS_API), self._config.num_retries),
                self._config,
            ),
        )

    def cloud_resource_manager_client(self) -> CloudResourceManagerClient:
        """Client for Cloud Resource Manager v1.

        :rtype: ~Graphite.GcpClient.operations.resource_manager.CloudResourceManagerClient
        """
        return self._get_client(
            "cloudresourcemanager",
            lambda: CloudResourceManagerClient(
                _CloudResourceManagerWrapper(
                    self._service_factory(CLOUD_RESOURCE_MANAGER_API), self._config.num_retries
                )
            ),
        )
