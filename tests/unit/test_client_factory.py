# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Unit tests for ClientFactory construction, lazy service building and context manager support."""

import logging
import unittest
from unittest.mock import MagicMock, patch

import requests
from google.auth.credentials import Credentials
from googleapiclient.http import HttpRequest

from Graphite.GcpClient import (
    BinaryAuthorizationClient,
    ClientFactory,
    CloudKMSClient,
    CloudResourceManagerClient,
    ComputeClient,
    ContainerAnalysisClient,
    ContainerClient,
    GcpClientConfig,
    ValidationError,
)
from Graphite.GcpClient.core._http import _HttpClient


class TestClientFactoryConstruction(unittest.TestCase):
    def setUp(self):
        self.credentials = MagicMock(spec=Credentials)
        self.config = GcpClientConfig(http_retries=2)

    def test_rejects_non_credentials(self):
        with self.assertRaises(TypeError):
            ClientFactory(object(), "my-app", self.config)

    def test_rejects_empty_application_name(self):
        with self.assertRaises(ValidationError):
            ClientFactory(self.credentials, "", self.config)
        with self.assertRaises(ValueError):
            ClientFactory(self.credentials, None, self.config)

    @patch("Graphite.GcpClient.core.config.GcpClientConfig.from_env")
    def test_config_defaults_to_env(self, mock_from_env):
        mock_from_env.return_value = self.config
        factory = ClientFactory(self.credentials, "my-app")
        self.assertIs(factory._config, self.config)

    def test_log_level_applied(self):
        logger = logging.getLogger("Graphite.GcpClient")
        previous = logger.level
        try:
            ClientFactory(self.credentials, "my-app", GcpClientConfig(log_level="debug"))
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(previous)


class TestClientAccessors(unittest.TestCase):
    def setUp(self):
        self.credentials = MagicMock(spec=Credentials)
        self.factory = ClientFactory(self.credentials, "my-app", GcpClientConfig(http_retries=2))

    def test_accessor_types(self):
        self.assertIsInstance(self.factory.compute_client(), ComputeClient)
        self.assertIsInstance(self.factory.container_client(), ContainerClient)
        self.assertIsInstance(self.factory.cloud_kms_client(), CloudKMSClient)
        self.assertIsInstance(self.factory.binary_authorization_client(), BinaryAuthorizationClient)
        self.assertIsInstance(self.factory.container_analysis_client(), ContainerAnalysisClient)
        self.assertIsInstance(self.factory.cloud_resource_manager_client(), CloudResourceManagerClient)

    def test_accessors_cache_clients(self):
        self.assertIs(self.factory.compute_client(), self.factory.compute_client())

    def test_wrappers_use_configured_retries(self):
        self.assertEqual(self.factory.compute_client()._compute._num_retries, 2)

    @patch("Graphite.GcpClient.client.discovery.build")
    def test_service_built_lazily_once(self, mock_build):
        service = MagicMock()
        service.regions.return_value.list.return_value.execute.return_value = {"items": []}
        service.regions.return_value.list_next.return_value = None
        mock_build.return_value = service

        compute = self.factory.compute_client()
        mock_build.assert_not_called()

        compute.list_regions("p")
        compute.list_regions("p")

        mock_build.assert_called_once()
        args, kwargs = mock_build.call_args
        self.assertEqual(args, ("compute", "v1"))
        self.assertFalse(kwargs["cache_discovery"])
        self.assertEqual(kwargs["requestBuilder"], self.factory._build_request)

    @patch("Graphite.GcpClient.client.discovery.build")
    def test_each_api_uses_its_version(self, mock_build):
        self.factory.container_analysis_client()._container_analysis.service
        self.factory.binary_authorization_client()._binary_authorization.service
        self.assertEqual(
            [c.args for c in mock_build.call_args_list],
            [("containeranalysis", "v1beta1"), ("binaryauthorization", "v1beta1")],
        )

    def test_each_request_gets_its_own_transport(self):
        first = self.factory._build_request(None, lambda resp, content: content, "https://example.com/a")
        second = self.factory._build_request(None, lambda resp, content: content, "https://example.com/b")

        self.assertIsInstance(first, HttpRequest)
        self.assertIsNot(first.http, second.http)

    def test_container_client_shares_registry_http_client(self):
        http = self.factory.container_client()._container._http
        self.assertIsInstance(http, _HttpClient)
        self.assertIs(http, self.factory._get_http())
        self.assertEqual(http.max_attempts, 2)


class TestContextManager(unittest.TestCase):
    """Context manager support on ClientFactory."""

    def setUp(self):
        self.credentials = MagicMock(spec=Credentials)

    def test_enter_creates_session(self):
        factory = ClientFactory(self.credentials, "my-app", GcpClientConfig())
        self.assertIsNone(factory._session)

        result = factory.__enter__()

        self.assertIsInstance(factory._session, requests.Session)
        self.assertTrue(factory._owns_session)
        self.assertIs(result, factory)

    def test_exit_closes_session(self):
        factory = ClientFactory(self.credentials, "my-app", GcpClientConfig())
        factory.__enter__()
        mock_session = MagicMock(spec=requests.Session)
        factory._session = mock_session

        factory.__exit__(None, None, None)

        mock_session.close.assert_called_once()
        self.assertIsNone(factory._session)
        self.assertFalse(factory._owns_session)

    def test_registry_calls_inside_context_use_session(self):
        with ClientFactory(self.credentials, "my-app", GcpClientConfig()) as factory:
            self.assertIs(factory._get_http()._session, factory._session)
        self.assertIsNone(factory._http)

    def test_close_idempotent(self):
        factory = ClientFactory(self.credentials, "my-app", GcpClientConfig())
        factory.__enter__()
        factory.close()
        factory.close()
        self.assertIsNone(factory._session)

    def test_close_without_enter(self):
        factory = ClientFactory(self.credentials, "my-app", GcpClientConfig())
        factory.close()
        self.assertIsNone(factory._session)
