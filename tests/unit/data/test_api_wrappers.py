# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

import socket
from unittest.mock import MagicMock, Mock

import httplib2
import pytest
from googleapiclient import errors as api_errors

from Graphite.GcpClient.core._auth import _TokenPair
from Graphite.GcpClient.core.errors import HttpError, TransportError
from Graphite.GcpClient.data._base import _ApiWrapper, _http_error_from
from Graphite.GcpClient.data._cloud_kms import _CloudKMSWrapper
from Graphite.GcpClient.data._compute import _ComputeWrapper
from Graphite.GcpClient.data._container import _ContainerWrapper
from Graphite.GcpClient.data._container_analysis import _ContainerAnalysisWrapper
from Graphite.GcpClient.data._resource_manager import _CloudResourceManagerWrapper


def _api_http_error(status, content=b""):
    return api_errors.HttpError(httplib2.Response({"status": status}), content, uri="https://compute.googleapis.com/x")


def _request(response=None, side_effect=None):
    request = Mock()
    request.execute.return_value = response
    if side_effect is not None:
        request.execute.side_effect = side_effect
    return request


class TestServiceFactory:
    def test_service_is_built_lazily_once(self):
        factory = Mock(return_value="service")
        wrapper = _ApiWrapper(factory)

        factory.assert_not_called()
        assert wrapper.service == "service"
        assert wrapper.service == "service"
        factory.assert_called_once_with()


class TestExecute:
    def test_passes_num_retries(self):
        request = _request({"name": "vm-1"})
        assert _ApiWrapper(Mock(), num_retries=3)._execute(request) == {"name": "vm-1"}
        request.execute.assert_called_once_with(num_retries=3)

    def test_translates_api_http_error(self):
        content = b'{"error": {"code": 404, "message": "The resource was not found", "status": "NOT_FOUND"}}'
        request = _request(side_effect=_api_http_error(404, content))

        with pytest.raises(HttpError) as exc_info:
            _ApiWrapper(Mock())._execute(request)

        err = exc_info.value
        assert err.status_code == 404
        assert err.subcode == "http_404"
        assert err.message == "The resource was not found"
        assert err.details["service_error_code"] == "NOT_FOUND"
        assert err.details["url"] == "https://compute.googleapis.com/x"
        assert isinstance(err.__cause__, api_errors.HttpError)

    def test_translates_non_json_body(self):
        err = _http_error_from(_api_http_error(503, b"<html>unavailable</html>"))
        assert err.status_code == 503
        assert err.is_transient is True
        assert err.details["body_excerpt"] == "<html>unavailable</html>"
        assert "service_error_code" not in err.details

    @pytest.mark.parametrize(
        "exc", [httplib2.ServerNotFoundError("no dns"), socket.timeout("timed out"), ConnectionResetError()]
    )
    def test_translates_transport_errors(self, exc):
        with pytest.raises(TransportError):
            _ApiWrapper(Mock())._execute(_request(side_effect=exc))


class TestListAll:
    def test_follows_pages(self):
        collection = MagicMock()
        first, second = _request({"items": [1, 2], "nextPageToken": "t"}), _request({"items": [3]})
        collection.list.return_value = first
        collection.list_next.side_effect = [second, None]

        items = _ApiWrapper(Mock())._list_all(collection, "items", project="p")

        assert items == [1, 2, 3]
        collection.list.assert_called_once_with(project="p")
        collection.list_next.assert_any_call(previous_request=first, previous_response={"items": [1, 2], "nextPageToken": "t"})

    def test_missing_items_key(self):
        collection = MagicMock()
        collection.list.return_value = _request({})
        collection.list_next.return_value = None
        assert _ApiWrapper(Mock())._list_all(collection, "items") == []

    def test_collection_without_pagination(self):
        class Collection:
            def list(self, **kwargs):
                return _request({"clusters": ["c"]})

        assert _ApiWrapper(Mock())._list_all(Collection(), "clusters") == ["c"]


class TestComputeWrapper:
    def _wrapper(self):
        service = MagicMock()
        return _ComputeWrapper(lambda: service), service

    def test_insert_instance_with_template(self):
        wrapper, service = self._wrapper()
        service.instances.return_value.insert.return_value = _request({"name": "op"})

        wrapper.insert_instance("p", "us-west1-a", {"name": "vm"}, "global/instanceTemplates/t")

        service.instances.return_value.insert.assert_called_once_with(
            project="p", zone="us-west1-a", body={"name": "vm"}, sourceInstanceTemplate="global/instanceTemplates/t"
        )

    def test_insert_instance_without_template(self):
        wrapper, service = self._wrapper()
        service.instances.return_value.insert.return_value = _request({"name": "op"})

        wrapper.insert_instance("p", "us-west1-a", {"name": "vm"})

        service.instances.return_value.insert.assert_called_once_with(project="p", zone="us-west1-a", body={"name": "vm"})

    def test_aggregated_list_collects_scoped_lists(self):
        wrapper, service = self._wrapper()
        instances = service.instances.return_value
        instances.aggregatedList.return_value = _request(
            {"items": {"zones/a": {"instances": [{"name": "1"}]}, "zones/b": {"warning": {}}}}
        )
        instances.aggregatedList_next.return_value = None

        scoped = wrapper.aggregated_list_instances("p", "(labels.k eq v)")

        assert scoped == [{"instances": [{"name": "1"}]}, {"warning": {}}]
        instances.aggregatedList.assert_called_once_with(project="p", filter="(labels.k eq v)")

    def test_region_operation(self):
        wrapper, service = self._wrapper()
        service.regionOperations.return_value.get.return_value = _request({"status": "DONE"})

        assert wrapper.get_region_operation("p", "us-west1", "op-1") == {"status": "DONE"}
        service.regionOperations.return_value.get.assert_called_once_with(project="p", region="us-west1", operation="op-1")


class TestContainerWrapper:
    def test_get_cluster_uses_full_name(self):
        service = MagicMock()
        clusters = service.projects.return_value.locations.return_value.clusters.return_value
        clusters.get.return_value = _request({"name": "c"})

        _ContainerWrapper(lambda: service, Mock(), Mock()).get_cluster("p", "us-west1", "c")

        clusters.get.assert_called_once_with(name="projects/p/locations/us-west1/clusters/c")

    def test_list_clusters(self):
        service = MagicMock()
        clusters = service.projects.return_value.locations.return_value.clusters.return_value
        clusters.list.return_value = _request({"clusters": [{"name": "c"}]})

        result = _ContainerWrapper(lambda: service, Mock(), Mock()).list_clusters("p", "-")

        assert result == [{"name": "c"}]
        clusters.list.assert_called_once_with(parent="projects/p/locations/-")

    def test_get_manifest_digest(self):
        auth = Mock()
        auth._acquire_token.return_value = _TokenPair("Bearer", "tok")
        http = Mock()
        http._request.return_value = Mock(headers={"Docker-Content-Digest": "sha256:abc"})

        wrapper = _ContainerWrapper(Mock(), auth, http)
        digest = wrapper.get_manifest_digest("gcr.io", "p", "team/app", "latest")

        assert digest == "sha256:abc"
        args, kwargs = http._request.call_args
        assert args == ("get", "https://gcr.io/v2/p/team/app/manifests/latest")
        assert kwargs["headers"]["Authorization"] == "Bearer tok"
        assert "application/vnd.docker.distribution.manifest.v2+json" in kwargs["headers"]["Accept"]


class TestOtherWrappers:
    def test_kms_asymmetric_sign_body(self):
        service = MagicMock()
        versions = (
            service.projects.return_value.locations.return_value.keyRings.return_value.cryptoKeys.return_value.cryptoKeyVersions.return_value
        )
        versions.asymmetricSign.return_value = _request({"signature": "sig"})

        result = _CloudKMSWrapper(lambda: service).asymmetric_sign("v-name", {"sha256": "ZGln"})

        assert result == {"signature": "sig"}
        versions.asymmetricSign.assert_called_once_with(name="v-name", body={"digest": {"sha256": "ZGln"}})

    def test_container_analysis_get_occurrence_name(self):
        service = MagicMock()
        occurrences = service.projects.return_value.occurrences.return_value
        occurrences.get.return_value = _request({"name": "projects/p/occurrences/o"})

        _ContainerAnalysisWrapper(lambda: service).get_occurrence("p", "o")

        occurrences.get.assert_called_once_with(name="projects/p/occurrences/o")

    def test_resource_manager_list_projects(self):
        service = MagicMock()
        projects = service.projects.return_value
        projects.list.return_value = _request({"projects": [{"projectId": "a"}]})
        projects.list_next.return_value = None

        assert _CloudResourceManagerWrapper(lambda: service).list_projects() == [{"projectId": "a"}]
