# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

from unittest.mock import MagicMock, Mock, patch

import pytest
import requests

from Graphite.GcpClient.core._http import _HttpClient
from Graphite.GcpClient.core.errors import HttpError, TransportError


class TestHttpClientRetryLogic:
    """Retry logic in the registry HTTP client."""

    def test_default_configuration(self):
        client = _HttpClient()
        assert client.max_attempts == 5
        assert client.base_delay == 0.5
        assert client.default_timeout is None

    def test_zero_retries_still_makes_one_attempt(self):
        assert _HttpClient(retries=0).max_attempts == 1

    @patch("requests.request")
    def test_successful_request_no_retry(self, mock_request):
        mock_request.return_value = Mock(status_code=200)

        response = _HttpClient()._request("get", "https://gcr.io/v2/p/app/manifests/latest")

        assert response.status_code == 200
        assert mock_request.call_count == 1
        assert mock_request.call_args.kwargs["timeout"] == 10

    @patch("requests.request")
    def test_post_uses_longer_default_timeout(self, mock_request):
        mock_request.return_value = Mock(status_code=200)
        _HttpClient()._request("post", "https://example.com")
        assert mock_request.call_args.kwargs["timeout"] == 120

    @patch("requests.request")
    def test_configured_timeout_wins(self, mock_request):
        mock_request.return_value = Mock(status_code=200)
        _HttpClient(timeout=3)._request("get", "https://example.com")
        assert mock_request.call_args.kwargs["timeout"] == 3

    @patch("requests.request")
    @patch("time.sleep")
    def test_network_error_retry(self, mock_sleep, mock_request):
        mock_request.side_effect = [
            requests.exceptions.ConnectionError("Network error"),
            requests.exceptions.ConnectionError("Network error"),
            Mock(status_code=200),
        ]

        response = _HttpClient()._request("get", "https://example.com")

        assert response.status_code == 200
        assert mock_request.call_count == 3
        # Exponential backoff: 0.5, 1.0
        assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.0]

    @patch("requests.request")
    @patch("time.sleep")
    def test_network_error_exhausts_attempts(self, mock_sleep, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(TransportError) as exc_info:
            _HttpClient(retries=3)._request("get", "https://example.com")

        assert mock_request.call_count == 3
        assert exc_info.value.is_transient is True
        assert exc_info.value.details == {"url": "https://example.com"}

    @patch("requests.request")
    @patch("time.sleep")
    def test_transient_status_retry(self, mock_sleep, mock_request):
        mock_request.side_effect = [Mock(status_code=503), Mock(status_code=200)]

        response = _HttpClient()._request("get", "https://example.com")

        assert response.status_code == 200
        mock_sleep.assert_called_once_with(0.5)

    @patch("requests.request")
    @patch("time.sleep")
    def test_last_transient_status_raises(self, mock_sleep, mock_request):
        mock_request.return_value = Mock(status_code=429, reason="Too Many Requests", text="slow down")

        with pytest.raises(HttpError) as exc_info:
            _HttpClient(retries=2)._request("get", "https://example.com")

        assert mock_request.call_count == 2
        assert exc_info.value.status_code == 429
        assert exc_info.value.is_transient is True

    @patch("requests.request")
    @patch("time.sleep")
    def test_non_transient_status_not_retried(self, mock_sleep, mock_request):
        mock_request.return_value = Mock(status_code=404, reason="Not Found", text="x" * 500)

        with pytest.raises(HttpError) as exc_info:
            _HttpClient()._request("get", "https://example.com/v2/p/app/manifests/nope")

        assert mock_request.call_count == 1
        mock_sleep.assert_not_called()
        err = exc_info.value
        assert err.subcode == "http_404"
        assert err.details["reason"] == "Not Found"
        assert len(err.details["body_excerpt"]) == 200
        assert err.details["url"] == "https://example.com/v2/p/app/manifests/nope"

    def test_uses_session_when_given(self):
        session = MagicMock(spec=requests.Session)
        session.request.return_value = Mock(status_code=200)

        client = _HttpClient(session=session)
        client._request("get", "https://example.com")

        session.request.assert_called_once()
        client.close()
        session.close.assert_called_once()
        client.close()
        session.close.assert_called_once()
