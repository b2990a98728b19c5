# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Retrying ``requests`` client for calls outside the generated Google APIs.

:class:`~Graphite.GcpClient.core._http._HttpClient` backs the container registry
manifest lookups. Network errors and transient statuses are retried with
exponential backoff; anything else surfaces as the library's structured errors.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import requests

from ._error_codes import TRANSIENT_STATUS_CODES
from .errors import HttpError, TransportError

_logger = logging.getLogger(__name__)


class _HttpClient:
    """
    Small ``requests`` wrapper shared by the registry calls of one client factory.

    :param retries: Total attempts per request, at least one. Defaults to 5.
    :type retries: :class:`int` | None
    :param backoff: Delay in seconds before the first retry; doubled on each retry. Defaults to 0.5.
    :type backoff: :class:`float` | None
    :param timeout: Timeout in seconds applied to every request. ``None`` picks one by method.
    :type timeout: :class:`float` | None
    :param session: Session to send requests through. Without one, module-level ``requests`` calls are used.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.max_attempts = max(1, retries if retries is not None else 5)
        self.base_delay = 0.5 if backoff is None else backoff
        self.default_timeout: Optional[float] = timeout
        self._session = session

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Execute an HTTP request with retry, timeout defaults and error mapping.

        Applies default timeouts based on HTTP method (120s for POST/DELETE, 10s for others).
        Network errors and transient statuses (429, 5xx) are retried with exponential backoff.

        :return: The successful response.
        :rtype: :class:`requests.Response`
        :raises ~Graphite.GcpClient.core.errors.HttpError: On a non-2xx final response.
        :raises ~Graphite.GcpClient.core.errors.TransportError: If every attempt failed without a response.
        """
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                m = (method or "").lower()
                kwargs["timeout"] = 120 if m in ("post", "delete") else 10

        for attempt in range(self.max_attempts):
            last = attempt == self.max_attempts - 1
            try:
                if self._session is not None:
                    response = self._session.request(method, url, **kwargs)
                else:
                    response = requests.request(method, url, **kwargs)
            except requests.exceptions.RequestException as exc:
                if last:
                    raise TransportError(f"{method.upper()} {url} failed: {exc}", details={"url": url}) from exc
                _logger.debug("Retrying %s %s after network error: %s", method.upper(), url, exc)
                time.sleep(self.base_delay * (2**attempt))
                continue

            if response.status_code in TRANSIENT_STATUS_CODES and not last:
                _logger.debug("Retrying %s %s after HTTP %s", method.upper(), url, response.status_code)
                time.sleep(self.base_delay * (2**attempt))
                continue
            if response.status_code >= 400:
                raise HttpError(
                    f"{method.upper()} {url} returned HTTP {response.status_code}",
                    response.status_code,
                    reason=getattr(response, "reason", None),
                    body_excerpt=(response.text or "")[:200],
                    url=url,
                )
            return response
        raise RuntimeError("Unexpected end of retry loop")

    def close(self) -> None:
        """Close the session, if any. Safe to call multiple times."""
        if self._session is not None:
            self._session.close()
            self._session = None
