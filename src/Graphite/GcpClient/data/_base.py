# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Shared plumbing for the internal API wrappers.

Wrappers exist to flatten the generated client's chained calls into direct
methods that are easy to read and to mock. They do no argument checking. They
execute requests with ``num_retries``, page through list results, and translate
``googleapiclient`` and transport failures into the library's structured errors.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httplib2
from googleapiclient import errors as api_errors

from ..core.errors import HttpError, TransportError


def _http_error_from(exc: api_errors.HttpError) -> HttpError:
    """Map a ``googleapiclient`` HttpError onto :class:`~Graphite.GcpClient.core.errors.HttpError`."""
    status = int(getattr(exc.resp, "status", 0) or 0)
    content = exc.content or b""
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    service_error_code: Optional[str] = None
    message: Optional[str] = None
    try:
        body = json.loads(content) if content else {}
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            service_error_code = error.get("status")
            message = error.get("message")
    except ValueError:
        pass
    reason = getattr(exc, "reason", None)
    return HttpError(
        message or reason or f"HTTP {status}",
        status,
        reason=reason,
        service_error_code=service_error_code,
        body_excerpt=content[:200] if content else None,
        url=getattr(exc, "uri", None),
    )


class _ApiWrapper:
    """
    Base class for the generated-client wrappers.

    :param service_factory: Zero-argument callable building the generated service. Called once,
        on first use, so constructing a wrapper never touches the network.
    :param num_retries: Passed to every ``execute()`` call.
    """

    def __init__(self, service_factory: Callable[[], Any], num_retries: int = 5) -> None:
        self._service_factory = service_factory
        self._service: Any = None
        self._num_retries = num_retries

    @property
    def service(self) -> Any:
        if self._service is None:
            self._service = self._service_factory()
        return self._service

    def _execute(self, request: Any) -> Any:
        try:
            return request.execute(num_retries=self._num_retries)
        except api_errors.HttpError as exc:
            raise _http_error_from(exc) from exc
        except (httplib2.HttpLib2Error, OSError) as exc:
            raise TransportError(f"Request failed before a response was received: {exc}") from exc

    def _list_all(self, collection: Any, items_key: str, method: str = "list", **kwargs: Any) -> List[Dict[str, Any]]:
        """Execute ``collection.<method>(**kwargs)`` and follow ``<method>_next`` until exhausted."""
        items: List[Dict[str, Any]] = []
        request = getattr(collection, method)(**kwargs)
        next_page = getattr(collection, f"{method}_next", None)
        while request is not None:
            response = self._execute(request) or {}
            items.extend(response.get(items_key) or [])
            if next_page is None:
                break
            request = next_page(previous_request=request, previous_response=response)
        return items
