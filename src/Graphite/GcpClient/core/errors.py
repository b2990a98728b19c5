# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Structured error types raised by the GCP client library.

Every error derives from :class:`GcpClientError` and carries a machine-readable
``code`` plus an optional ``subcode`` (see :mod:`~Graphite.GcpClient.core._error_codes`).
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

from ._error_codes import (
    OPERATION_FAILED,
    OPERATION_TIMEOUT,
    TRANSIENT_STATUS_CODES,
    http_subcode,
)


class GcpClientError(Exception):
    """Base structured error for the GCP client library."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(GcpClientError, ValueError):
    """A local precondition failed. Never retried."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class HttpError(GcpClientError):
    """The API answered with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: Optional[bool] = None,
        reason: Optional[str] = None,
        service_error_code: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if reason is not None:
            d["reason"] = reason
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if url is not None:
            d["url"] = url
        if is_transient is None:
            is_transient = status_code in TRANSIENT_STATUS_CODES
        super().__init__(
            message,
            code="http_error",
            subcode=http_subcode(status_code),
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient,
        )


class TransportError(GcpClientError):
    """The request never produced an HTTP response (connection, DNS, socket failures)."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="transport_error", details=details, source="client", is_transient=True)


class OperationError(GcpClientError):
    """
    A long-running operation completed but reported an error.

    :param error: The ``error`` payload of the completed operation, typically
        ``{"errors": [{"code": ..., "message": ...}]}``.
    :type error: dict
    :param operation: The final operation resource, when available.
    :type operation: dict or None
    """

    def __init__(self, error: Dict[str, Any], message: str = "", *, operation: Optional[Dict[str, Any]] = None) -> None:
        self.error = error or {}
        self.operation = operation
        if not message:
            errors = self.error.get("errors") or []
            message = "; ".join(e.get("message", e.get("code", "")) for e in errors) or "Operation failed."
        super().__init__(
            message,
            code="operation_error",
            subcode=OPERATION_FAILED,
            details={"error": self.error},
            source="server",
        )


class OperationTimeoutError(GcpClientError):
    """Waiting for an asynchronous operation exceeded the caller's timeout."""

    def __init__(self, message: str, *, timeout_millis: Optional[int] = None) -> None:
        details = {"timeout_millis": timeout_millis} if timeout_millis is not None else None
        super().__init__(message, code="operation_timeout", subcode=OPERATION_TIMEOUT, details=details)


__all__ = [
    "GcpClientError",
    "ValidationError",
    "HttpError",
    "TransportError",
    "OperationError",
    "OperationTimeoutError",
]
