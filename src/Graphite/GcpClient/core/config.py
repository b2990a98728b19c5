# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional

from ._error_codes import VALIDATION_INVALID_POLL_INTERVAL
from .errors import ValidationError


@dataclass(frozen=True)
class GcpClientConfig:
    """
    Configuration settings for GCP client operations.

    :param http_retries: Maximum number of retry attempts for HTTP requests (default: 5). Passed as
        ``num_retries`` to generated API requests and used as the attempt budget of the registry HTTP client.
    :type http_retries: int or None
    :param http_backoff: Base delay in seconds for exponential backoff in the registry HTTP client (default: 0.5).
    :type http_backoff: float or None
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param operation_poll_interval: Seconds between fetches while waiting for a Compute operation (default: 5.0).
    :type operation_poll_interval: float
    :param scan_poll_interval: Seconds between fetches while waiting for a vulnerability scan (default: 1.0).
    :type scan_poll_interval: float
    :param poll_retry_non_transient_errors: When ``True`` (default) every failed fetch during polling is
        treated as "not done yet". When ``False``, non-transient HTTP errors (e.g. 403, 404) abort the wait.
    :type poll_retry_non_transient_errors: bool
    :param log_level: Optional level name (e.g. ``"DEBUG"``) applied to the library logger.
    :type log_level: str or None
    :raises ~Graphite.GcpClient.core.errors.ValidationError: If a poll interval is not a positive finite number.
    """

    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_timeout: Optional[float] = None

    # Long-running operation polling
    operation_poll_interval: float = 5.0
    scan_poll_interval: float = 1.0
    poll_retry_non_transient_errors: bool = True

    log_level: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("operation_poll_interval", "scan_poll_interval"):
            value = getattr(self, name)
            if not _is_positive_seconds(value):
                raise ValidationError(
                    f"{name} must be a positive number of seconds, got {value!r}.",
                    subcode=VALIDATION_INVALID_POLL_INTERVAL,
                    details={"argument": name},
                )

    @property
    def num_retries(self) -> int:
        return self.http_retries if self.http_retries is not None else 5

    @classmethod
    def from_env(cls) -> "GcpClientConfig":
        """
        Create a configuration instance from ``GCP_CLIENT_*`` environment variables.

        Unset or unparsable values fall back to the defaults, as does a poll interval that is
        not a positive number.

        :return: Configuration instance.
        :rtype: ~Graphite.GcpClient.core.config.GcpClientConfig
        """
        return cls(
            http_retries=_env_number("GCP_CLIENT_HTTP_RETRIES", int),
            http_backoff=None,  # Will default to 0.5 in _HttpClient
            http_timeout=_env_number("GCP_CLIENT_HTTP_TIMEOUT", float),
            operation_poll_interval=_env_poll_interval("GCP_CLIENT_POLL_INTERVAL", 5.0),
            log_level=os.environ.get("GCP_CLIENT_LOG_LEVEL") or None,
        )


def _env_number(name, cast):
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw)
    except ValueError:
        return None


def _is_positive_seconds(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _env_poll_interval(name, default):
    value = _env_number(name, float)
    return value if _is_positive_seconds(value) else default
