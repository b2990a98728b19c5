# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Bounded fetch-and-sleep loop used to wait on asynchronous cloud resources."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, TypeVar

from .errors import GcpClientError, HttpError, OperationTimeoutError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def _retry_all_errors(exc: GcpClientError) -> bool:
    return True


def _retry_transient_errors(exc: GcpClientError) -> bool:
    """Only non-transient HTTP answers (e.g. 403, 404) are fatal."""
    return not isinstance(exc, HttpError) or exc.is_transient


def _poll_until(
    fetch: Callable[[], Optional[T]],
    *,
    timeout_millis: float,
    interval: float,
    description: str,
    retry_error: Callable[[GcpClientError], bool] = _retry_all_errors,
) -> T:
    """
    Call ``fetch`` until it returns something other than ``None`` or the deadline passes.

    The first fetch happens immediately. Between fetches the loop sleeps ``interval``
    seconds, never past the deadline. A :class:`GcpClientError` raised by ``fetch`` is
    logged and counts as "not yet" unless ``retry_error`` rejects it, in which case it
    propagates.

    :param fetch: Zero-argument callable returning the terminal value or ``None``.
    :param timeout_millis: Time budget in milliseconds.
    :param interval: Seconds to sleep between fetches.
    :param description: Human-readable subject used in log and error messages.
    :param retry_error: Predicate deciding whether a fetch error is retried.
    :return: The first non-``None`` value returned by ``fetch``.
    :raises ~Graphite.GcpClient.core.errors.OperationTimeoutError: If the deadline passes first.
    """
    deadline = time.monotonic() + timeout_millis / 1000.0
    while True:
        _logger.debug("Waiting for %s to complete.", description)
        try:
            result = fetch()
        except GcpClientError as exc:
            if not retry_error(exc):
                raise
            _logger.warning("Error polling %s: %s. Retrying ...", description, exc)
            result = None
        if result is not None:
            return result

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise OperationTimeoutError(
                f"Timed out waiting for {description} to complete.",
                timeout_millis=timeout_millis,
            )
        time.sleep(min(interval, remaining))
