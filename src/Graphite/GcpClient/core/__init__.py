# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Core infrastructure components for the GCP client library.

This module contains the foundational components: configuration, the structured
error taxonomy, credential handling, the registry HTTP client, and the polling loop.
"""

from .config import GcpClientConfig
from .errors import (
    GcpClientError,
    ValidationError,
    HttpError,
    TransportError,
    OperationError,
    OperationTimeoutError,
)

__all__ = [
    "GcpClientConfig",
    "GcpClientError",
    "ValidationError",
    "HttpError",
    "TransportError",
    "OperationError",
    "OperationTimeoutError",
]
