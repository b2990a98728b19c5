# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Convenience clients for Google Cloud REST APIs.

Wraps the generated Compute Engine, GKE, Cloud KMS, Binary Authorization,
Container Analysis and Cloud Resource Manager clients with argument checks,
sorted results, self-link helpers and operation polling.
"""

from .client import ClientFactory
from .core.config import GcpClientConfig
from .core.errors import (
    GcpClientError,
    HttpError,
    OperationError,
    OperationTimeoutError,
    TransportError,
    ValidationError,
)
from .operations import (
    BinaryAuthorizationClient,
    CloudKMSClient,
    CloudResourceManagerClient,
    ComputeClient,
    ContainerAnalysisClient,
    ContainerClient,
)

__version__ = "0.1.0"

__all__ = [
    "ClientFactory",
    "GcpClientConfig",
    "BinaryAuthorizationClient",
    "CloudKMSClient",
    "CloudResourceManagerClient",
    "ComputeClient",
    "ContainerAnalysisClient",
    "ContainerClient",
    "GcpClientError",
    "HttpError",
    "OperationError",
    "OperationTimeoutError",
    "TransportError",
    "ValidationError",
]
