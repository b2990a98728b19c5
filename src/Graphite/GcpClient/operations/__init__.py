# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Per-API client classes for the GCP client library.

Each client validates arguments, post-processes the results of its private
wrapper, and implements any waiting the API needs. Obtain instances from
:class:`~Graphite.GcpClient.client.ClientFactory`.
"""

from .binary_authorization import BinaryAuthorizationClient
from .cloud_kms import CloudKMSClient
from .compute import ComputeClient
from .container import ContainerClient
from .container_analysis import ContainerAnalysisClient
from .resource_manager import CloudResourceManagerClient

__all__ = [
    "BinaryAuthorizationClient",
    "CloudKMSClient",
    "CloudResourceManagerClient",
    "ComputeClient",
    "ContainerAnalysisClient",
    "ContainerClient",
]
