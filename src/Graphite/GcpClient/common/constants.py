# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Constants for the Google Cloud REST APIs wrapped by this library.

Status names, well-known identifiers and header values used when talking to
Compute Engine, GKE, Container Analysis and the container registry.
"""

# Generated API names and versions, as accepted by googleapiclient.discovery.build
COMPUTE_API = ("compute", "v1")
CONTAINER_API = ("container", "v1")
CLOUD_KMS_API = ("cloudkms", "v1")
BINARY_AUTHORIZATION_API = ("binaryauthorization", "v1beta1")
CONTAINER_ANALYSIS_API = ("containeranalysis", "v1beta1")
CLOUD_RESOURCE_MANAGER_API = ("cloudresourcemanager", "v1")

# Compute Engine
OPERATION_STATUS_DONE = "DONE"
DEPRECATION_STATE_DEPRECATED = "DEPRECATED"
LOCAL_DISK_TYPE_PREFIX = "local-"

# GKE
LOCATION_WILDCARD = "-"
"""Lists resources across all locations of a project."""

# Cloud KMS
CRYPTO_KEY_VERSION_STATE_ENABLED = "ENABLED"
KEY_PURPOSE_SIGN = "SIGN"
KEY_PURPOSE_DECRYPT = "DECRYPT"
SUPPORTED_DIGESTS = ("sha256", "sha384", "sha512")

# Container Analysis
VULNERABILITY_NOTE_PROJECT_ID = "goog-analysis"
VULNERABILITY_NOTE_ID = "PACKAGE_VULNERABILITY"
VULNERABILITY_KIND = "VULNERABILITY"
ATTESTATION_KIND = "ATTESTATION"
FINISHED_SCAN_STATUSES = ("FINISHED_SUCCESS", "FINISHED_FAILED", "FINISHED_UNSUPPORTED")

# Container registry (Docker Registry HTTP API v2)
REGISTRY_MANIFEST_URL = "https://{host}/v2/{project}/{name}/manifests/{tag}"
REGISTRY_MANIFEST_ACCEPT = (
    "application/vnd.oci.image.manifest.v1+json,application/vnd.docker.distribution.manifest.v2+json"
)
REGISTRY_DIGEST_HEADER = "Docker-Content-Digest"
