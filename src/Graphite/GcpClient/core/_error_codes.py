# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# Validation subcodes
VALIDATION_EMPTY_ARGUMENT = "validation_empty_argument"
VALIDATION_MISSING_ARGUMENT = "validation_missing_argument"
VALIDATION_NON_POSITIVE_TIMEOUT = "validation_non_positive_timeout"
VALIDATION_NEGATIVE_TIMEOUT = "validation_negative_timeout"
VALIDATION_INVALID_POLL_INTERVAL = "validation_invalid_poll_interval"
VALIDATION_INVALID_RESOURCE_URI = "validation_invalid_resource_uri"
VALIDATION_INVALID_KEY_ALGORITHM = "validation_invalid_key_algorithm"
VALIDATION_KEY_PURPOSE_MISMATCH = "validation_key_purpose_mismatch"

# Operation subcodes
OPERATION_FAILED = "operation_failed"
OPERATION_TIMEOUT = "operation_timeout"


def http_subcode(status_code: int) -> str:
    """Return the ``http_<status>`` subcode for a status code."""
    return f"http_{status_code}"
