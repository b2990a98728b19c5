# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Cloud KMS client for the GCP client library."""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Any, Dict, Tuple

from ..common.constants import (
    CRYPTO_KEY_VERSION_STATE_ENABLED,
    KEY_PURPOSE_DECRYPT,
    KEY_PURPOSE_SIGN,
    SUPPORTED_DIGESTS,
)
from ..core._error_codes import VALIDATION_INVALID_KEY_ALGORITHM, VALIDATION_KEY_PURPOSE_MISMATCH
from ..core._validation import _require_text
from ..core.errors import ValidationError
from ..data._cloud_kms import _CloudKMSWrapper
from ..utils._resources import process_resource_list, sort_key

_logger = logging.getLogger(__name__)

__all__ = ["CloudKMSClient", "parse_key_purpose", "parse_digest_algorithm"]

_by_name = sort_key("name")


def _algorithm_tokens(algorithm: str) -> list:
    _require_text(algorithm=algorithm)
    tokens = algorithm.split("_")
    if not 3 <= len(tokens) <= 5:
        raise ValidationError(
            f"Invalid key algorithm provided: {algorithm}",
            subcode=VALIDATION_INVALID_KEY_ALGORITHM,
            details={"algorithm": algorithm},
        )
    return tokens


def parse_key_purpose(algorithm: str) -> str:
    """Return the purpose encoded in a key version algorithm.

    ``"RSA_SIGN_PKCS1_4096_SHA512"`` gives ``"SIGN"`` and
    ``"RSA_DECRYPT_OAEP_2048_SHA256"`` gives ``"DECRYPT"``.

    :raises ~Graphite.GcpClient.core.errors.ValidationError: If the algorithm has no
        recognizable purpose, including symmetric algorithms.
    """
    tokens = _algorithm_tokens(algorithm)
    purpose = tokens[1]
    if purpose in (KEY_PURPOSE_SIGN, KEY_PURPOSE_DECRYPT):
        return purpose
    if purpose in ("KEY", "SYMMETRIC"):
        message = f"Key with unspecified purpose provided: {algorithm}"
    else:
        message = f"Invalid key algorithm provided: {algorithm}"
    raise ValidationError(message, subcode=VALIDATION_INVALID_KEY_ALGORITHM, details={"algorithm": algorithm})


def parse_digest_algorithm(algorithm: str) -> str:
    """Return the ``hashlib`` name of the digest encoded in a key version algorithm.

    ``"EC_SIGN_P384_SHA384"`` gives ``"sha384"``.

    :raises ~Graphite.GcpClient.core.errors.ValidationError: If the algorithm does not end in
        ``SHA256``, ``SHA384`` or ``SHA512``.
    """
    tokens = _algorithm_tokens(algorithm)
    digest = tokens[-1].lower()
    if digest in SUPPORTED_DIGESTS:
        return digest
    if tokens[-1] in ("ENCRYPTION", "UNSPECIFIED"):
        message = f"Key with unspecified digest algorithm provided: {algorithm}"
    else:
        message = f"Invalid key algorithm provided: {algorithm}"
    raise ValidationError(message, subcode=VALIDATION_INVALID_KEY_ALGORITHM, details={"algorithm": algorithm})


class CloudKMSClient:
    """Client for Cloud KMS key rings, keys and key versions.

    Arguments are short identifiers. Full resource names such as
    ``projects/p/locations/l/keyRings/r`` are assembled here.

    :param cloud_kms: Wrapper around the generated ``cloudkms`` v1 service.
    :type cloud_kms: ~Graphite.GcpClient.data._cloud_kms._CloudKMSWrapper
    """

    def __init__(self, cloud_kms: _CloudKMSWrapper) -> None:
        self._kms = cloud_kms

    @staticmethod
    def _key_name(project_id: str, location: str, key_ring: str, crypto_key: str) -> str:
        return f"projects/{project_id}/locations/{location}/keyRings/{key_ring}/cryptoKeys/{crypto_key}"

    def list_locations(self, project_id: str) -> Tuple[Dict[str, Any], ...]:
        """List KMS locations of a project, sorted by ``displayName``."""
        _require_text(project_id=project_id)
        return process_resource_list(self._kms.list_locations(f"projects/{project_id}"), sort_key("displayName"))

    def list_key_rings(self, project_id: str, location: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id, location=location)
        return process_resource_list(
            self._kms.list_key_rings(f"projects/{project_id}/locations/{location}"), _by_name
        )

    def list_crypto_keys(self, project_id: str, location: str, key_ring: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id, location=location, key_ring=key_ring)
        return process_resource_list(
            self._kms.list_crypto_keys(f"projects/{project_id}/locations/{location}/keyRings/{key_ring}"),
            _by_name,
        )

    def get_crypto_key(self, project_id: str, location: str, key_ring: str, crypto_key: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, location=location, key_ring=key_ring, crypto_key=crypto_key)
        return self._kms.get_crypto_key(self._key_name(project_id, location, key_ring, crypto_key))

    def list_crypto_key_versions(
        self, project_id: str, location: str, key_ring: str, crypto_key: str
    ) -> Tuple[Dict[str, Any], ...]:
        """List the ``ENABLED`` versions of a key, sorted by name."""
        _require_text(project_id=project_id, location=location, key_ring=key_ring, crypto_key=crypto_key)
        return process_resource_list(
            self._kms.list_crypto_key_versions(self._key_name(project_id, location, key_ring, crypto_key)),
            _by_name,
            lambda v: v.get("state") == CRYPTO_KEY_VERSION_STATE_ENABLED,
        )

    def get_crypto_key_version(
        self, project_id: str, location: str, key_ring: str, crypto_key: str, crypto_key_version: str
    ) -> Dict[str, Any]:
        _require_text(
            project_id=project_id,
            location=location,
            key_ring=key_ring,
            crypto_key=crypto_key,
            crypto_key_version=crypto_key_version,
        )
        name = f"{self._key_name(project_id, location, key_ring, crypto_key)}/cryptoKeyVersions/{crypto_key_version}"
        return self._kms.get_crypto_key_version(name)

    def get_public_key(
        self, project_id: str, location: str, key_ring: str, crypto_key: str, crypto_key_version: str
    ) -> Dict[str, Any]:
        """Fetch the PEM public key of an asymmetric key version."""
        _require_text(
            project_id=project_id,
            location=location,
            key_ring=key_ring,
            crypto_key=crypto_key,
            crypto_key_version=crypto_key_version,
        )
        name = f"{self._key_name(project_id, location, key_ring, crypto_key)}/cryptoKeyVersions/{crypto_key_version}"
        return self._kms.get_public_key(name)

    def asymmetric_sign(
        self,
        project_id: str,
        location: str,
        key_ring: str,
        crypto_key: str,
        crypto_key_version: str,
        payload: str,
    ) -> str:
        """Sign ``payload`` with an asymmetric signing key version.

        The payload is hashed locally with the digest named by the key version's
        algorithm. Only the digest is sent to KMS.

        :param payload: Text to sign. Encoded as UTF-8 before hashing.
        :type payload: str
        :return: The base64-encoded signature.
        :rtype: str
        :raises ~Graphite.GcpClient.core.errors.ValidationError: If an argument is empty, or the
            key version is not a signing key with a supported digest.
        """
        _require_text(
            project_id=project_id,
            location=location,
            key_ring=key_ring,
            crypto_key=crypto_key,
            crypto_key_version=crypto_key_version,
            payload=payload,
        )
        name = f"{self._key_name(project_id, location, key_ring, crypto_key)}/cryptoKeyVersions/{crypto_key_version}"
        version = self._kms.get_crypto_key_version(name) or {}
        algorithm = version.get("algorithm")
        purpose = parse_key_purpose(algorithm)
        if purpose != KEY_PURPOSE_SIGN:
            raise ValidationError(
                f"Key specified should have purpose SIGN, instead was: {purpose}",
                subcode=VALIDATION_KEY_PURPOSE_MISMATCH,
                details={"algorithm": algorithm},
            )
        digest_name = parse_digest_algorithm(algorithm)
        digest = hashlib.new(digest_name, payload.encode("utf-8")).digest()
        _logger.debug("Signing %s digest with %s.", digest_name, name)
        response = self._kms.asymmetric_sign(name, {digest_name: base64.b64encode(digest).decode("ascii")})
        return (response or {}).get("signature")
