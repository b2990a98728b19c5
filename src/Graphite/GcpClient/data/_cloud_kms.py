# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Cloud KMS v1 request wrapper."""

from __future__ import annotations

from typing import Any, Dict, List

from ._base import _ApiWrapper


class _CloudKMSWrapper(_ApiWrapper):
    """Flat methods over the generated ``cloudkms`` v1 service. Arguments are full resource names."""

    def _locations(self) -> Any:
        return self.service.projects().locations()

    def _key_rings(self) -> Any:
        return self._locations().keyRings()

    def _crypto_keys(self) -> Any:
        return self._key_rings().cryptoKeys()

    def _crypto_key_versions(self) -> Any:
        return self._crypto_keys().cryptoKeyVersions()

    def list_locations(self, project_name: str) -> List[Dict[str, Any]]:
        return self._list_all(self._locations(), "locations", name=project_name)

    def list_key_rings(self, location_name: str) -> List[Dict[str, Any]]:
        return self._list_all(self._key_rings(), "keyRings", parent=location_name)

    def list_crypto_keys(self, key_ring_name: str) -> List[Dict[str, Any]]:
        return self._list_all(self._crypto_keys(), "cryptoKeys", parent=key_ring_name)

    def get_crypto_key(self, crypto_key_name: str) -> Dict[str, Any]:
        return self._execute(self._crypto_keys().get(name=crypto_key_name))

    def list_crypto_key_versions(self, crypto_key_name: str) -> List[Dict[str, Any]]:
        return self._list_all(self._crypto_key_versions(), "cryptoKeyVersions", parent=crypto_key_name)

    def get_crypto_key_version(self, version_name: str) -> Dict[str, Any]:
        return self._execute(self._crypto_key_versions().get(name=version_name))

    def get_public_key(self, version_name: str) -> Dict[str, Any]:
        return self._execute(self._crypto_key_versions().getPublicKey(name=version_name))

    def asymmetric_sign(self, version_name: str, digest: Dict[str, str]) -> Dict[str, Any]:
        """Sign ``digest`` (e.g. ``{"sha256": "<base64>"}``) with the given key version."""
        request = self._crypto_key_versions().asymmetricSign(name=version_name, body={"digest": digest})
        return self._execute(request)
