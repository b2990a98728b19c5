# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Guest attribute models for Compute Engine instances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class GuestAttribute:
    """
    A single guest attribute published by software running inside an instance.

    :param namespace: Attribute namespace, e.g. ``"hostkeys"``.
    :type namespace: str
    :param key: Attribute key within the namespace.
    :type key: str
    :param value: Attribute value.
    :type value: str
    """

    namespace: str
    key: str
    value: str

    @classmethod
    def from_api_response(cls, item: Dict[str, Any]) -> "GuestAttribute":
        """
        Create a GuestAttribute from one entry of ``queryValue.items``.

        :param item: Raw API entry.
        :type item: dict[str, Any]
        :rtype: GuestAttribute
        """
        return cls(
            namespace=item.get("namespace", ""),
            key=item.get("key", ""),
            value=item.get("value", ""),
        )

    @classmethod
    def list_from_query_result(cls, result: Optional[Dict[str, Any]]) -> Tuple["GuestAttribute", ...]:
        """Extract every attribute from a ``getGuestAttributes`` response; missing parts give ``()``."""
        query_value = (result or {}).get("queryValue") or {}
        return tuple(cls.from_api_response(i) for i in query_value.get("items") or [])
