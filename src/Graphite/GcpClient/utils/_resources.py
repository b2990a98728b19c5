# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Helpers for post-processing resources returned by the generated Google API clients."""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple, TypeVar

from ..core._validation import _require_text
from ..models.instance_resource_data import InstanceResourceData

T = TypeVar("T")

_INSTANCE_RESOURCE_DATA_RE = re.compile(
    r"https://www\.googleapis\.com/compute/v1/projects/([0-9a-zA-Z\-]+)/zones/([a-z0-9\-]+)/instances/([0-9a-zA-Z\-]+)"
)


def _keep_all(item: Any) -> bool:
    return True


def process_resource_list(
    items: Optional[Iterable[T]],
    key: Callable[[T], Any],
    predicate: Optional[Callable[[T], bool]] = None,
) -> Tuple[T, ...]:
    """
    Filter and sort a list of GCP resources.

    :param items: Resources produced by a generated API request. ``None`` is treated as empty.
    :type items: iterable or None
    :param key: Sort key applied to each kept resource. Sorting is stable.
    :type key: callable
    :param predicate: Resources for which this returns ``True`` are kept. Defaults to keeping everything.
    :type predicate: callable or None
    :return: An immutable tuple, empty if ``items`` is ``None`` or empty. ``items`` is not modified.
    :rtype: tuple
    """
    if not items:
        return ()
    keep = predicate or _keep_all
    return tuple(sorted((i for i in items if keep(i)), key=key))


def sort_key(field: str) -> Callable[[Mapping[str, Any]], Any]:
    """Sort key reading ``field`` from a resource dict; a missing field sorts as ``""``."""

    def _key(resource: Mapping[str, Any]) -> Any:
        value = resource.get(field)
        return "" if value is None else value

    return _key


def name_from_self_link(self_link: str) -> str:
    """
    Strip the path prefix from a self link, returning only the resource name.

    ``"projects/example/zones/us-west1-a/instances/vm-1"`` gives ``"vm-1"``; a bare
    name is returned unchanged.

    :raises ~Graphite.GcpClient.core.errors.ValidationError: If ``self_link`` is empty.
    """
    _require_text(self_link=self_link)
    return self_link[self_link.rfind("/") + 1 :]


def build_labels_filter_string(labels: Mapping[str, str]) -> str:
    """
    Convert labels into the filter format used by Compute list requests.

    ``{"k1": "v1", "k2": "v2"}`` gives ``"(labels.k1 eq v1) (labels.k2 eq v2)"``.
    """
    return " ".join(f"(labels.{k} eq {v})" for k, v in labels.items())


def build_filter_string(filters: Mapping[str, str]) -> str:
    """
    Build an ``AND``-joined equality filter: ``{"k1": "v1", "k2": "v2"}`` gives ``'k1="v1" AND k2="v2"'``.
    """
    return " AND ".join(f'{k}="{v}"' for k, v in filters.items())


def parse_instance_resource_data(self_link: str) -> Optional[InstanceResourceData]:
    """
    Parse project, zone and name out of a Compute instance self link.

    :return: The parsed data, or ``None`` if the link is not an instance self link.
    :rtype: ~Graphite.GcpClient.models.instance_resource_data.InstanceResourceData or None
    :raises ~Graphite.GcpClient.core.errors.ValidationError: If ``self_link`` is empty.
    """
    _require_text(self_link=self_link)
    match = _INSTANCE_RESOURCE_DATA_RE.search(self_link)
    if match is None:
        return None
    return InstanceResourceData(project_id=match.group(1), zone=match.group(2), name=match.group(3))
