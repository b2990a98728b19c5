# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Compute Engine client for the GCP client library."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..common.constants import DEPRECATION_STATE_DEPRECATED, LOCAL_DISK_TYPE_PREFIX, OPERATION_STATUS_DONE
from ..core._polling import _poll_until, _retry_all_errors, _retry_transient_errors
from ..core._validation import _require_present, _require_positive_timeout, _require_text
from ..core.config import GcpClientConfig
from ..core.errors import GcpClientError, HttpError, OperationError
from ..data._compute import _ComputeWrapper
from ..models.guest_attribute import GuestAttribute
from ..models.instance_resource_data import InstanceResourceData
from ..utils._resources import (
    build_labels_filter_string,
    name_from_self_link,
    parse_instance_resource_data,
    process_resource_list,
    sort_key,
)

_logger = logging.getLogger(__name__)

__all__ = ["ComputeClient"]

_by_name = sort_key("name")


def _is_deprecated(resource: Mapping[str, Any]) -> bool:
    deprecated = resource.get("deprecated") or {}
    return (deprecated.get("state") or "").upper() == DEPRECATION_STATE_DEPRECATED


def _is_active(resource: Mapping[str, Any]) -> bool:
    return not _is_deprecated(resource)


class ComputeClient:
    """Client for Compute Engine resources.

    Obtained from :meth:`~Graphite.GcpClient.client.ClientFactory.compute_client`.
    Resources are plain ``dict`` objects as returned by the generated API client.
    Every ``*_link`` argument accepts either a full self link or a bare name.

    :param compute: Wrapper around the generated ``compute`` v1 service.
    :type compute: ~Graphite.GcpClient.data._compute._ComputeWrapper
    :param config: Polling configuration.
    :type config: ~Graphite.GcpClient.core.config.GcpClientConfig

    Example::

        compute = factory.compute_client()

        zones = compute.list_zones("my-project", region["selfLink"])
        op = compute.insert_instance("my-project", {"name": "vm-1", "zone": zones[0]["selfLink"], ...})
        compute.wait_for_operation_completion("my-project", op, timeout_millis=120_000)
    """

    def __init__(self, compute: _ComputeWrapper, config: Optional[GcpClientConfig] = None) -> None:
        self._compute = compute
        self._config = config or GcpClientConfig()

    # ------------------------------------------------------------- helpers

    @staticmethod
    def merge_metadata_items(
        winner: Iterable[Dict[str, Any]], loser: Optional[Iterable[Dict[str, Any]]]
    ) -> Tuple[Dict[str, Any], ...]:
        """Merge two lists of metadata items.

        Every item of ``winner`` is kept, in order. Items of ``loser`` follow, except
        those whose ``key`` already appears in ``winner``.

        :param winner: Items that take precedence.
        :type winner: iterable of dict
        :param loser: Items kept only when their key is not in ``winner``. May be ``None``.
        :type loser: iterable of dict or None
        :rtype: tuple of dict
        """
        winner = list(winner)
        if loser is None:
            return tuple(winner)
        winning_keys = {item.get("key") for item in winner}
        return tuple(winner + [item for item in loser if item.get("key") not in winning_keys])

    @staticmethod
    def parse_instance_resource_data(self_link: str) -> Optional[InstanceResourceData]:
        """Parse project, zone and name from an instance self link; ``None`` if it does not match."""
        return parse_instance_resource_data(self_link)

    # ----------------------------------------------------------- geography

    def list_regions(self, project_id: str) -> Tuple[Dict[str, Any], ...]:
        """List non-deprecated regions of a project, sorted by name."""
        _require_text(project_id=project_id)
        return process_resource_list(self._compute.list_regions(project_id), _by_name, _is_active)

    def list_zones(self, project_id: str, region_link: str) -> Tuple[Dict[str, Any], ...]:
        """List the zones whose ``region`` equals ``region_link`` (case-insensitive), sorted by name."""
        _require_text(project_id=project_id, region_link=region_link)
        wanted = region_link.lower()
        return process_resource_list(
            self._compute.list_zones(project_id),
            _by_name,
            lambda z: (z.get("region") or "").lower() == wanted,
        )

    def list_machine_types(self, project_id: str, zone_link: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id, zone_link=zone_link)
        return process_resource_list(
            self._compute.list_machine_types(project_id, name_from_self_link(zone_link)), _by_name, _is_active
        )

    def list_cpu_platforms(self, project_id: str, zone_link: str) -> Tuple[str, ...]:
        """Return the zone's ``availableCpuPlatforms``, sorted."""
        _require_text(project_id=project_id, zone_link=zone_link)
        zone = self._compute.get_zone(project_id, name_from_self_link(zone_link)) or {}
        return process_resource_list(zone.get("availableCpuPlatforms"), str)

    def list_disk_types(self, project_id: str, zone_link: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id, zone_link=zone_link)
        return process_resource_list(
            self._compute.list_disk_types(project_id, name_from_self_link(zone_link)), _by_name, _is_active
        )

    def list_boot_disk_types(self, project_id: str, zone_link: str) -> Tuple[Dict[str, Any], ...]:
        """Like :meth:`list_disk_types` but without local disk types."""
        _require_text(project_id=project_id, zone_link=zone_link)
        return process_resource_list(
            self._compute.list_disk_types(project_id, name_from_self_link(zone_link)),
            _by_name,
            lambda d: _is_active(d) and not (d.get("name") or "").startswith(LOCAL_DISK_TYPE_PREFIX),
        )

    def list_images(self, project_id: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id)
        return process_resource_list(self._compute.list_images(project_id), _by_name, _is_active)

    def get_image(self, project_id: str, image_name: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, image_name=image_name)
        return self._compute.get_image(project_id, image_name)

    def list_accelerator_types(self, project_id: str, zone_link: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id, zone_link=zone_link)
        return process_resource_list(
            self._compute.list_accelerator_types(project_id, name_from_self_link(zone_link)), _by_name, _is_active
        )

    def list_networks(self, project_id: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id)
        return process_resource_list(self._compute.list_networks(project_id), _by_name)

    def list_subnetworks(self, project_id: str, network_link: str, region_link: str) -> Tuple[Dict[str, Any], ...]:
        """List the region's subnetworks belonging to ``network_link`` (case-insensitive), sorted by name."""
        _require_text(project_id=project_id, network_link=network_link, region_link=region_link)
        wanted = network_link.lower()
        return process_resource_list(
            self._compute.list_subnetworks(project_id, name_from_self_link(region_link)),
            _by_name,
            lambda s: (s.get("network") or "").lower() == wanted,
        )

    # ----------------------------------------------------------- instances

    def insert_instance(
        self, project_id: str, instance: Dict[str, Any], template_link: Optional[str] = None
    ) -> Dict[str, Any]:
        """Insert an instance without waiting for it.

        :param project_id: Project that will host the instance.
        :type project_id: str
        :param instance: Instance body. Must carry at least ``zone``.
        :type instance: dict
        :param template_link: Optional instance template whose configuration is used as
            ``sourceInstanceTemplate``.
        :type template_link: str or None
        :return: The insert operation.
        :rtype: dict
        :raises ~Graphite.GcpClient.core.errors.ValidationError: If ``project_id`` is empty, the
            instance is missing or it has no zone.
        """
        _require_text(project_id=project_id)
        _require_present(instance=instance)
        zone_link = instance.get("zone")
        _require_text(zone=zone_link)
        return self._compute.insert_instance(project_id, name_from_self_link(zone_link), instance, template_link or None)

    def terminate_instance_async(self, project_id: str, zone_link: str, instance_id: str) -> Dict[str, Any]:
        """Delete an instance without waiting; returns the delete operation."""
        _require_text(project_id=project_id, zone_link=zone_link, instance_id=instance_id)
        return self._compute.delete_instance(project_id, name_from_self_link(zone_link), instance_id)

    def terminate_instance_with_status_async(
        self, project_id: str, zone_link: str, instance_id: str, desired_status: str
    ) -> Optional[Dict[str, Any]]:
        """Delete an instance only if its current ``status`` equals ``desired_status``.

        :return: The delete operation, or ``None`` when the instance had another status.
        :rtype: dict or None
        """
        _require_text(
            project_id=project_id, zone_link=zone_link, instance_id=instance_id, desired_status=desired_status
        )
        zone = name_from_self_link(zone_link)
        instance = self._compute.get_instance(project_id, zone, instance_id) or {}
        if instance.get("status") != desired_status:
            return None
        return self._compute.delete_instance(project_id, zone, instance_id)

    def get_instance(self, project_id: str, zone_link: str, instance_id: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, zone_link=zone_link, instance_id=instance_id)
        return self._compute.get_instance(project_id, name_from_self_link(zone_link), instance_id)

    def list_instances_with_label(self, project_id: str, labels: Mapping[str, str]) -> Tuple[Dict[str, Any], ...]:
        """List instances in every zone of the project that carry all ``labels``."""
        _require_text(project_id=project_id)
        _require_present(labels=labels)
        scoped_lists = self._compute.aggregated_list_instances(project_id, build_labels_filter_string(labels))
        instances: List[Dict[str, Any]] = []
        for scoped in scoped_lists:
            instances.extend(scoped.get("instances") or [])
        return tuple(instances)

    def simulate_maintenance_event(self, project_id: str, zone_link: str, instance_id: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, zone_link=zone_link, instance_id=instance_id)
        return self._compute.simulate_maintenance_event(project_id, name_from_self_link(zone_link), instance_id)

    def get_guest_attributes_sync(
        self, project_id: str, zone_link: str, instance_id: str, query_path: str = ""
    ) -> Tuple[GuestAttribute, ...]:
        """Read the instance's guest attributes under ``query_path`` (all namespaces when empty)."""
        _require_text(project_id=project_id, zone_link=zone_link, instance_id=instance_id)
        result = self._compute.get_guest_attributes(
            project_id, name_from_self_link(zone_link), instance_id, query_path or ""
        )
        return GuestAttribute.list_from_query_result(result)

    def append_instance_metadata_sync(
        self,
        project_id: str,
        zone_link: str,
        instance_id: str,
        items: List[Dict[str, Any]],
        timeout_millis: int,
    ) -> Dict[str, Any]:
        """Merge ``items`` into the instance metadata and wait for the update to finish.

        New items replace existing ones with the same key. The existing ``fingerprint``
        is sent back unchanged so a concurrent update makes the call fail.

        :return: The completed ``setMetadata`` operation.
        :rtype: dict
        """
        _require_text(project_id=project_id, zone_link=zone_link, instance_id=instance_id)
        _require_present(items=items)
        _require_positive_timeout(timeout_millis)
        zone = name_from_self_link(zone_link)
        instance = self._compute.get_instance(project_id, zone, instance_id) or {}
        metadata = dict(instance.get("metadata") or {})
        metadata["items"] = list(self.merge_metadata_items(items, metadata.get("items")))
        op = self._compute.set_instance_metadata(project_id, zone, instance_id, metadata)
        return self.wait_for_operation_completion(project_id, op, timeout_millis)

    # ---------------------------------------------------------- templates

    def get_template(self, project_id: str, template_name: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, template_name=template_name)
        return self._compute.get_instance_template(project_id, template_name)

    def list_templates(self, project_id: str) -> Tuple[Dict[str, Any], ...]:
        _require_text(project_id=project_id)
        return process_resource_list(self._compute.list_instance_templates(project_id), _by_name)

    def insert_template_async(self, project_id: str, template: Dict[str, Any]) -> Dict[str, Any]:
        _require_text(project_id=project_id)
        _require_present(template=template)
        return self._compute.insert_instance_template(project_id, template)

    def delete_template_async(self, project_id: str, template_name: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, template_name=template_name)
        return self._compute.delete_instance_template(project_id, template_name)

    # ---------------------------------------------------------- snapshots

    def create_snapshot_sync(self, project_id: str, zone_link: str, instance_id: str, timeout_millis: int) -> None:
        """Snapshot every disk attached to an instance and wait for all of them.

        Disks are snapshotted concurrently, one snapshot per disk named after the disk.
        Every snapshot is awaited even if another one fails.

        :raises ~Graphite.GcpClient.core.errors.GcpClientError: The first failure, in disk order.
        """
        _require_text(project_id=project_id, zone_link=zone_link, instance_id=instance_id)
        _require_positive_timeout(timeout_millis)
        zone = name_from_self_link(zone_link)
        try:
            instance = self._compute.get_instance(project_id, zone, instance_id) or {}
        except GcpClientError:
            _logger.warning("Error retrieving instance %s.", instance_id, exc_info=True)
            raise

        disks = instance.get("disks") or []
        if not disks:
            return
        with ThreadPoolExecutor(max_workers=len(disks)) as executor:
            futures = [
                executor.submit(
                    self.create_snapshot_for_disk_sync,
                    project_id,
                    zone,
                    name_from_self_link(disk.get("source")),
                    timeout_millis,
                )
                for disk in disks
            ]
            wait(futures)
        for future in futures:
            exc = future.exception()
            if exc is not None:
                _logger.warning("Error in creating snapshot.", exc_info=exc)
        for future in futures:
            future.result()

    def create_snapshot_for_disk_sync(
        self, project_id: str, zone_name: str, disk_name: str, timeout_millis: int
    ) -> Dict[str, Any]:
        """Create a snapshot named ``disk_name`` of the disk and wait for it; returns the completed operation."""
        _require_text(project_id=project_id, zone_name=zone_name, disk_name=disk_name)
        _require_positive_timeout(timeout_millis)
        op = self._compute.create_disk_snapshot(project_id, zone_name, disk_name, {"name": disk_name})
        return self.wait_for_operation_completion(project_id, op, timeout_millis)

    def delete_snapshot_async(self, project_id: str, snapshot_name: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, snapshot_name=snapshot_name)
        return self._compute.delete_snapshot(project_id, snapshot_name)

    def get_snapshot(self, project_id: str, snapshot_name: str) -> Optional[Dict[str, Any]]:
        """Fetch a snapshot, or ``None`` if it does not exist."""
        _require_text(project_id=project_id, snapshot_name=snapshot_name)
        try:
            return self._compute.get_snapshot(project_id, snapshot_name)
        except HttpError as exc:
            if exc.status_code == 404:
                return None
            raise

    # --------------------------------------------------------- operations

    def get_zone_operation(self, project_id: str, zone_link: str, operation_id: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, zone_link=zone_link, operation_id=operation_id)
        return self._compute.get_zone_operation(project_id, name_from_self_link(zone_link), operation_id)

    def get_region_operation(self, project_id: str, region_link: str, operation_id: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, region_link=region_link, operation_id=operation_id)
        return self._compute.get_region_operation(project_id, name_from_self_link(region_link), operation_id)

    def get_global_operation(self, project_id: str, operation_id: str) -> Dict[str, Any]:
        _require_text(project_id=project_id, operation_id=operation_id)
        return self._compute.get_global_operation(project_id, operation_id)

    def wait_for_operation_completion(
        self,
        project_id: str,
        operation: Union[Dict[str, Any], str],
        timeout_millis: int,
        zone_link: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Block until a Compute operation is ``DONE``.

        The operation is fetched immediately and then every ``operation_poll_interval``
        seconds. Failed fetches are logged and retried; see
        :attr:`~Graphite.GcpClient.core.config.GcpClientConfig.poll_retry_non_transient_errors`.

        :param project_id: Project owning the operation.
        :type project_id: str
        :param operation: An operation resource, or an operation name. A resource is
            scoped by its ``zone`` field, then its ``region`` field, then globally.
        :type operation: dict or str
        :param timeout_millis: Time budget in milliseconds. Must be positive.
        :type timeout_millis: int
        :param zone_link: Zone of the operation when ``operation`` is a name. ``None``
            means a global operation.
        :type zone_link: str or None
        :return: The completed operation.
        :rtype: dict
        :raises ~Graphite.GcpClient.core.errors.ValidationError: On an invalid argument.
        :raises ~Graphite.GcpClient.core.errors.OperationTimeoutError: If the operation is not
            done before the deadline.
        :raises ~Graphite.GcpClient.core.errors.OperationError: If the operation finished with an error.
        """
        _require_present(operation=operation)
        region_link: Optional[str] = None
        if isinstance(operation, Mapping):
            operation_name = operation.get("name")
            zone_link = operation.get("zone") or zone_link
            region_link = None if zone_link else operation.get("region")
        else:
            operation_name = operation
        _require_text(project_id=project_id, operation_name=operation_name)
        _require_positive_timeout(timeout_millis)

        if zone_link:
            zone = name_from_self_link(zone_link)

            def get_operation() -> Dict[str, Any]:
                return self._compute.get_zone_operation(project_id, zone, operation_name)

        elif region_link:
            region = name_from_self_link(region_link)

            def get_operation() -> Dict[str, Any]:
                return self._compute.get_region_operation(project_id, region, operation_name)

        else:

            def get_operation() -> Dict[str, Any]:
                return self._compute.get_global_operation(project_id, operation_name)

        def fetch() -> Optional[Dict[str, Any]]:
            op = get_operation()
            if op and op.get("status") == OPERATION_STATUS_DONE:
                return op
            return None

        retry_error = (
            _retry_all_errors if self._config.poll_retry_non_transient_errors else _retry_transient_errors
        )
        done = _poll_until(
            fetch,
            timeout_millis=timeout_millis,
            interval=self._config.operation_poll_interval,
            description=f"operation {operation_name}",
            retry_error=retry_error,
        )
        if done.get("error"):
            raise OperationError(done["error"], operation=done)
        return done
