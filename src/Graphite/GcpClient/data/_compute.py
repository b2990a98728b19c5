# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Compute Engine v1 request wrapper."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ._base import _ApiWrapper


class _ComputeWrapper(_ApiWrapper):
    """Flat, mockable methods over the generated ``compute`` v1 service."""

    # ----------------------------------------------------------- geography

    def list_regions(self, project_id: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.regions(), "items", project=project_id)

    def get_zone(self, project_id: str, zone: str) -> Dict[str, Any]:
        return self._execute(self.service.zones().get(project=project_id, zone=zone))

    def list_zones(self, project_id: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.zones(), "items", project=project_id)

    # ------------------------------------------------------------- catalog

    def list_machine_types(self, project_id: str, zone: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.machineTypes(), "items", project=project_id, zone=zone)

    def list_disk_types(self, project_id: str, zone: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.diskTypes(), "items", project=project_id, zone=zone)

    def list_accelerator_types(self, project_id: str, zone: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.acceleratorTypes(), "items", project=project_id, zone=zone)

    def list_images(self, project_id: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.images(), "items", project=project_id)

    def get_image(self, project_id: str, image: str) -> Dict[str, Any]:
        return self._execute(self.service.images().get(project=project_id, image=image))

    # ------------------------------------------------------------- network

    def list_networks(self, project_id: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.networks(), "items", project=project_id)

    def list_subnetworks(self, project_id: str, region: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.subnetworks(), "items", project=project_id, region=region)

    # ----------------------------------------------------------- instances

    def insert_instance(
        self,
        project_id: str,
        zone: str,
        instance: Dict[str, Any],
        source_instance_template: Optional[str] = None,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"project": project_id, "zone": zone, "body": instance}
        if source_instance_template is not None:
            kwargs["sourceInstanceTemplate"] = source_instance_template
        return self._execute(self.service.instances().insert(**kwargs))

    def delete_instance(self, project_id: str, zone: str, instance: str) -> Dict[str, Any]:
        return self._execute(self.service.instances().delete(project=project_id, zone=zone, instance=instance))

    def get_instance(self, project_id: str, zone: str, instance: str) -> Dict[str, Any]:
        return self._execute(self.service.instances().get(project=project_id, zone=zone, instance=instance))

    def set_instance_metadata(
        self, project_id: str, zone: str, instance: str, metadata: Dict[str, Any]
    ) -> Dict[str, Any]:
        request = self.service.instances().setMetadata(project=project_id, zone=zone, instance=instance, body=metadata)
        return self._execute(request)

    def aggregated_list_instances(self, project_id: str, filter_string: str) -> List[Dict[str, Any]]:
        """Return every ``InstancesScopedList`` across all pages, in page order."""
        instances = self.service.instances()
        scoped_lists: List[Dict[str, Any]] = []
        request = instances.aggregatedList(project=project_id, filter=filter_string)
        while request is not None:
            response = self._execute(request) or {}
            scoped_lists.extend((response.get("items") or {}).values())
            request = instances.aggregatedList_next(previous_request=request, previous_response=response)
        return scoped_lists

    def simulate_maintenance_event(self, project_id: str, zone: str, instance: str) -> Dict[str, Any]:
        request = self.service.instances().simulateMaintenanceEvent(project=project_id, zone=zone, instance=instance)
        return self._execute(request)

    def get_guest_attributes(self, project_id: str, zone: str, instance: str, query_path: str) -> Dict[str, Any]:
        request = self.service.instances().getGuestAttributes(
            project=project_id, zone=zone, instance=instance, queryPath=query_path
        )
        return self._execute(request)

    # ---------------------------------------------------------- templates

    def get_instance_template(self, project_id: str, template: str) -> Dict[str, Any]:
        return self._execute(self.service.instanceTemplates().get(project=project_id, instanceTemplate=template))

    def list_instance_templates(self, project_id: str) -> List[Dict[str, Any]]:
        return self._list_all(self.service.instanceTemplates(), "items", project=project_id)

    def insert_instance_template(self, project_id: str, template: Dict[str, Any]) -> Dict[str, Any]:
        return self._execute(self.service.instanceTemplates().insert(project=project_id, body=template))

    def delete_instance_template(self, project_id: str, template: str) -> Dict[str, Any]:
        return self._execute(self.service.instanceTemplates().delete(project=project_id, instanceTemplate=template))

    # ---------------------------------------------------------- snapshots

    def create_disk_snapshot(
        self, project_id: str, zone: str, disk: str, snapshot: Dict[str, Any]
    ) -> Dict[str, Any]:
        request = self.service.disks().createSnapshot(project=project_id, zone=zone, disk=disk, body=snapshot)
        return self._execute(request)

    def delete_snapshot(self, project_id: str, snapshot: str) -> Dict[str, Any]:
        return self._execute(self.service.snapshots().delete(project=project_id, snapshot=snapshot))

    def get_snapshot(self, project_id: str, snapshot: str) -> Dict[str, Any]:
        return self._execute(self.service.snapshots().get(project=project_id, snapshot=snapshot))

    # --------------------------------------------------------- operations

    def get_zone_operation(self, project_id: str, zone: str, operation: str) -> Dict[str, Any]:
        return self._execute(self.service.zoneOperations().get(project=project_id, zone=zone, operation=operation))

    def get_region_operation(self, project_id: str, region: str, operation: str) -> Dict[str, Any]:
        request = self.service.regionOperations().get(project=project_id, region=region, operation=operation)
        return self._execute(request)

    def get_global_operation(self, project_id: str, operation: str) -> Dict[str, Any]:
        return self._execute(self.service.globalOperations().get(project=project_id, operation=operation))
