# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""Identity of a Compute Engine instance parsed from its self link."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class InstanceResourceData:
    """
    Project, zone and name of a Compute Engine instance.

    :param project_id: Project hosting the instance.
    :type project_id: str
    :param zone: Zone name, e.g. ``"us-west1-a"``.
    :type zone: str
    :param name: Instance name.
    :type name: str

    Example::

        data = parse_instance_resource_data(instance["selfLink"])
        if data is not None:
            client.get_instance(data.project_id, data.zone, data.name)
    """

    project_id: str
    zone: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {"project_id": self.project_id, "zone": self.zone, "name": self.name}
