# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

"""
Data models produced by the GCP client library.

API resources themselves are returned as plain dicts. The models here cover the
few values this library derives on its own:

- :class:`~Graphite.GcpClient.models.instance_resource_data.InstanceResourceData`: Instance identity parsed from a self link.
- :class:`~Graphite.GcpClient.models.guest_attribute.GuestAttribute`: One guest attribute of an instance.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from the
    specific module files.
"""

__all__ = []
