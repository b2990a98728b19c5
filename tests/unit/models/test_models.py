# Copyright (c) Graphite contributors.
# Licensed under the MIT license.

import dataclasses

import pytest

from Graphite.GcpClient.models.guest_attribute import GuestAttribute
from Graphite.GcpClient.models.instance_resource_data import InstanceResourceData


class TestGuestAttribute:
    def test_from_api_response(self):
        attr = GuestAttribute.from_api_response({"namespace": "hostkeys", "key": "ssh-rsa", "value": "AAAA"})
        assert attr == GuestAttribute("hostkeys", "ssh-rsa", "AAAA")

    def test_from_api_response_missing_fields(self):
        assert GuestAttribute.from_api_response({}) == GuestAttribute("", "", "")

    def test_list_from_query_result(self):
        result = {
            "queryPath": "hostkeys/",
            "queryValue": {
                "items": [
                    {"namespace": "hostkeys", "key": "ssh-rsa", "value": "A"},
                    {"namespace": "hostkeys", "key": "ssh-ed25519", "value": "B"},
                ]
            },
        }
        attrs = GuestAttribute.list_from_query_result(result)
        assert [a.key for a in attrs] == ["ssh-rsa", "ssh-ed25519"]

    @pytest.mark.parametrize("result", [None, {}, {"queryValue": {}}, {"queryValue": {"items": None}}])
    def test_list_from_empty_query_result(self, result):
        assert GuestAttribute.list_from_query_result(result) == ()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            GuestAttribute("a", "b", "c").value = "d"


class TestInstanceResourceData:
    def test_to_dict(self):
        data = InstanceResourceData(project_id="p", zone="us-west1-a", name="vm-1")
        assert data.to_dict() == {"project_id": "p", "zone": "us-west1-a", "name": "vm-1"}
