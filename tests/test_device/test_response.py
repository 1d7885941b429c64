"""Tests for DeviceResponse."""

from __future__ import annotations

from nascheck.device.response import DeviceResponse


class TestFieldAccess:
    def test_null_field_is_absent(self) -> None:
        resp = DeviceResponse({"cpu_fan": None, "up_time": "1 day 02:00"})
        assert not resp.has("cpu_fan")
        assert resp.get("cpu_fan", "missing") == "missing"
        assert resp.has("up_time")

    def test_non_map_has_no_fields(self) -> None:
        resp = DeviceResponse(["a", "b"])
        assert not resp.has("a")
        assert resp.get("a") is None

    def test_falsy_values_are_present(self) -> None:
        resp = DeviceResponse({"smart_status": 0, "model": ""})
        assert resp.has("smart_status")
        assert resp.get("smart_status") == 0
        assert resp.has("model")

    def test_child(self) -> None:
        resp = DeviceResponse({"errormsg": {"msg": "Wrong password"}})
        assert resp.child("errormsg").get("msg") == "Wrong password"
        assert resp.child("missing").is_empty

    def test_children_skip_non_maps(self) -> None:
        resp = DeviceResponse({"raid_list": [{"raid_id": "RAID0"}, "junk", None]})
        children = resp.children("raid_list")
        assert len(children) == 1
        assert children[0].get("raid_id") == "RAID0"

    def test_children_of_scalar(self) -> None:
        assert DeviceResponse({"raid_list": "none"}).children("raid_list") == []


class TestEmpty:
    def test_empty_shapes(self) -> None:
        assert DeviceResponse(None).is_empty
        assert DeviceResponse({}).is_empty
        assert DeviceResponse([]).is_empty

    def test_non_empty(self) -> None:
        assert not DeviceResponse({"a": 1}).is_empty


class TestProbe:
    def test_stops_at_first_gap(self) -> None:
        resp = DeviceResponse({
            "sys_fan_speed": "OK",
            "sys_fan_speed2": "OK",
            "sys_fan_speed3": "Fail",
            "sys_fan_speed5": "OK",
        })
        assert list(resp.probe("sys_fan_speed")) == [(2, "OK"), (3, "Fail")]

    def test_nothing_to_probe(self) -> None:
        assert list(DeviceResponse({"sys_fan_speed": "OK"}).probe("sys_fan_speed")) == []


class TestEquality:
    def test_equal_by_payload(self) -> None:
        assert DeviceResponse({"a": 1}) == DeviceResponse({"a": 1})
        assert DeviceResponse({"a": 1}) != DeviceResponse({"a": 2})
