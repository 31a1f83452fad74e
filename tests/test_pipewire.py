from __future__ import annotations

import json
import subprocess

import pytest

from btprofile.core.config import Config
from btprofile.core.model import PipewireDeviceId
from btprofile.core.pipewire import find_device, probe_pipewire

ADDR = "AA:BB:CC:DD:EE:FF"


def _cp(cmd: list[str], rc: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(cmd, rc, stdout=stdout, stderr=stderr)


def _bluez_device(obj_id: int, address: str, enum_profiles: list[dict], active: list[dict] | None = None) -> dict:
    return {
        "id": obj_id,
        "type": "PipeWire:Interface:Device",
        "info": {
            "props": {"api.bluez5.address": address, "device.name": f"bluez_card.{address.replace(':', '_')}"},
            "params": {"EnumProfile": enum_profiles, "Profile": active or []},
        },
    }


HEADSET_PROFILES = [
    {"index": 0, "name": "off", "description": "Off", "available": "yes"},
    {"index": 1, "name": "a2dp-sink", "description": "High Fidelity Playback (A2DP Sink)", "available": "yes"},
    {"index": 2, "name": "headset-head-unit", "description": "Headset Head Unit (HSP/HFP)", "available": "yes"},
    {"index": 3, "name": "a2dp-sink-aac", "description": "A2DP Sink, codec AAC", "available": "no"},
]


def test_find_device_keeps_available_profiles_and_backend_index() -> None:
    dump = [
        {"id": 30, "info": {"props": {"media.class": "Audio/Sink"}}},
        _bluez_device(57, ADDR, HEADSET_PROFILES, active=[{"index": 2, "name": "headset-head-unit"}]),
    ]

    device = find_device(dump, ADDR)

    assert device is not None
    assert device.id == PipewireDeviceId(57)
    assert [(p.index, p.name) for p in device.profiles] == [(1, "a2dp-sink"), (2, "headset-head-unit")]
    assert device.profiles[0].description == "High Fidelity Playback (A2DP Sink)"
    assert all(p.available for p in device.profiles)
    assert device.active_profile_index == 2
    assert device.active_profile().name == "headset-head-unit"


def test_find_device_without_active_profile() -> None:
    device = find_device([_bluez_device(57, ADDR, HEADSET_PROFILES)], "AA_BB_CC_DD_EE_FF")
    assert device is not None
    assert device.active_profile_index is None
    assert device.active_profile() is None


def test_find_device_matches_underscore_address_property() -> None:
    device = find_device([_bluez_device(12, "AA_BB_CC_DD_EE_FF", HEADSET_PROFILES)], ADDR)
    assert device is not None
    assert device.id.object_id == 12


@pytest.mark.parametrize(
    "profiles",
    [
        [],
        [{"index": 0, "name": "off", "available": "yes"}],
        [{"index": 1, "name": "a2dp-sink", "available": "no"}, {"index": 2, "name": "headset-head-unit"}],
    ],
)
def test_entry_without_usable_profiles_is_skipped(profiles: list[dict]) -> None:
    dump = [
        _bluez_device(40, ADDR, profiles),
        _bluez_device(41, ADDR, HEADSET_PROFILES),
    ]
    device = find_device(dump, ADDR)
    assert device is not None
    assert device.id == PipewireDeviceId(41)


def test_missing_sections_are_not_matches() -> None:
    dump = [
        {"id": 1},
        {"id": 2, "info": None},
        {"id": 3, "info": {"props": None}},
        {"id": 4, "info": {"props": {"api.bluez5.address": ADDR}}},
        {"id": 5, "info": {"props": {"api.bluez5.address": ADDR}, "params": None}},
        _bluez_device(6, "11:22:33:44:55:66", HEADSET_PROFILES),
    ]
    assert find_device(dump, ADDR) is None


def test_probe_runs_pw_dump(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return _cp(cmd, 0, stdout=json.dumps([_bluez_device(57, ADDR, HEADSET_PROFILES)]))

    monkeypatch.setattr(subprocess, "run", fake_run)

    device = probe_pipewire("AA_BB_CC_DD_EE_FF", Config())
    assert calls == [["pw-dump"]]
    assert device is not None
    assert device.backend == "pipewire"


@pytest.mark.parametrize(
    "outcome",
    [
        FileNotFoundError("pw-dump"),
        subprocess.TimeoutExpired(["pw-dump"], 5),
        _cp(["pw-dump"], 1, stderr="failed to connect"),
        _cp(["pw-dump"], 0, stdout="[{not json"),
        _cp(["pw-dump"], 0, stdout='{"id": 1}'),
    ],
)
def test_probe_failures_return_none(monkeypatch: pytest.MonkeyPatch, outcome) -> None:
    def fake_run(cmd, **kwargs):
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(subprocess, "run", fake_run)
    assert probe_pipewire("AA_BB_CC_DD_EE_FF", Config()) is None


def test_non_string_profile_fields_become_empty() -> None:
    profiles = [{"index": 4, "name": "a2dp-sink", "description": {"en": "A2DP"}, "available": "yes"}]
    device = find_device([_bluez_device(57, ADDR, profiles, active=["not-an-object"])], ADDR)
    assert device is not None
    assert device.profiles[0].description == ""
    assert device.active_profile_index is None
