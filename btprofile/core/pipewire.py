"""PipeWire backend: `pw-dump` discovery and `wpctl` profile switching."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any

from btprofile.core.address import normalize_address
from btprofile.core.commands import run_command
from btprofile.core.config import Config
from btprofile.core.errors import ProfileSwitchError
from btprofile.core.model import AudioDevice, AudioProfile, PipewireDeviceId

LOGGER = logging.getLogger(__name__)

ADDRESS_PROP = "api.bluez5.address"


def _section(mapping: Any, key: str) -> dict[str, Any] | None:
    if not isinstance(mapping, dict):
        return None
    value = mapping.get(key)
    return value if isinstance(value, dict) else None


def _list_param(params: dict[str, Any], key: str) -> list[Any]:
    value = params.get(key)
    return value if isinstance(value, list) else []


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _profiles_from_params(params: dict[str, Any]) -> tuple[AudioProfile, ...]:
    profiles: list[AudioProfile] = []
    for entry in _list_param(params, "EnumProfile"):
        if not isinstance(entry, dict) or not isinstance(entry.get("index"), int):
            continue
        name = _text(entry.get("name"))
        if name == "off":
            continue
        if entry.get("available") != "yes":
            continue
        profiles.append(
            AudioProfile(
                index=entry["index"],
                name=name,
                description=_text(entry.get("description")),
                available=True,
            )
        )
    return tuple(profiles)


def _active_index(params: dict[str, Any]) -> int | None:
    active = _list_param(params, "Profile")
    if not active or not isinstance(active[0], dict):
        return None
    index = active[0].get("index")
    return index if isinstance(index, int) else None


def find_device(objects: list[Any], address: str) -> AudioDevice | None:
    """Return the first dump object for ``address`` with an available profile."""
    wanted = normalize_address(address)
    for obj in objects:
        if not isinstance(obj, dict) or not isinstance(obj.get("id"), int):
            continue
        info = _section(obj, "info")
        props = _section(info, "props")
        if props is None:
            continue
        bluez_address = props.get(ADDRESS_PROP)
        if not isinstance(bluez_address, str) or normalize_address(bluez_address) != wanted:
            continue

        params = _section(info, "params")
        if params is None:
            continue
        profiles = _profiles_from_params(params)
        if not profiles:
            LOGGER.debug("PipeWire object %s has no available profiles; skipping", obj["id"])
            continue

        return AudioDevice(
            id=PipewireDeviceId(obj["id"]),
            profiles=profiles,
            active_profile_index=_active_index(params),
        )
    return None


def probe_pipewire(address: str, config: Config) -> AudioDevice | None:
    cmd = [config.commands.pw_dump]
    try:
        result = run_command(cmd, timeout_s=config.timeout_s)
    except (OSError, subprocess.TimeoutExpired) as exc:
        LOGGER.debug("PipeWire probe unavailable: %s", exc)
        return None
    if result.returncode != 0:
        LOGGER.debug("%s exited with %s: %s", cmd[0], result.returncode, (result.stderr or "").strip())
        return None

    try:
        objects = json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        LOGGER.debug("Could not decode %s output: %s", cmd[0], exc)
        return None
    if not isinstance(objects, list):
        LOGGER.debug("Unexpected %s output: top level is not an array", cmd[0])
        return None

    return find_device(objects, address)


def switch_pipewire_profile(device_id: PipewireDeviceId, profile_index: int, config: Config) -> str:
    tool = config.commands.wpctl
    cmd = [tool, "set-profile", str(device_id.object_id), str(profile_index)]
    try:
        result = run_command(cmd, timeout_s=config.timeout_s)
    except OSError as exc:
        raise ProfileSwitchError(f"Failed to run {tool}: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ProfileSwitchError(f"{tool} timed out after {exc.timeout}s") from exc

    if result.returncode != 0:
        raise ProfileSwitchError(f"{tool} failed: {(result.stderr or '').strip()}")
    return "Profile switched"
