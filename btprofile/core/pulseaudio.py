"""PulseAudio backend: `pactl list cards` discovery and profile switching."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Iterator
from typing import Any

from btprofile.core.address import normalize_address
from btprofile.core.commands import run_command
from btprofile.core.config import Config
from btprofile.core.errors import ProfileSwitchError
from btprofile.core.model import AudioDevice, AudioProfile, PulseaudioDeviceId

LOGGER = logging.getLogger(__name__)

ADDRESS_PROPS = ("api.bluez5.address", "device.string")


def _card_address(properties: Any) -> str | None:
    if not isinstance(properties, dict):
        return None
    for key in ADDRESS_PROPS:
        value = properties.get(key)
        if isinstance(value, str):
            return normalize_address(value)
    return None


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _iter_profile_entries(raw: Any) -> Iterator[dict[str, Any]]:
    # Older pactl builds emit a list of objects; current ones a name-keyed mapping.
    if isinstance(raw, dict):
        for name, fields in raw.items():
            if isinstance(fields, dict):
                yield {"name": name, **fields}
    elif isinstance(raw, list):
        for fields in raw:
            if isinstance(fields, dict):
                yield fields


def card_profiles(card: dict[str, Any]) -> tuple[AudioProfile, ...]:
    """Available, non-"off" profiles numbered by position among themselves."""
    profiles: list[AudioProfile] = []
    for entry in _iter_profile_entries(card.get("profiles")):
        name = _text(entry.get("name"))
        if name == "off" or entry.get("available") is not True:
            continue
        profiles.append(
            AudioProfile(
                index=len(profiles),
                name=name,
                description=_text(entry.get("description")),
                available=True,
            )
        )
    return tuple(profiles)


def _active_index(profiles: tuple[AudioProfile, ...], active_name: Any) -> int | None:
    if not isinstance(active_name, str):
        return None
    for position, profile in enumerate(profiles):
        if profile.name == active_name:
            return position
    return None


def find_card(cards: list[Any], address: str) -> AudioDevice | None:
    wanted = normalize_address(address)
    for card in cards:
        if not isinstance(card, dict):
            continue
        name = _text(card.get("name"))
        name_matches = wanted in name.upper()
        addr_matches = _card_address(card.get("properties")) == wanted
        if not name_matches and not addr_matches:
            continue

        profiles = card_profiles(card)
        if not profiles:
            LOGGER.debug("PulseAudio card %s has no available profiles; skipping", name)
            continue

        return AudioDevice(
            id=PulseaudioDeviceId(name),
            profiles=profiles,
            active_profile_index=_active_index(profiles, card.get("active_profile")),
        )
    return None


def probe_pulseaudio(address: str, config: Config) -> AudioDevice | None:
    cmd = [config.commands.pactl, "--format=json", "list", "cards"]
    try:
        result = run_command(cmd, timeout_s=config.timeout_s)
    except (OSError, subprocess.TimeoutExpired) as exc:
        LOGGER.debug("PulseAudio probe unavailable: %s", exc)
        return None
    if result.returncode != 0:
        LOGGER.debug("%s exited with %s: %s", cmd[0], result.returncode, (result.stderr or "").strip())
        return None

    try:
        cards = json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        LOGGER.debug("Could not decode %s output: %s", cmd[0], exc)
        return None
    if not isinstance(cards, list):
        LOGGER.debug("Unexpected %s output: top level is not an array", cmd[0])
        return None

    return find_card(cards, address)


def switch_pulseaudio_profile(device_id: PulseaudioDeviceId, profile_name: str, config: Config) -> str:
    tool = config.commands.pactl
    cmd = [tool, "set-card-profile", device_id.card_name, profile_name]
    try:
        result = run_command(cmd, timeout_s=config.timeout_s)
    except OSError as exc:
        raise ProfileSwitchError(f"Failed to run {tool}: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ProfileSwitchError(f"{tool} timed out after {exc.timeout}s") from exc

    if result.returncode != 0:
        raise ProfileSwitchError(f"{tool} failed: {(result.stderr or '').strip()}")
    return "Profile switched"
