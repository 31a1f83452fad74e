"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
from collections.abc import Callable

from btprofile.core.address import format_address, parse_address
from btprofile.core.config import Config, load_config, runtime_warnings
from btprofile.core.errors import DeviceNotFoundError, ProfileResolutionError
from btprofile.core.model import (
    AudioDevice,
    AudioProfile,
    DeviceId,
    PipewireDeviceId,
    PulseaudioDeviceId,
    SwitchResult,
)
from btprofile.core.pipewire import probe_pipewire, switch_pipewire_profile
from btprofile.core.pulseaudio import probe_pulseaudio, switch_pulseaudio_profile

LOGGER = logging.getLogger(__name__)

Probe = Callable[[str, Config], AudioDevice | None]

# Probed in order; the first backend returning a device wins.
PROBES: tuple[tuple[str, Probe], ...] = (
    ("pipewire", probe_pipewire),
    ("pulseaudio", probe_pulseaudio),
)


def discover(address: str, config: Config | None = None) -> AudioDevice | None:
    config = config or Config()
    for backend, probe in PROBES:
        device = probe(address, config)
        if device is not None:
            LOGGER.info("Found %s device %s for %s", backend, device.id, format_address(address))
            return device
        LOGGER.debug("No %s device for %s", backend, format_address(address))
    return None


def switch_profile(
    device_id: DeviceId,
    profile_index: int,
    profile_name: str,
    config: Config | None = None,
) -> str:
    config = config or Config()
    if isinstance(device_id, PipewireDeviceId):
        return switch_pipewire_profile(device_id, profile_index, config)
    if isinstance(device_id, PulseaudioDeviceId):
        return switch_pulseaudio_profile(device_id, profile_name, config)
    raise TypeError(f"Unsupported device id {device_id!r}")


def resolve_profile(device: AudioDevice, selector: str | int) -> AudioProfile:
    """Find a profile on ``device`` by name, or by index when ``selector`` is numeric."""
    for profile in device.profiles:
        if profile.name == str(selector):
            return profile

    index: int | None = None
    if isinstance(selector, int):
        index = selector
    elif selector.strip().isdigit():
        index = int(selector.strip())
    if index is not None:
        for profile in device.profiles:
            if profile.index == index:
                return profile

    available = ", ".join(p.name for p in device.profiles)
    raise ProfileResolutionError(f"Profile '{selector}' not available. Available: {available}")


class ProfileService:
    def __init__(self, *, config: Config | None = None) -> None:
        self.config = config or load_config()
        self.runtime_warnings = runtime_warnings(self.config)

    def discover(self, address: str) -> AudioDevice | None:
        return discover(parse_address(address), self.config)

    def get_device(self, address: str) -> AudioDevice:
        device = self.discover(address)
        if device is None:
            raise DeviceNotFoundError(
                f"No controllable audio profile found for {format_address(address)}"
            )
        return device

    def switch_profile(self, device: AudioDevice, profile: AudioProfile) -> str:
        return switch_profile(device.id, profile.index, profile.name, self.config)

    def set_profile(self, address: str, selector: str | int) -> SwitchResult:
        device = self.get_device(address)
        profile = resolve_profile(device, selector)
        message = self.switch_profile(device, profile)
        return SwitchResult(device=device, profile=profile, message=message)
