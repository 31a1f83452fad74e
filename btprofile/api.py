"""Stable public API for building tooling on top of btprofile.

This module is the supported integration surface for third-party callers
(status bars, TUIs, scripts). Avoid importing from ``btprofile.core`` unless
intentionally depending on non-stable internals.
"""

from __future__ import annotations

from btprofile.core.address import format_address, normalize_address
from btprofile.core.config import CommandConfig, Config, load_config
from btprofile.core.errors import (
    BtprofileError,
    ConfigLoadError,
    ConfigValidationError,
    DeviceNotFoundError,
    InvalidAddressError,
    ProfileResolutionError,
    ProfileSwitchError,
)
from btprofile.core.model import (
    AudioDevice,
    AudioProfile,
    DeviceId,
    PipewireDeviceId,
    PulseaudioDeviceId,
    SwitchResult,
)
from btprofile.core.service import ProfileService, resolve_profile

__all__ = [
    "BtprofileError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DeviceNotFoundError",
    "InvalidAddressError",
    "ProfileResolutionError",
    "ProfileSwitchError",
    "AudioDevice",
    "AudioProfile",
    "DeviceId",
    "PipewireDeviceId",
    "PulseaudioDeviceId",
    "SwitchResult",
    "CommandConfig",
    "Config",
    "load_config",
    "format_address",
    "normalize_address",
    "Client",
]


class Client:
    """Public client for querying and switching Bluetooth audio profiles.

    Each call re-queries the audio server; nothing is cached between calls.
    """

    def __init__(self, *, config: Config | None = None) -> None:
        self._service = ProfileService(config=config)

    @property
    def runtime_warnings(self) -> tuple[str, ...]:
        return self._service.runtime_warnings

    def discover(self, address: str) -> AudioDevice | None:
        return self._service.discover(address)

    def get_device(self, address: str) -> AudioDevice:
        return self._service.get_device(address)

    def resolve_profile(self, device: AudioDevice, selector: str | int) -> AudioProfile:
        return resolve_profile(device, selector)

    def switch_profile(self, device: AudioDevice, profile: AudioProfile) -> str:
        return self._service.switch_profile(device, profile)

    def set_profile(self, address: str, selector: str | int) -> SwitchResult:
        return self._service.set_profile(address, selector)
