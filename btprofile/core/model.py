"""Core data models shared by the backends, service and CLI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AudioProfile:
    index: int
    name: str
    description: str
    available: bool


@dataclass(frozen=True)
class PipewireDeviceId:
    """PipeWire object id, passed to `wpctl set-profile <id> <index>`."""

    object_id: int


@dataclass(frozen=True)
class PulseaudioDeviceId:
    """PulseAudio card name, passed to `pactl set-card-profile <card> <profile>`."""

    card_name: str


DeviceId = PipewireDeviceId | PulseaudioDeviceId


@dataclass(frozen=True)
class AudioDevice:
    id: DeviceId
    profiles: tuple[AudioProfile, ...]
    active_profile_index: int | None = None

    @property
    def backend(self) -> str:
        if isinstance(self.id, PipewireDeviceId):
            return "pipewire"
        return "pulseaudio"

    def active_profile(self) -> AudioProfile | None:
        if self.active_profile_index is None:
            return None
        for profile in self.profiles:
            if profile.index == self.active_profile_index:
                return profile
        return None


@dataclass(frozen=True)
class SwitchResult:
    device: AudioDevice
    profile: AudioProfile
    message: str
