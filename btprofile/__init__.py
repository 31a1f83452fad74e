"""Bluetooth audio profile discovery and switching for PipeWire/PulseAudio."""

__version__ = "0.1.0"
