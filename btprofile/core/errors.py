"""Domain-specific errors for btprofile."""


class BtprofileError(Exception):
    """Base error for btprofile."""


class InvalidAddressError(BtprofileError):
    """Raised when a Bluetooth address is not six hex octets."""


class ConfigLoadError(BtprofileError):
    """Raised when reading the configuration file fails."""


class ConfigValidationError(BtprofileError):
    """Raised when the configuration file does not conform to schema."""


class DeviceNotFoundError(BtprofileError):
    """Raised when no backend exposes a controllable audio device for an address."""


class ProfileResolutionError(BtprofileError):
    """Raised when a profile name/index cannot be found on a device."""


class ProfileSwitchError(BtprofileError):
    """Raised when the backend control command fails to switch profile."""
