"""Enums for the Crediario identity core."""

from enum import Enum, IntEnum


class DeviceOs(IntEnum):
    """Operating system reported by a client device."""

    UNKNOWN = 0
    ANDROID = 1
    IOS = 2
    WINDOWS_PHONE = 3

    @classmethod
    def from_value(cls, value) -> "DeviceOs":
        """Map a raw integer from the client, falling back to UNKNOWN."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.UNKNOWN


class DeviceStatus(str, Enum):
    """Enabled/disabled status of a device."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class PersonUserStatus(str, Enum):
    """Account status of a person."""

    ACTIVE = "active"
    INACTIVE = "inactive"
