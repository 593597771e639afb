"""Enums for service providers (drivers, moving partners)."""

from enum import Enum


class DriverStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class MovingPartnerStatus(str, Enum):
    """A partner only receives jobs while ACTIVE."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
