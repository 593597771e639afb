"""Authentication and admin role enums."""

from enum import Enum


class AccountType(str, Enum):
    """Which table a session's subject lives in."""

    USER = "user"
    DRIVER = "driver"
    MOVER = "mover"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class AdminRole(str, Enum):
    SUPERADMIN = "SUPERADMIN"
    ADMIN = "ADMIN"
    VIEWER = "VIEWER"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


# Roles allowed to mutate data through admin endpoints
ADMIN_ROLES_CAN_WRITE = frozenset({AdminRole.SUPERADMIN, AdminRole.ADMIN})
