"""Enum definitions for application constants."""

from stowline.db.enums.appointments import (
    APPOINTMENT_STATUS_TRANSITIONS,
    DEFAULT_APPOINTMENT_STATUS,
    UNIT_RESERVING_APPOINTMENT_TYPES,
    AppointmentStatus,
    AppointmentType,
)
from stowline.db.enums.audit import AdminAction, AuditTargetType
from stowline.db.enums.auth import ADMIN_ROLES_CAN_WRITE, AccountType, AdminRole
from stowline.db.enums.notifications import (
    NotificationStatus,
    NotificationType,
    RecipientType,
)
from stowline.db.enums.partners import DriverStatus, MovingPartnerStatus
from stowline.db.enums.reviews import ReviewSource
from stowline.db.enums.storage import StorageUnitStatus

__all__ = [
    "ADMIN_ROLES_CAN_WRITE",
    "APPOINTMENT_STATUS_TRANSITIONS",
    "DEFAULT_APPOINTMENT_STATUS",
    "UNIT_RESERVING_APPOINTMENT_TYPES",
    "AccountType",
    "AdminAction",
    "AdminRole",
    "AppointmentStatus",
    "AppointmentType",
    "AuditTargetType",
    "DriverStatus",
    "MovingPartnerStatus",
    "NotificationStatus",
    "NotificationType",
    "RecipientType",
    "ReviewSource",
    "StorageUnitStatus",
]
