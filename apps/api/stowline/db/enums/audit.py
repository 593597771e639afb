"""Admin audit log action types."""

from enum import Enum


class AdminAction(str, Enum):
    UPDATE_APPOINTMENT_CONTACT = "UPDATE_APPOINTMENT_CONTACT"
    UPDATE_APPOINTMENT_STATUS = "UPDATE_APPOINTMENT_STATUS"
    MARK_STORAGE_UNIT_CLEAN = "MARK_STORAGE_UNIT_CLEAN"
    ASSIGN_STORAGE_UNIT = "ASSIGN_STORAGE_UNIT"
    RELEASE_STORAGE_UNIT = "RELEASE_STORAGE_UNIT"
    APPROVE_DRIVER = "APPROVE_DRIVER"
    APPROVE_MOVING_PARTNER = "APPROVE_MOVING_PARTNER"
    ACTIVATE_MOVING_PARTNER = "ACTIVATE_MOVING_PARTNER"
    LOGIN = "LOGIN"


class AuditTargetType(str, Enum):
    APPOINTMENT = "appointment"
    STORAGE_UNIT = "storage_unit"
    DRIVER = "driver"
    MOVING_PARTNER = "moving_partner"
    ADMIN = "admin"
