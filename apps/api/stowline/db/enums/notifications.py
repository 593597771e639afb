"""In-app notification enums."""

from enum import Enum


class NotificationType(str, Enum):
    """Types of in-app notifications."""

    # Appointments
    APPOINTMENT_CONFIRMED = "APPOINTMENT_CONFIRMED"
    APPOINTMENT_UPDATED = "APPOINTMENT_UPDATED"
    APPOINTMENT_CANCELLED = "APPOINTMENT_CANCELLED"

    # Jobs
    JOB_OFFER_RECEIVED = "JOB_OFFER_RECEIVED"
    JOB_ASSIGNED = "JOB_ASSIGNED"
    JOB_CANCELLED = "JOB_CANCELLED"
    NEW_JOB_AVAILABLE = "NEW_JOB_AVAILABLE"

    # Payments
    PAYMENT_FAILED = "PAYMENT_FAILED"
    PAYOUT_PROCESSED = "PAYOUT_PROCESSED"
    TIP_RECEIVED = "TIP_RECEIVED"

    # Account
    ACCOUNT_APPROVED = "ACCOUNT_APPROVED"
    VEHICLE_APPROVED = "VEHICLE_APPROVED"
    VEHICLE_REJECTED = "VEHICLE_REJECTED"
    MOVER_PENDING_DRIVERS = "MOVER_PENDING_DRIVERS"
    MOVER_ACTIVATED = "MOVER_ACTIVATED"
    COMPLIANCE_ISSUE = "COMPLIANCE_ISSUE"

    # Feedback
    FEEDBACK_RECEIVED = "FEEDBACK_RECEIVED"


class NotificationStatus(str, Enum):
    UNREAD = "UNREAD"
    READ = "READ"
    ARCHIVED = "ARCHIVED"


class RecipientType(str, Enum):
    USER = "USER"
    DRIVER = "DRIVER"
    MOVER = "MOVER"
    ADMIN = "ADMIN"
