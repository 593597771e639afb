"""Appointment service: booking, status lifecycle, contact tracking, cancellation."""

import logging
import secrets
import string
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.db.enums import (
    APPOINTMENT_STATUS_TRANSITIONS,
    UNIT_RESERVING_APPOINTMENT_TYPES,
    AdminAction,
    AppointmentStatus,
    AuditTargetType,
    NotificationType,
    RecipientType,
)
from stowline.db.models import Appointment, AppointmentCancellation, User
from stowline.schemas.appointment import AppointmentCreate
from stowline.services import audit_service, notification_service
from stowline.utils.dates import ensure_utc, utcnow

logger = logging.getLogger(__name__)

JOB_CODE_ALPHABET = string.ascii_uppercase + string.digits
JOB_CODE_LENGTH = 8


def format_appointment_date(value: datetime) -> str:
    """Human date for messages, e.g. 'Mon, Mar 3, 2025'."""
    value = ensure_utc(value)
    return f"{value:%a}, {value:%b} {value.day}, {value.year}"


def generate_job_code(db: Session) -> str:
    """Random unique job code."""
    while True:
        code = "".join(secrets.choice(JOB_CODE_ALPHABET) for _ in range(JOB_CODE_LENGTH))
        exists = db.query(Appointment.id).filter(Appointment.job_code == code).first()
        if not exists:
            return code


# =============================================================================
# Queries
# =============================================================================

def get_appointment(db: Session, appointment_id: UUID) -> Appointment | None:
    return db.query(Appointment).filter(Appointment.id == appointment_id).first()


def list_user_appointments(db: Session, user_id: UUID) -> list[Appointment]:
    return (
        db.query(Appointment)
        .filter(Appointment.user_id == user_id)
        .order_by(Appointment.date.desc())
        .all()
    )


def list_appointments(
    db: Session,
    *,
    status: AppointmentStatus | None = None,
    appointment_type: str | None = None,
    moving_partner_id: UUID | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Appointment], int]:
    query = db.query(Appointment)
    if status:
        query = query.filter(Appointment.status == status.value)
    if appointment_type:
        query = query.filter(Appointment.appointment_type == appointment_type)
    if moving_partner_id:
        query = query.filter(Appointment.moving_partner_id == moving_partner_id)
    total = query.count()
    items = query.order_by(Appointment.date.desc()).offset(offset).limit(limit).all()
    return items, total


# =============================================================================
# Booking
# =============================================================================

def create_appointment(db: Session, user: User, data: AppointmentCreate) -> Appointment:
    """
    Book an appointment for a customer.

    Validates:
    - date is in the future
    - pickups/additional storage reserve at least one unit

    Raises:
        ValueError: validation failed
    """
    appointment_date = ensure_utc(data.date)
    if appointment_date <= utcnow():
        raise ValueError("Appointment date must be in the future")

    if data.appointment_type in UNIT_RESERVING_APPOINTMENT_TYPES and data.number_of_units < 1:
        raise ValueError("At least one storage unit is required for this appointment type")

    appointment = Appointment(
        job_code=generate_job_code(db),
        user_id=user.id,
        appointment_type=data.appointment_type.value,
        address=data.address,
        zipcode=data.zipcode,
        date=appointment_date,
        time=data.time,
        number_of_units=data.number_of_units,
        plan_type=data.plan_type,
        insurance_coverage=data.insurance_coverage,
        description=data.description,
        delivery_reason=data.delivery_reason,
        quoted_price=data.quoted_price,
        loading_help_price=data.loading_help_price,
        monthly_storage_rate=data.monthly_storage_rate,
        monthly_insurance_rate=data.monthly_insurance_rate,
        status=AppointmentStatus.SCHEDULED.value,
    )
    db.add(appointment)
    db.flush()

    notification_service.try_create_notification(
        db,
        recipient_id=user.id,
        recipient_type=RecipientType.USER,
        notification_type=NotificationType.APPOINTMENT_CONFIRMED,
        data={
            "appointment_type": appointment.appointment_type,
            "date": format_appointment_date(appointment_date),
        },
        appointment_id=appointment.id,
    )
    return appointment


# =============================================================================
# Admin: contact tracking and status
# =============================================================================

def update_moving_partner_contact(
    db: Session,
    appointment: Appointment,
    *,
    called_moving_partner: bool,
    got_hold_of_moving_partner: bool | None,
    admin_id: UUID,
) -> Appointment:
    """
    Record whether the moving partner was called and reached.

    Writes one AdminLog row alongside the update. Does not commit.
    """
    previous = {
        "called_moving_partner": appointment.called_moving_partner,
        "got_hold_of_moving_partner": appointment.got_hold_of_moving_partner,
    }
    appointment.called_moving_partner = called_moving_partner
    appointment.got_hold_of_moving_partner = got_hold_of_moving_partner

    audit_service.log_admin_action(
        db,
        admin_id=admin_id,
        action=AdminAction.UPDATE_APPOINTMENT_CONTACT,
        target_type=AuditTargetType.APPOINTMENT,
        target_id=appointment.id,
        details={
            "before": previous,
            "after": {
                "called_moving_partner": called_moving_partner,
                "got_hold_of_moving_partner": got_hold_of_moving_partner,
            },
        },
    )
    db.flush()
    return appointment


def can_transition(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    return new in APPOINTMENT_STATUS_TRANSITIONS.get(current, frozenset())


def change_status(
    db: Session,
    appointment: Appointment,
    new_status: AppointmentStatus,
    *,
    admin_id: UUID,
    reason: str | None = None,
) -> Appointment:
    """
    Move an appointment through its lifecycle.

    Raises:
        ValueError: transition not allowed
    """
    current = AppointmentStatus(appointment.status)
    if current == new_status:
        raise ValueError(f"Appointment is already {current.value}")
    if not can_transition(current, new_status):
        raise ValueError(f"Cannot change status from {current.value} to {new_status.value}")

    appointment.status = new_status.value
    audit_service.log_admin_action(
        db,
        admin_id=admin_id,
        action=AdminAction.UPDATE_APPOINTMENT_STATUS,
        target_type=AuditTargetType.APPOINTMENT,
        target_id=appointment.id,
        details={"from": current.value, "to": new_status.value, "reason": reason},
    )

    if new_status == AppointmentStatus.CANCELED:
        notification_type = NotificationType.APPOINTMENT_CANCELLED
        data = {
            "appointment_type": appointment.appointment_type,
            "date": format_appointment_date(appointment.date),
        }
    else:
        notification_type = NotificationType.APPOINTMENT_UPDATED
        data = {"appointment_type": appointment.appointment_type, "status": new_status.value}

    notification_service.try_create_notification(
        db,
        recipient_id=appointment.user_id,
        recipient_type=RecipientType.USER,
        notification_type=notification_type,
        data=data,
        appointment_id=appointment.id,
    )
    db.flush()
    return appointment


# =============================================================================
# Customer cancellation
# =============================================================================

def compute_cancellation_fee(appointment_date: datetime, now: datetime | None = None) -> Decimal:
    """
    Flat fee when canceling inside the notice window, otherwise free.

    Appointments already in the past are not charged here; those are
    handled as no-shows.
    """
    now = now or datetime.now(timezone.utc)
    hours_until = (ensure_utc(appointment_date) - ensure_utc(now)).total_seconds() / 3600
    if 0 < hours_until <= settings.CANCELLATION_NOTICE_HOURS:
        return Decimal(settings.CANCELLATION_FEE)
    return Decimal("0")


def cancel_appointment(
    db: Session,
    appointment: Appointment,
    *,
    user_id: UUID,
    reason: str | None = None,
) -> AppointmentCancellation:
    """
    Cancel a customer's own appointment and record the fee.

    Raises:
        PermissionError: appointment belongs to another customer
        ValueError: appointment already canceled or completed
    """
    if appointment.user_id != user_id:
        raise PermissionError("You can only cancel your own appointments")
    if appointment.status == AppointmentStatus.CANCELED.value:
        raise ValueError("Appointment is already canceled")
    if appointment.status == AppointmentStatus.COMPLETED.value:
        raise ValueError("Completed appointments cannot be canceled")

    now = utcnow()
    fee = compute_cancellation_fee(appointment.date, now)

    cancellation = AppointmentCancellation(
        appointment_id=appointment.id,
        cancellation_fee=fee,
        cancellation_reason=reason,
        cancellation_date=now,
    )
    db.add(cancellation)
    appointment.status = AppointmentStatus.CANCELED.value

    notification_service.try_create_notification(
        db,
        recipient_id=appointment.user_id,
        recipient_type=RecipientType.USER,
        notification_type=NotificationType.APPOINTMENT_CANCELLED,
        data={
            "appointment_type": appointment.appointment_type,
            "date": format_appointment_date(appointment.date),
            "cancellation_fee": fee if fee > 0 else None,
        },
        appointment_id=appointment.id,
    )
    if appointment.moving_partner_id:
        notification_service.try_create_notification(
            db,
            recipient_id=appointment.moving_partner_id,
            recipient_type=RecipientType.MOVER,
            notification_type=NotificationType.JOB_CANCELLED,
            data={"job_code": appointment.job_code},
            appointment_id=appointment.id,
            moving_partner_id=appointment.moving_partner_id,
        )

    db.flush()
    logger.info("Appointment %s canceled (fee=%s)", appointment.id, fee)
    return cancellation
