"""Storage unit inventory, occupancy and cleaning workflow."""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.db.enums import (
    UNIT_RESERVING_APPOINTMENT_TYPES,
    AdminAction,
    AppointmentStatus,
    AuditTargetType,
    StorageUnitStatus,
)
from stowline.db.models import Appointment, StorageUnit, StorageUnitCleaning, StorageUnitUsage
from stowline.services import audit_service
from stowline.utils.dates import utcnow

logger = logging.getLogger(__name__)


@dataclass
class StorageSummary:
    total: int
    counts: dict[str, int]
    reserved_upcoming: int
    available: int
    low_stock: bool


def get_storage_unit(db: Session, unit_id: UUID) -> StorageUnit | None:
    return db.query(StorageUnit).filter(StorageUnit.id == unit_id).first()


def get_active_usage(db: Session, unit_id: UUID) -> StorageUnitUsage | None:
    return (
        db.query(StorageUnitUsage)
        .filter(
            StorageUnitUsage.storage_unit_id == unit_id,
            StorageUnitUsage.usage_end_date.is_(None),
        )
        .first()
    )


def list_storage_units(
    db: Session,
    *,
    status: StorageUnitStatus | None = None,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[tuple[StorageUnit, StorageUnitUsage | None]], int]:
    """Units with their active occupancy (if any), ordered by unit number."""
    query = db.query(StorageUnit, StorageUnitUsage).outerjoin(
        StorageUnitUsage,
        (StorageUnitUsage.storage_unit_id == StorageUnit.id)
        & StorageUnitUsage.usage_end_date.is_(None),
    )
    if status:
        query = query.filter(StorageUnit.status == status.value)
    if search:
        query = query.filter(StorageUnit.storage_unit_number.ilike(f"%{search}%"))

    total = query.count()
    rows = (
        query.order_by(StorageUnit.storage_unit_number)
        .offset(offset)
        .limit(limit)
        .all()
    )
    return [(unit, usage) for unit, usage in rows], total


# =============================================================================
# Availability
# =============================================================================

def count_empty_units(db: Session) -> int:
    return (
        db.query(func.count(StorageUnit.id))
        .filter(StorageUnit.status == StorageUnitStatus.EMPTY.value)
        .scalar()
        or 0
    )


def count_reserved_upcoming_units(db: Session) -> int:
    """Units promised to scheduled pickups that haven't happened yet."""
    reserved = (
        db.query(func.coalesce(func.sum(Appointment.number_of_units), 0))
        .filter(
            Appointment.status == AppointmentStatus.SCHEDULED.value,
            Appointment.appointment_type.in_([t.value for t in UNIT_RESERVING_APPOINTMENT_TYPES]),
            Appointment.date >= utcnow(),
            Appointment.number_of_units > 0,
        )
        .scalar()
    )
    return int(reserved or 0)


def get_available_count(db: Session) -> int:
    """Empty units minus upcoming reservations, floored at zero."""
    return max(0, count_empty_units(db) - count_reserved_upcoming_units(db))


def get_storage_summary(db: Session) -> StorageSummary:
    rows = (
        db.query(StorageUnit.status, func.count(StorageUnit.id))
        .group_by(StorageUnit.status)
        .all()
    )
    counts = {status.value: 0 for status in StorageUnitStatus}
    for status, count in rows:
        counts[status] = count

    reserved = count_reserved_upcoming_units(db)
    available = max(0, counts[StorageUnitStatus.EMPTY.value] - reserved)
    return StorageSummary(
        total=sum(counts.values()),
        counts=counts,
        reserved_upcoming=reserved,
        available=available,
        low_stock=available < settings.STORAGE_UNIT_LOW_STOCK_THRESHOLD,
    )


# =============================================================================
# Occupancy
# =============================================================================

def start_usage(
    db: Session,
    unit: StorageUnit,
    *,
    user_id: UUID,
    admin_id: UUID,
    start_appointment_id: UUID | None = None,
    padlock_combo: str | None = None,
    warehouse_location: str | None = None,
    warehouse_name: str | None = None,
    description: str | None = None,
) -> StorageUnitUsage:
    """
    Assign an empty unit to a customer.

    Raises:
        ValueError: unit already occupied or not empty
    """
    if get_active_usage(db, unit.id):
        raise ValueError("Storage unit is already in use")
    if unit.status != StorageUnitStatus.EMPTY.value:
        raise ValueError(f"Storage unit is not available (status: {unit.status})")

    usage = StorageUnitUsage(
        storage_unit_id=unit.id,
        user_id=user_id,
        start_appointment_id=start_appointment_id,
        usage_start_date=utcnow(),
        padlock_combo=padlock_combo,
        warehouse_location=warehouse_location,
        warehouse_name=warehouse_name,
        description=description,
    )
    db.add(usage)
    unit.status = StorageUnitStatus.OCCUPIED.value

    audit_service.log_admin_action(
        db,
        admin_id=admin_id,
        action=AdminAction.ASSIGN_STORAGE_UNIT,
        target_type=AuditTargetType.STORAGE_UNIT,
        target_id=unit.id,
        details={"user_id": str(user_id)},
    )
    db.flush()
    return usage


def end_usage(
    db: Session,
    unit: StorageUnit,
    *,
    admin_id: UUID,
    end_appointment_id: UUID | None = None,
) -> StorageUnitUsage:
    """
    Close the active occupancy; the unit then waits for cleaning.

    Raises:
        LookupError: unit has no active usage
    """
    usage = get_active_usage(db, unit.id)
    if not usage:
        raise LookupError("Storage unit has no active usage")

    usage.usage_end_date = utcnow()
    usage.end_appointment_id = end_appointment_id
    unit.status = StorageUnitStatus.PENDING_CLEANING.value

    audit_service.log_admin_action(
        db,
        admin_id=admin_id,
        action=AdminAction.RELEASE_STORAGE_UNIT,
        target_type=AuditTargetType.STORAGE_UNIT,
        target_id=unit.id,
        details={"usage_id": str(usage.id)},
    )
    db.flush()
    return usage


# =============================================================================
# Cleaning
# =============================================================================

def mark_clean(
    db: Session,
    unit: StorageUnit,
    *,
    photos: list[str],
    admin_id: UUID,
    notes: str | None = None,
) -> StorageUnitCleaning:
    """
    Record a cleaning and return the unit to inventory.

    Writes the unit update, one StorageUnitCleaning and one AdminLog row.
    Does not commit: the caller commits all three together or rolls back.

    Raises:
        ValueError: no photos, or the unit is still occupied
    """
    photos = [p.strip() for p in photos if p and p.strip()]
    if not photos:
        raise ValueError("At least one cleaning photo is required")
    if get_active_usage(db, unit.id):
        raise ValueError("Cannot clean a storage unit that is in use")

    now = utcnow()
    unit.status = StorageUnitStatus.EMPTY.value
    unit.last_cleaned_at = now
    unit.cleaning_photos = list(photos)

    cleaning = StorageUnitCleaning(
        storage_unit_id=unit.id,
        admin_id=admin_id,
        cleaned_at=now,
        photos=list(photos),
        notes=notes,
    )
    db.add(cleaning)

    audit_service.log_admin_action(
        db,
        admin_id=admin_id,
        action=AdminAction.MARK_STORAGE_UNIT_CLEAN,
        target_type=AuditTargetType.STORAGE_UNIT,
        target_id=unit.id,
        details={"photo_count": len(photos)},
    )
    db.flush()
    return cleaning
