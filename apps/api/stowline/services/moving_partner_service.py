"""Moving partner onboarding and activation gating."""

import logging
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.db.enums import AdminAction, AuditTargetType, MovingPartnerStatus
from stowline.db.models import Driver, MovingPartner, MovingPartnerDriver
from stowline.services import audit_service

logger = logging.getLogger(__name__)


def get_moving_partner(db: Session, partner_id: UUID) -> MovingPartner | None:
    return db.query(MovingPartner).filter(MovingPartner.id == partner_id).first()


def list_moving_partners(
    db: Session,
    *,
    status: MovingPartnerStatus | None = None,
    is_approved: bool | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[MovingPartner], int]:
    query = db.query(MovingPartner)
    if status:
        query = query.filter(MovingPartner.status == status.value)
    if is_approved is not None:
        query = query.filter(MovingPartner.is_approved == is_approved)
    total = query.count()
    items = query.order_by(MovingPartner.name).offset(offset).limit(limit).all()
    return items, total


def count_approved_drivers(db: Session, partner_id: UUID) -> int:
    """Drivers with an active link to the partner who are themselves approved."""
    return (
        db.query(func.count(MovingPartnerDriver.id))
        .join(Driver, Driver.id == MovingPartnerDriver.driver_id)
        .filter(
            MovingPartnerDriver.moving_partner_id == partner_id,
            MovingPartnerDriver.is_active.is_(True),
            Driver.is_approved.is_(True),
        )
        .scalar()
        or 0
    )


def first_approved_driver_name(db: Session, partner_id: UUID) -> str | None:
    """Full name of the earliest-linked approved driver, for activation notices."""
    driver = (
        db.query(Driver)
        .join(MovingPartnerDriver, MovingPartnerDriver.driver_id == Driver.id)
        .filter(
            MovingPartnerDriver.moving_partner_id == partner_id,
            MovingPartnerDriver.is_active.is_(True),
            Driver.is_approved.is_(True),
        )
        .order_by(MovingPartnerDriver.created_at)
        .first()
    )
    if driver is None:
        return None
    return f"{driver.first_name} {driver.last_name}".strip()


def meets_activation_requirements(db: Session, partner: MovingPartner) -> bool:
    """
    Approved AND linked to a dispatch team AND enough approved drivers.

    The three facts come from different onboarding steps, so each is read
    fresh rather than trusted from the caller.
    """
    if not partner.is_approved:
        return False
    if not partner.dispatch_team_id:
        return False
    return count_approved_drivers(db, partner.id) >= settings.MOVER_MIN_APPROVED_DRIVERS


def check_and_activate(
    db: Session,
    partner: MovingPartner,
    *,
    admin_id: UUID | None = None,
) -> tuple[MovingPartner, bool]:
    """
    Activate the partner if every requirement holds.

    Returns (partner, activated_now). When requirements are not met, or the
    partner is already active, the record is returned untouched.
    """
    if partner.status == MovingPartnerStatus.ACTIVE.value:
        return partner, False
    if not meets_activation_requirements(db, partner):
        return partner, False

    partner.status = MovingPartnerStatus.ACTIVE.value
    if admin_id:
        audit_service.log_admin_action(
            db,
            admin_id=admin_id,
            action=AdminAction.ACTIVATE_MOVING_PARTNER,
            target_type=AuditTargetType.MOVING_PARTNER,
            target_id=partner.id,
        )
    db.flush()
    logger.info("Moving partner %s activated", partner.id)
    return partner, True


def approve_moving_partner(
    db: Session,
    partner: MovingPartner,
    *,
    admin_id: UUID,
    dispatch_team_id: str | None = None,
) -> tuple[MovingPartner, bool]:
    """
    Approve a partner (optionally attaching its dispatch team) and re-check activation.

    Returns (partner, activated_now).

    Raises:
        ValueError: partner already approved with nothing to change
    """
    if partner.is_approved and (dispatch_team_id is None or dispatch_team_id == partner.dispatch_team_id):
        raise ValueError("Moving partner is already approved")

    partner.is_approved = True
    if dispatch_team_id:
        partner.dispatch_team_id = dispatch_team_id

    audit_service.log_admin_action(
        db,
        admin_id=admin_id,
        action=AdminAction.APPROVE_MOVING_PARTNER,
        target_type=AuditTargetType.MOVING_PARTNER,
        target_id=partner.id,
        details={"dispatch_team_id": partner.dispatch_team_id},
    )
    db.flush()
    return check_and_activate(db, partner, admin_id=admin_id)


def linked_moving_partners(db: Session, driver_id: UUID) -> list[MovingPartner]:
    """Partners with an active link to the driver."""
    return (
        db.query(MovingPartner)
        .join(MovingPartnerDriver, MovingPartnerDriver.moving_partner_id == MovingPartner.id)
        .filter(
            MovingPartnerDriver.driver_id == driver_id,
            MovingPartnerDriver.is_active.is_(True),
        )
        .all()
    )
