"""Driver onboarding: approval and dispatch registration."""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.db.enums import AdminAction, AuditTargetType, DriverStatus
from stowline.db.models import Driver, MovingPartner
from stowline.services import audit_service, dispatch_client, moving_partner_service

logger = logging.getLogger(__name__)


class DriverAlreadyRegisteredError(ValueError):
    pass


class DispatchRegistrationError(Exception):
    """The dispatch platform rejected or failed the worker registration."""


@dataclass
class DriverApprovalResult:
    driver: Driver
    activated_partners: list[MovingPartner] = field(default_factory=list)


def get_driver(db: Session, driver_id: UUID) -> Driver | None:
    return db.query(Driver).filter(Driver.id == driver_id).first()


def list_drivers(
    db: Session,
    *,
    is_approved: bool | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Driver], int]:
    query = db.query(Driver)
    if is_approved is not None:
        query = query.filter(Driver.is_approved == is_approved)
    total = query.count()
    items = (
        query.order_by(Driver.created_at.desc()).offset(offset).limit(limit).all()
    )
    return items, total


def resolve_team_ids(driver: Driver) -> list[str]:
    """Driver's own teams, else the default team; empty when neither is set."""
    if driver.dispatch_team_ids:
        return list(driver.dispatch_team_ids)
    if settings.DISPATCH_DEFAULT_TEAM_ID:
        return [settings.DISPATCH_DEFAULT_TEAM_ID]
    return []


async def approve_driver(db: Session, driver: Driver, *, admin_id: UUID) -> DriverApprovalResult:
    """
    Register the driver with the dispatch platform and approve them.

    Re-checks activation of every moving partner the driver is linked to.
    Does not commit and does not send notifications.

    Raises:
        DriverAlreadyRegisteredError: driver already has a dispatch worker
        ValueError: no dispatch team configured
        DispatchRegistrationError: the dispatch platform call failed
    """
    if driver.dispatch_worker_id:
        raise DriverAlreadyRegisteredError("Driver is already registered with dispatch")

    team_ids = resolve_team_ids(driver)
    if not team_ids:
        raise ValueError("No dispatch teams configured")

    if not driver.phone_number:
        raise ValueError("Driver has no phone number")

    try:
        worker_id = await dispatch_client.create_worker(
            name=f"{driver.first_name} {driver.last_name}".strip(),
            phone=driver.phone_number,
            team_ids=team_ids,
            vehicle_type=driver.vehicle_type,
        )
    except dispatch_client.DispatchError as e:
        logger.error("Dispatch registration failed for driver %s: %s", driver.id, e)
        raise DispatchRegistrationError(f"Dispatch registration failed: {e}") from e

    driver.dispatch_worker_id = worker_id
    driver.dispatch_team_ids = team_ids
    driver.is_approved = True
    driver.status = DriverStatus.ACTIVE.value

    audit_service.log_admin_action(
        db,
        admin_id=admin_id,
        action=AdminAction.APPROVE_DRIVER,
        target_type=AuditTargetType.DRIVER,
        target_id=driver.id,
        details={"dispatch_worker_id": worker_id},
    )
    db.flush()

    result = DriverApprovalResult(driver=driver)
    for partner in moving_partner_service.linked_moving_partners(db, driver.id):
        _, activated = moving_partner_service.check_and_activate(db, partner, admin_id=admin_id)
        if activated:
            result.activated_partners.append(partner)
    return result
