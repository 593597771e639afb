"""Admin routes for driver and moving partner onboarding."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from stowline.core.deps import get_db, require_admin, require_admin_writer, require_csrf_header
from stowline.db.enums import MovingPartnerStatus
from stowline.schemas.auth import AccountSession
from stowline.schemas.partner import (
    ActivationResponse,
    DriverApprovalResponse,
    DriverListResponse,
    DriverRead,
    MovingPartnerApproveRequest,
    MovingPartnerListResponse,
    MovingPartnerRead,
)
from stowline.services import (
    approval_notification_service,
    driver_service,
    moving_partner_service,
)

router = APIRouter()


# =============================================================================
# Drivers
# =============================================================================

@router.get("/drivers", response_model=DriverListResponse)
def list_drivers(
    is_approved: bool | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AccountSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    items, total = driver_service.list_drivers(
        db, is_approved=is_approved, limit=limit, offset=offset
    )
    return DriverListResponse(
        items=[DriverRead.model_validate(d) for d in items], total=total
    )


@router.post(
    "/drivers/{driver_id}/approve",
    response_model=DriverApprovalResponse,
    dependencies=[Depends(require_csrf_header)],
)
async def approve_driver(
    driver_id: UUID,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    """
    Register the driver with dispatch, approve them, and re-check their movers.

    Notifications are sent after the commit and never fail the approval.
    """
    driver = driver_service.get_driver(db, driver_id)
    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")

    try:
        result = await driver_service.approve_driver(db, driver, admin_id=session.account_id)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except driver_service.DispatchRegistrationError as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))

    await approval_notification_service.notify_driver_approved(db, driver)
    driver_name = f"{driver.first_name} {driver.last_name}".strip()
    for partner in result.activated_partners:
        await approval_notification_service.notify_mover_activated(db, partner, driver_name)
    db.commit()

    db.refresh(driver)
    return DriverApprovalResponse(
        driver=DriverRead.model_validate(driver),
        activated_moving_partner_ids=[p.id for p in result.activated_partners],
    )


# =============================================================================
# Moving Partners
# =============================================================================

@router.get("/moving-partners", response_model=MovingPartnerListResponse)
def list_moving_partners(
    status: MovingPartnerStatus | None = None,
    is_approved: bool | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AccountSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    items, total = moving_partner_service.list_moving_partners(
        db, status=status, is_approved=is_approved, limit=limit, offset=offset
    )
    return MovingPartnerListResponse(
        items=[MovingPartnerRead.model_validate(p) for p in items], total=total
    )


@router.post(
    "/moving-partners/{partner_id}/approve",
    response_model=ActivationResponse,
    dependencies=[Depends(require_csrf_header)],
)
async def approve_moving_partner(
    partner_id: UUID,
    data: MovingPartnerApproveRequest,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    partner = moving_partner_service.get_moving_partner(db, partner_id)
    if not partner:
        raise HTTPException(status_code=404, detail="Moving partner not found")

    try:
        partner, activated = moving_partner_service.approve_moving_partner(
            db, partner, admin_id=session.account_id, dispatch_team_id=data.dispatch_team_id
        )
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    if activated:
        await approval_notification_service.notify_mover_activated(db, partner)
    else:
        await approval_notification_service.notify_mover_pending_drivers(db, partner)
    db.commit()

    db.refresh(partner)
    return ActivationResponse(
        moving_partner=MovingPartnerRead.model_validate(partner),
        activated=activated,
        approved_driver_count=moving_partner_service.count_approved_drivers(db, partner.id),
    )


@router.post(
    "/moving-partners/{partner_id}/check-activation",
    response_model=ActivationResponse,
    dependencies=[Depends(require_csrf_header)],
)
async def check_activation(
    partner_id: UUID,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    """Re-evaluate whether the partner can go live."""
    partner = moving_partner_service.get_moving_partner(db, partner_id)
    if not partner:
        raise HTTPException(status_code=404, detail="Moving partner not found")

    partner, activated = moving_partner_service.check_and_activate(
        db, partner, admin_id=session.account_id
    )
    db.commit()

    if activated:
        await approval_notification_service.notify_mover_activated(db, partner)
        db.commit()

    db.refresh(partner)
    return ActivationResponse(
        moving_partner=MovingPartnerRead.model_validate(partner),
        activated=activated,
        approved_driver_count=moving_partner_service.count_approved_drivers(db, partner.id),
    )
