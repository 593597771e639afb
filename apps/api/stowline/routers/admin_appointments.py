"""Admin appointment routes: listing, status changes, moving partner contact tracking."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from stowline.core.deps import get_db, require_admin, require_admin_writer, require_csrf_header
from stowline.db.enums import AppointmentStatus, AppointmentType
from stowline.schemas.appointment import (
    AppointmentListResponse,
    AppointmentRead,
    AppointmentStatusUpdate,
    MovingPartnerContactUpdate,
)
from stowline.schemas.auth import AccountSession
from stowline.services import appointment_service

router = APIRouter()


@router.get("", response_model=AppointmentListResponse)
def list_appointments(
    status: AppointmentStatus | None = None,
    appointment_type: AppointmentType | None = None,
    moving_partner_id: UUID | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    session: AccountSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    items, total = appointment_service.list_appointments(
        db,
        status=status,
        appointment_type=appointment_type.value if appointment_type else None,
        moving_partner_id=moving_partner_id,
        limit=limit,
        offset=offset,
    )
    return AppointmentListResponse(
        items=[AppointmentRead.model_validate(a) for a in items], total=total
    )


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(
    appointment_id: UUID,
    session: AccountSession = Depends(require_admin),
    db: Session = Depends(get_db),
):
    appointment = appointment_service.get_appointment(db, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return appointment


@router.patch(
    "/{appointment_id}/moving-partner-contact",
    response_model=AppointmentRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_moving_partner_contact(
    appointment_id: UUID,
    data: MovingPartnerContactUpdate,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    """Record whether the assigned moving partner was called and reached."""
    appointment = appointment_service.get_appointment(db, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")

    appointment_service.update_moving_partner_contact(
        db,
        appointment,
        called_moving_partner=data.called_moving_partner,
        got_hold_of_moving_partner=data.got_hold_of_moving_partner,
        admin_id=session.account_id,
    )
    db.commit()
    db.refresh(appointment)
    return appointment


@router.patch(
    "/{appointment_id}/status",
    response_model=AppointmentRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    session: AccountSession = Depends(require_admin_writer),
    db: Session = Depends(get_db),
):
    appointment = appointment_service.get_appointment(db, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")

    try:
        appointment_service.change_status(
            db, appointment, data.status, admin_id=session.account_id, reason=data.reason
        )
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(appointment)
    return appointment
