"""Customer appointment routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from stowline.core.deps import get_db, require_account_types, require_csrf_header
from stowline.db.enums import AccountType
from stowline.schemas.appointment import (
    AppointmentCancellationRead,
    AppointmentCancelRequest,
    AppointmentCreate,
    AppointmentRead,
)
from stowline.schemas.auth import AccountSession
from stowline.services import appointment_service, messaging_service, user_service

router = APIRouter()

require_customer = require_account_types([AccountType.USER])


@router.post(
    "",
    response_model=AppointmentRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
async def create_appointment(
    data: AppointmentCreate,
    session: AccountSession = Depends(require_customer),
    db: Session = Depends(get_db),
):
    """Book an appointment; the confirmation SMS is best effort."""
    user = user_service.get_user(db, session.account_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        appointment = appointment_service.create_appointment(db, user, data)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(appointment)

    await messaging_service.send_sms_best_effort(
        "appointment_confirmation_sms",
        user.phone_number,
        {
            "first_name": user.first_name,
            "appointment_type": appointment.appointment_type,
            "date": appointment_service.format_appointment_date(appointment.date),
            "time_window": f" ({appointment.time})" if appointment.time else None,
            "job_code": appointment.job_code,
        },
    )
    return appointment


@router.get("", response_model=list[AppointmentRead])
def list_my_appointments(
    session: AccountSession = Depends(require_customer),
    db: Session = Depends(get_db),
):
    return appointment_service.list_user_appointments(db, session.account_id)


@router.post(
    "/{appointment_id}/cancel",
    response_model=AppointmentCancellationRead,
    dependencies=[Depends(require_csrf_header)],
)
async def cancel_appointment(
    appointment_id: UUID,
    data: AppointmentCancelRequest,
    session: AccountSession = Depends(require_customer),
    db: Session = Depends(get_db),
):
    """Cancel an appointment. A fee applies inside the notice window."""
    appointment = appointment_service.get_appointment(db, appointment_id)
    if not appointment:
        raise HTTPException(status_code=404, detail="Appointment not found")

    try:
        cancellation = appointment_service.cancel_appointment(
            db, appointment, user_id=session.account_id, reason=data.reason
        )
        db.commit()
    except PermissionError as e:
        db.rollback()
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(cancellation)

    partner = appointment.moving_partner
    if partner:
        await messaging_service.send_sms_best_effort(
            "appointment_cancellation_sms",
            partner.phone_number,
            {
                "job_code": appointment.job_code,
                "date": appointment_service.format_appointment_date(appointment.date),
                "reason": f"Reason: {data.reason}" if data.reason else None,
            },
        )
    return cancellation
