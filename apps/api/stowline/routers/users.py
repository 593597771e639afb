"""Customer account routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from stowline.core.deps import get_current_account, get_db, require_csrf_header
from stowline.db.enums import AccountType
from stowline.schemas.auth import AccountSession
from stowline.schemas.user import PhoneNumberUpdate, UserRead
from stowline.services import user_service

router = APIRouter()


def _check_user_access(session: AccountSession, user_id: UUID) -> None:
    if session.is_admin:
        return
    if session.account_type != AccountType.USER or session.account_id != user_id:
        raise HTTPException(status_code=403, detail="Not allowed to access this user")


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: UUID,
    session: AccountSession = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    _check_user_access(session, user_id)
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.patch(
    "/{user_id}/phone-number",
    response_model=UserRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_phone_number(
    user_id: UUID,
    data: PhoneNumberUpdate,
    session: AccountSession = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Change the phone number; it must be re-verified afterwards."""
    _check_user_access(session, user_id)
    user = user_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        user = user_service.update_phone_number(db, user, data.phone_number)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    db.refresh(user)
    return user
