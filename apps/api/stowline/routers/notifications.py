"""Notification inbox routes for the current account."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from stowline.core.deps import get_current_account, get_db, require_csrf_header
from stowline.db.enums import NotificationStatus
from stowline.schemas.auth import AccountSession
from stowline.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    UnreadCountResponse,
)
from stowline.services import notification_service

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    status: NotificationStatus | None = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AccountSession = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    recipient_type = notification_service.recipient_type_for(session.account_type)
    items, total = notification_service.list_notifications(
        db, session.account_id, recipient_type, status=status, limit=limit, offset=offset
    )
    unread = notification_service.get_unread_count(db, session.account_id, recipient_type)
    return NotificationListResponse(
        items=[NotificationRead.model_validate(n) for n in items],
        total=total,
        unread_count=unread,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    session: AccountSession = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    recipient_type = notification_service.recipient_type_for(session.account_type)
    return UnreadCountResponse(
        count=notification_service.get_unread_count(db, session.account_id, recipient_type)
    )


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationRead,
    dependencies=[Depends(require_csrf_header)],
)
def mark_read(
    notification_id: UUID,
    session: AccountSession = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    recipient_type = notification_service.recipient_type_for(session.account_type)
    notification = notification_service.mark_read(
        db, notification_id, session.account_id, recipient_type
    )
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    db.commit()
    db.refresh(notification)
    return notification


@router.post(
    "/read-all",
    response_model=MarkAllReadResponse,
    dependencies=[Depends(require_csrf_header)],
)
def mark_all_read(
    session: AccountSession = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    recipient_type = notification_service.recipient_type_for(session.account_type)
    updated = notification_service.mark_all_read(db, session.account_id, recipient_type)
    db.commit()
    return MarkAllReadResponse(updated=updated)
