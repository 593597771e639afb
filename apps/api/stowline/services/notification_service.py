"""In-app notification service.

Creates notifications from NotificationTemplates and serves the per-account
inbox. Grouped types collapse repeats into the newest unread notification
with the same group key (group_count is bumped and the message refreshed).
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from stowline.db.enums import AccountType, NotificationStatus, NotificationType, RecipientType
from stowline.db.models import Notification
from stowline.services.notification_templates import get_notification_template
from stowline.utils.dates import utcnow

logger = logging.getLogger(__name__)


ACCOUNT_TO_RECIPIENT = {
    AccountType.USER: RecipientType.USER,
    AccountType.DRIVER: RecipientType.DRIVER,
    AccountType.MOVER: RecipientType.MOVER,
    AccountType.ADMIN: RecipientType.ADMIN,
}


def recipient_type_for(account_type: AccountType) -> RecipientType:
    return ACCOUNT_TO_RECIPIENT[account_type]


# =============================================================================
# Creation
# =============================================================================

def create_notification(
    db: Session,
    *,
    recipient_id: UUID,
    recipient_type: RecipientType,
    notification_type: NotificationType,
    data: dict[str, Any],
    appointment_id: UUID | None = None,
    driver_id: UUID | None = None,
    moving_partner_id: UUID | None = None,
) -> Notification:
    """
    Create (or group into) a notification.

    Raises:
        ValueError: unknown template, recipient type not allowed for this
            notification type, or missing required data
    """
    template = get_notification_template(notification_type)

    if recipient_type not in template.recipient_types:
        raise ValueError(
            f"{notification_type.value} cannot be sent to {recipient_type.value} recipients"
        )

    missing = template.missing_variables(data)
    if missing:
        raise ValueError(
            f"Missing required data for {notification_type.value}: {', '.join(missing)}"
        )

    group_key = template.group_key(data)
    if group_key:
        existing = (
            db.query(Notification)
            .filter(
                Notification.recipient_id == recipient_id,
                Notification.recipient_type == recipient_type.value,
                Notification.type == notification_type.value,
                Notification.group_key == group_key,
                Notification.status == NotificationStatus.UNREAD.value,
            )
            .order_by(Notification.created_at.desc())
            .first()
        )
        if existing:
            existing.group_count += 1
            grouped_data = {**data, "count": existing.group_count}
            existing.title = template.get_title(grouped_data)
            existing.message = template.get_message(grouped_data)
            existing.created_at = utcnow()
            db.flush()
            return existing

    notification = Notification(
        recipient_id=recipient_id,
        recipient_type=recipient_type.value,
        type=notification_type.value,
        title=template.get_title(data),
        message=template.get_message(data),
        group_key=group_key,
        group_count=1,
        appointment_id=appointment_id,
        driver_id=driver_id,
        moving_partner_id=moving_partner_id,
    )
    db.add(notification)
    db.flush()
    return notification


def batch_create_notifications(db: Session, requests: list[dict[str, Any]]) -> list[Notification]:
    """
    Create many notifications; invalid requests are logged and skipped.

    Each request holds the keyword arguments of create_notification.
    """
    created: list[Notification] = []
    failures = 0
    for request in requests:
        try:
            created.append(create_notification(db, **request))
        except ValueError as e:
            failures += 1
            logger.warning(
                "Skipping notification %s for %s: %s",
                request.get("notification_type"),
                request.get("recipient_id"),
                e,
            )
    if failures:
        logger.info("Batch notifications: %d created, %d failed", len(created), failures)
    return created


# =============================================================================
# Inbox
# =============================================================================

def _recipient_query(db: Session, recipient_id: UUID, recipient_type: RecipientType):
    return db.query(Notification).filter(
        Notification.recipient_id == recipient_id,
        Notification.recipient_type == recipient_type.value,
    )


def list_notifications(
    db: Session,
    recipient_id: UUID,
    recipient_type: RecipientType,
    *,
    status: NotificationStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Notification], int]:
    """Newest first. ARCHIVED rows are hidden unless asked for explicitly."""
    query = _recipient_query(db, recipient_id, recipient_type)
    if status:
        query = query.filter(Notification.status == status.value)
    else:
        query = query.filter(Notification.status != NotificationStatus.ARCHIVED.value)

    total = query.count()
    items = query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()
    return items, total


def get_unread_count(db: Session, recipient_id: UUID, recipient_type: RecipientType) -> int:
    return (
        db.query(func.count(Notification.id))
        .filter(
            Notification.recipient_id == recipient_id,
            Notification.recipient_type == recipient_type.value,
            Notification.status == NotificationStatus.UNREAD.value,
        )
        .scalar()
        or 0
    )


def mark_read(
    db: Session,
    notification_id: UUID,
    recipient_id: UUID,
    recipient_type: RecipientType,
) -> Notification | None:
    """Mark one notification read. Returns None if not found for this recipient."""
    notification = (
        _recipient_query(db, recipient_id, recipient_type)
        .filter(Notification.id == notification_id)
        .first()
    )
    if not notification:
        return None
    if notification.status == NotificationStatus.UNREAD.value:
        notification.status = NotificationStatus.READ.value
        notification.read_at = utcnow()
        db.flush()
    return notification


def mark_all_read(db: Session, recipient_id: UUID, recipient_type: RecipientType) -> int:
    """Mark every unread notification read. Returns count updated."""
    updated = (
        _recipient_query(db, recipient_id, recipient_type)
        .filter(Notification.status == NotificationStatus.UNREAD.value)
        .update(
            {
                Notification.status: NotificationStatus.READ.value,
                Notification.read_at: utcnow(),
            },
            synchronize_session=False,
        )
    )
    return updated


def try_create_notification(db: Session, **kwargs: Any) -> Notification | None:
    """create_notification for side-channel notices that must never fail the caller."""
    try:
        return create_notification(db, **kwargs)
    except ValueError as e:
        logger.warning("Notification not created: %s", e)
        return None
