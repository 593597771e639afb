"""
Tests for in-app notifications.

Coverage:
- Template validation (recipient type, required data)
- Grouping of repeat notifications
- Batch creation skipping bad requests
- Inbox endpoints
"""

import pytest

from stowline.db.enums import NotificationStatus, NotificationType, RecipientType
from stowline.db.models import Notification
from stowline.services import notification_service
from stowline.services.notification_templates import (
    NOTIFICATION_TEMPLATES,
    get_notification_template,
)


# =============================================================================
# Templates
# =============================================================================

def test_every_notification_type_has_a_template():
    for notification_type in NotificationType:
        assert get_notification_template(notification_type).type == notification_type


def test_grouped_templates_declare_a_group_key():
    grouped = {t.type for t in NOTIFICATION_TEMPLATES.values() if t.supports_grouping}
    assert grouped == {
        NotificationType.NEW_JOB_AVAILABLE,
        NotificationType.TIP_RECEIVED,
        NotificationType.FEEDBACK_RECEIVED,
    }


# =============================================================================
# Creation
# =============================================================================

def test_create_notification_renders_title_and_message(db, driver):
    notification = notification_service.create_notification(
        db,
        recipient_id=driver.id,
        recipient_type=RecipientType.DRIVER,
        notification_type=NotificationType.JOB_ASSIGNED,
        data={"job_code": "ABC12345"},
    )
    assert notification.title == "Job assigned"
    assert "ABC12345" in notification.message
    assert notification.status == NotificationStatus.UNREAD.value
    assert notification.group_count == 1


def test_create_notification_rejects_wrong_recipient_type(db, customer):
    with pytest.raises(ValueError, match="cannot be sent"):
        notification_service.create_notification(
            db,
            recipient_id=customer.id,
            recipient_type=RecipientType.USER,
            notification_type=NotificationType.JOB_ASSIGNED,
            data={"job_code": "ABC12345"},
        )


def test_create_notification_requires_template_data(db, driver):
    with pytest.raises(ValueError, match="job_code"):
        notification_service.create_notification(
            db,
            recipient_id=driver.id,
            recipient_type=RecipientType.DRIVER,
            notification_type=NotificationType.JOB_ASSIGNED,
            data={},
        )
    assert db.query(Notification).count() == 0


def test_grouping_updates_existing_unread_notification(db, driver):
    for _ in range(3):
        notification = notification_service.create_notification(
            db,
            recipient_id=driver.id,
            recipient_type=RecipientType.DRIVER,
            notification_type=NotificationType.NEW_JOB_AVAILABLE,
            data={"count": 1},
        )

    rows = db.query(Notification).all()
    assert len(rows) == 1
    assert notification.group_count == 3
    assert notification.group_key == "new_jobs"
    assert "3 new jobs" in notification.message


def test_grouping_starts_fresh_after_read(db, driver):
    first = notification_service.create_notification(
        db,
        recipient_id=driver.id,
        recipient_type=RecipientType.DRIVER,
        notification_type=NotificationType.TIP_RECEIVED,
        data={"amount": 10},
    )
    notification_service.mark_read(db, first.id, driver.id, RecipientType.DRIVER)

    second = notification_service.create_notification(
        db,
        recipient_id=driver.id,
        recipient_type=RecipientType.DRIVER,
        notification_type=NotificationType.TIP_RECEIVED,
        data={"amount": 5},
    )
    assert second.id != first.id
    assert second.group_count == 1


def test_non_grouped_types_never_merge(db, driver):
    for code in ("JOB1", "JOB2"):
        notification_service.create_notification(
            db,
            recipient_id=driver.id,
            recipient_type=RecipientType.DRIVER,
            notification_type=NotificationType.JOB_ASSIGNED,
            data={"job_code": code},
        )
    assert db.query(Notification).count() == 2


def test_batch_skips_invalid_requests(db, driver, mover):
    created = notification_service.batch_create_notifications(
        db,
        [
            {
                "recipient_id": driver.id,
                "recipient_type": RecipientType.DRIVER,
                "notification_type": NotificationType.JOB_ASSIGNED,
                "data": {"job_code": "JOB1"},
            },
            {
                "recipient_id": mover.id,
                "recipient_type": RecipientType.MOVER,
                "notification_type": NotificationType.JOB_ASSIGNED,
                "data": {},
            },
            {
                "recipient_id": mover.id,
                "recipient_type": RecipientType.MOVER,
                "notification_type": NotificationType.PAYOUT_PROCESSED,
                "data": {"amount": 120},
            },
        ],
    )
    assert len(created) == 2
    assert db.query(Notification).count() == 2


def test_try_create_notification_returns_none_on_error(db, customer):
    result = notification_service.try_create_notification(
        db,
        recipient_id=customer.id,
        recipient_type=RecipientType.USER,
        notification_type=NotificationType.PAYMENT_FAILED,
        data={},
    )
    assert result is None


# =============================================================================
# Inbox endpoints
# =============================================================================

def _seed_inbox(db, mover):
    for code in ("JOB1", "JOB2", "JOB3"):
        notification_service.create_notification(
            db,
            recipient_id=mover.id,
            recipient_type=RecipientType.MOVER,
            notification_type=NotificationType.JOB_ASSIGNED,
            data={"job_code": code},
            moving_partner_id=mover.id,
        )
    archived = notification_service.create_notification(
        db,
        recipient_id=mover.id,
        recipient_type=RecipientType.MOVER,
        notification_type=NotificationType.JOB_CANCELLED,
        data={"job_code": "OLD"},
    )
    archived.status = NotificationStatus.ARCHIVED.value
    db.commit()


async def test_list_notifications_hides_archived(mover_client, db, mover):
    _seed_inbox(db, mover)

    response = await mover_client.get("/api/notifications")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["unread_count"] == 3
    assert all(item["status"] != "ARCHIVED" for item in body["items"])


async def test_inbox_is_scoped_to_the_account(customer_client, db, mover):
    _seed_inbox(db, mover)

    response = await customer_client.get("/api/notifications")
    assert response.status_code == 200
    assert response.json()["total"] == 0


async def test_mark_read_and_unread_count(mover_client, db, mover):
    _seed_inbox(db, mover)
    target = (
        db.query(Notification)
        .filter(Notification.status == NotificationStatus.UNREAD.value)
        .first()
    )

    response = await mover_client.patch(f"/api/notifications/{target.id}/read")
    assert response.status_code == 200
    assert response.json()["status"] == "READ"
    assert response.json()["read_at"] is not None

    response = await mover_client.get("/api/notifications/unread-count")
    assert response.json() == {"count": 2}


async def test_mark_read_other_accounts_notification_404(customer_client, db, mover):
    _seed_inbox(db, mover)
    target = db.query(Notification).first()

    response = await customer_client.patch(f"/api/notifications/{target.id}/read")
    assert response.status_code == 404


async def test_mark_all_read(mover_client, db, mover):
    _seed_inbox(db, mover)

    response = await mover_client.post("/api/notifications/read-all")
    assert response.status_code == 200
    assert response.json() == {"updated": 3}

    response = await mover_client.get("/api/notifications/unread-count")
    assert response.json() == {"count": 0}


async def test_inbox_requires_session(client):
    response = await client.get("/api/notifications")
    assert response.status_code == 401
    assert response.json()["error"] == "Not authenticated"
