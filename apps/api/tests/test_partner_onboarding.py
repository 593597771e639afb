"""
Tests for driver approval and moving partner activation.

Coverage:
- Activation gate: approved + dispatch team + approved drivers
- Driver approval registers with dispatch and re-checks linked partners
- Dispatch failures roll the approval back
- Approval notifications are best effort
"""

import uuid
from types import SimpleNamespace

import pytest

from stowline.core.config import settings
from stowline.db.enums import AdminAction, DriverStatus, MovingPartnerStatus, NotificationType
from stowline.db.models import AdminLog, Driver, MovingPartnerDriver, Notification
from stowline.services import (
    approval_notification_service,
    dispatch_client,
    moving_partner_service,
)


@pytest.fixture
def dispatch(monkeypatch):
    """Fake dispatch platform recording worker registrations."""
    calls = []
    state = {"error": None}

    async def fake_create_worker(*, name, phone, team_ids, vehicle_type=None):
        calls.append({"name": name, "phone": phone, "team_ids": team_ids})
        if state["error"]:
            raise dispatch_client.DispatchError(state["error"])
        return f"worker-{len(calls)}"

    monkeypatch.setattr(dispatch_client, "create_worker", fake_create_worker)
    monkeypatch.setattr(settings, "DISPATCH_DEFAULT_TEAM_ID", "team-default")
    return SimpleNamespace(calls=calls, state=state)


def _link(db, mover, driver):
    db.add(MovingPartnerDriver(moving_partner_id=mover.id, driver_id=driver.id))
    db.commit()


# =============================================================================
# Activation gate (service)
# =============================================================================

def test_unapproved_partner_not_activated(db, mover, driver):
    driver.is_approved = True
    mover.dispatch_team_id = "team-1"
    _link(db, mover, driver)

    _, activated = moving_partner_service.check_and_activate(db, mover)
    assert activated is False
    assert mover.status == MovingPartnerStatus.INACTIVE.value


def test_partner_without_dispatch_team_not_activated(db, mover, driver):
    driver.is_approved = True
    mover.is_approved = True
    _link(db, mover, driver)

    _, activated = moving_partner_service.check_and_activate(db, mover)
    assert activated is False


def test_partner_without_approved_drivers_not_activated(db, mover, driver):
    mover.is_approved = True
    mover.dispatch_team_id = "team-1"
    _link(db, mover, driver)

    assert moving_partner_service.count_approved_drivers(db, mover.id) == 0
    _, activated = moving_partner_service.check_and_activate(db, mover)
    assert activated is False


def test_inactive_link_does_not_count(db, mover, driver):
    driver.is_approved = True
    mover.is_approved = True
    mover.dispatch_team_id = "team-1"
    db.add(MovingPartnerDriver(moving_partner_id=mover.id, driver_id=driver.id, is_active=False))
    db.commit()

    assert moving_partner_service.count_approved_drivers(db, mover.id) == 0


def test_partner_meeting_all_requirements_activated(db, mover, driver, admin):
    driver.is_approved = True
    mover.is_approved = True
    mover.dispatch_team_id = "team-1"
    _link(db, mover, driver)

    _, activated = moving_partner_service.check_and_activate(db, mover, admin_id=admin.id)
    assert activated is True
    assert mover.status == MovingPartnerStatus.ACTIVE.value
    assert db.query(AdminLog).one().action == AdminAction.ACTIVATE_MOVING_PARTNER.value

    _, again = moving_partner_service.check_and_activate(db, mover, admin_id=admin.id)
    assert again is False


# =============================================================================
# Moving partner approval (endpoint)
# =============================================================================

async def test_approve_partner_without_drivers_stays_inactive(admin_client, db, mover, outbox):
    response = await admin_client.post(
        f"/api/admin/moving-partners/{mover.id}/approve", json={"dispatch_team_id": "team-9"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["activated"] is False
    assert body["approved_driver_count"] == 0
    assert body["moving_partner"]["is_approved"] is True
    assert body["moving_partner"]["status"] == "INACTIVE"

    notice = db.query(Notification).one()
    assert notice.type == NotificationType.MOVER_PENDING_DRIVERS.value
    assert outbox.sms == []
    assert outbox.emails == []


async def test_approve_partner_with_approved_driver_activates(admin_client, db, mover, driver, outbox):
    driver.is_approved = True
    _link(db, mover, driver)

    response = await admin_client.post(
        f"/api/admin/moving-partners/{mover.id}/approve", json={"dispatch_team_id": "team-9"}
    )
    assert response.status_code == 200
    assert response.json()["activated"] is True
    assert response.json()["moving_partner"]["status"] == "ACTIVE"

    notice = db.query(Notification).one()
    assert notice.type == NotificationType.MOVER_ACTIVATED.value
    assert "Dana Wheeler" in notice.message
    [(to_phone, body)] = outbox.sms
    assert to_phone == mover.phone_number
    assert body.startswith("Careful Movers LLC is now active")
    assert "Dana Wheeler" in body
    [(to_email, subject, _)] = outbox.emails
    assert to_email == mover.email
    assert subject == "Careful Movers LLC is now active on Stowline"


async def test_approve_partner_twice_rejected(admin_client, mover, outbox):
    first = await admin_client.post(f"/api/admin/moving-partners/{mover.id}/approve", json={})
    assert first.status_code == 200

    second = await admin_client.post(f"/api/admin/moving-partners/{mover.id}/approve", json={})
    assert second.status_code == 400


async def test_check_activation_endpoint(admin_client, db, mover, driver, outbox):
    mover.is_approved = True
    mover.dispatch_team_id = "team-1"
    driver.is_approved = True
    _link(db, mover, driver)

    response = await admin_client.post(f"/api/admin/moving-partners/{mover.id}/check-activation")
    assert response.status_code == 200
    assert response.json()["activated"] is True
    assert outbox.sms[0][1].startswith("Careful Movers LLC is now active")


async def test_check_activation_unknown_partner(admin_client):
    response = await admin_client.post(f"/api/admin/moving-partners/{uuid.uuid4()}/check-activation")
    assert response.status_code == 404


async def test_list_moving_partners_filter(viewer_client, mover):
    response = await viewer_client.get("/api/admin/moving-partners", params={"status": "INACTIVE"})
    assert response.status_code == 200
    assert response.json()["total"] == 1


# =============================================================================
# Driver approval
# =============================================================================

async def test_approve_driver_registers_with_dispatch(admin_client, db, driver, dispatch, outbox):
    response = await admin_client.post(f"/api/admin/drivers/{driver.id}/approve")

    assert response.status_code == 200
    body = response.json()
    assert body["driver"]["is_approved"] is True
    assert body["driver"]["status"] == DriverStatus.ACTIVE.value
    assert body["driver"]["dispatch_worker_id"] == "worker-1"
    assert body["driver"]["dispatch_team_ids"] == ["team-default"]
    assert body["activated_moving_partner_ids"] == []

    assert dispatch.calls == [
        {"name": "Dana Wheeler", "phone": "5550001111", "team_ids": ["team-default"]}
    ]
    assert db.query(AdminLog).filter(AdminLog.action == AdminAction.APPROVE_DRIVER.value).count() == 1
    assert db.query(Notification).one().type == NotificationType.ACCOUNT_APPROVED.value
    assert len(outbox.sms) == 1
    assert len(outbox.emails) == 1


async def test_approve_driver_activates_linked_partner(admin_client, db, driver, mover, dispatch, outbox):
    mover.is_approved = True
    mover.dispatch_team_id = "team-1"
    _link(db, mover, driver)

    response = await admin_client.post(f"/api/admin/drivers/{driver.id}/approve")

    assert response.status_code == 200
    assert response.json()["activated_moving_partner_ids"] == [str(mover.id)]
    db.expire_all()
    assert mover.status == MovingPartnerStatus.ACTIVE.value

    mover_sms = [body for to, body in outbox.sms if to == mover.phone_number]
    assert mover_sms == [
        "Careful Movers LLC is now active on Stowline and can receive job offers. "
        "First approved driver: Dana Wheeler."
    ]
    assert mover.email in [to for to, _, _ in outbox.emails]


async def test_dispatch_failure_rolls_back(admin_client, db, driver, dispatch, outbox):
    dispatch.state["error"] = "HTTP 400 Invalid phone"

    response = await admin_client.post(f"/api/admin/drivers/{driver.id}/approve")

    assert response.status_code == 500
    assert response.json()["error"].startswith("Dispatch registration failed")

    db.expire_all()
    stored = db.query(Driver).filter(Driver.id == driver.id).one()
    assert stored.is_approved is False
    assert stored.dispatch_worker_id is None
    assert db.query(AdminLog).count() == 0
    assert outbox.sms == []


async def test_approve_driver_without_team_configured(admin_client, driver, dispatch, monkeypatch):
    monkeypatch.setattr(settings, "DISPATCH_DEFAULT_TEAM_ID", "")

    response = await admin_client.post(f"/api/admin/drivers/{driver.id}/approve")
    assert response.status_code == 400
    assert response.json()["error"] == "No dispatch teams configured"
    assert dispatch.calls == []


async def test_approve_driver_already_registered(admin_client, db, driver, dispatch):
    driver.dispatch_worker_id = "worker-existing"
    db.commit()

    response = await admin_client.post(f"/api/admin/drivers/{driver.id}/approve")
    assert response.status_code == 400
    assert dispatch.calls == []


async def test_approve_driver_notification_failure_does_not_fail(admin_client, driver, dispatch, outbox):
    outbox.sms_result = (False, "SMS provider error (500)")
    outbox.email_result = (False, "Email provider error (500)")

    response = await admin_client.post(f"/api/admin/drivers/{driver.id}/approve")
    assert response.status_code == 200


async def test_approve_driver_viewer_forbidden(viewer_client, driver, dispatch):
    response = await viewer_client.post(f"/api/admin/drivers/{driver.id}/approve")
    assert response.status_code == 403
    assert dispatch.calls == []


async def test_list_drivers(admin_client, driver):
    response = await admin_client.get("/api/admin/drivers", params={"is_approved": "false"})
    assert response.status_code == 200
    assert [d["id"] for d in response.json()["items"]] == [str(driver.id)]


# =============================================================================
# Approval notifications (service)
# =============================================================================

async def test_notify_driver_approved_reports_channel_failures(db, driver, outbox):
    outbox.email_result = (False, "Email provider error (500)")

    result = await approval_notification_service.notify_driver_approved(db, driver)

    assert result.in_app_success is True
    assert result.sms_success is True
    assert result.email_success is False
    assert result.errors == ["email: Email provider error (500)"]


async def test_notify_skips_channels_without_contact(db, mover, outbox):
    mover.phone_number = None
    mover.email = None

    result = await approval_notification_service.notify_mover_activated(db, mover, "Dana Wheeler")

    assert result.in_app_success is True
    assert result.sms_success is False
    assert result.errors == []
    assert outbox.sms == []
    assert outbox.emails == []


async def test_notify_mover_activated_looks_up_first_approved_driver(db, mover, driver, outbox):
    driver.is_approved = True
    _link(db, mover, driver)

    result = await approval_notification_service.notify_mover_activated(db, mover)

    assert result.in_app_success is True
    assert result.sms_success is True
    assert result.email_success is True
    notice = db.query(Notification).one()
    assert notice.type == NotificationType.MOVER_ACTIVATED.value
    assert notice.message == (
        "Careful Movers LLC is now active. Dana Wheeler is approved, "
        "so you can start receiving jobs."
    )


async def test_notify_mover_pending_drivers_is_in_app_only(db, mover, outbox):
    result = await approval_notification_service.notify_mover_pending_drivers(db, mover)

    assert result.in_app_success is True
    assert db.query(Notification).one().type == NotificationType.MOVER_PENDING_DRIVERS.value
    assert outbox.sms == []
    assert outbox.emails == []
