"""Tests for the admin audit log viewer."""

from stowline.db.enums import AdminAction, AuditTargetType
from stowline.services import audit_service


def _seed(db, admin, unit_ids):
    for unit_id in unit_ids:
        audit_service.log_admin_action(
            db,
            admin.id,
            AdminAction.MARK_STORAGE_UNIT_CLEAN,
            AuditTargetType.STORAGE_UNIT,
            unit_id,
            details={"photo_count": 1},
        )
    audit_service.log_admin_action(
        db, admin.id, AdminAction.LOGIN, AuditTargetType.ADMIN, admin.id
    )
    db.commit()


async def test_list_audit_logs(admin_client, db, admin, make_storage_unit):
    units = [make_storage_unit(), make_storage_unit()]
    _seed(db, admin, [u.id for u in units])

    response = await admin_client.get("/api/admin/audit-logs")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert {item["action"] for item in body["items"]} == {"MARK_STORAGE_UNIT_CLEAN", "LOGIN"}


async def test_filter_by_target(admin_client, db, admin, make_storage_unit):
    first, second = make_storage_unit(), make_storage_unit()
    _seed(db, admin, [first.id, second.id])

    response = await admin_client.get(
        "/api/admin/audit-logs",
        params={"target_type": "storage_unit", "target_id": str(second.id)},
    )

    body = response.json()
    assert body["total"] == 1
    assert body["items"][0]["target_id"] == str(second.id)
    assert body["items"][0]["details"] == {"photo_count": 1}


async def test_viewer_can_read_audit_logs(viewer_client):
    response = await viewer_client.get("/api/admin/audit-logs")
    assert response.status_code == 200
    assert response.json() == {"items": [], "total": 0}


async def test_customer_cannot_read_audit_logs(customer_client):
    response = await customer_client.get("/api/admin/audit-logs")
    assert response.status_code == 403
