"""
Tests for storage units - cleaning, occupancy and availability.

Coverage:
- Cleaning requires photo evidence and writes unit + cleaning + log together
- Assign/release lifecycle and the one-active-usage rule
- Available count (empty minus reserved, floored at zero)
"""

import uuid

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from stowline.db.enums import AdminAction, AppointmentStatus, AppointmentType, StorageUnitStatus
from stowline.db.models import AdminLog, StorageUnit, StorageUnitCleaning, StorageUnitUsage
from stowline.services import audit_service, storage_unit_service
from stowline.utils.dates import utcnow


PHOTOS = ["https://cdn.stowline.test/cleaning/a.jpg", "https://cdn.stowline.test/cleaning/b.jpg"]


# =============================================================================
# Cleaning
# =============================================================================

async def test_clean_without_photos_rejected(admin_client, db, make_storage_unit):
    unit = make_storage_unit(status=StorageUnitStatus.PENDING_CLEANING.value)

    response = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/clean", json={"photos": []}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "At least one cleaning photo is required"

    db.expire_all()
    assert unit.status == StorageUnitStatus.PENDING_CLEANING.value
    assert unit.last_cleaned_at is None
    assert db.query(StorageUnitCleaning).count() == 0
    assert db.query(AdminLog).count() == 0


async def test_clean_with_photos(admin_client, db, admin, make_storage_unit):
    unit = make_storage_unit(status=StorageUnitStatus.PENDING_CLEANING.value)

    response = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/clean",
        json={"photos": PHOTOS, "notes": "Swept and wiped"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["storage_unit"]["status"] == "Empty"
    assert body["storage_unit"]["cleaning_photos"] == PHOTOS
    assert body["storage_unit"]["last_cleaned_at"] is not None

    cleaning = db.query(StorageUnitCleaning).one()
    assert str(cleaning.id) == body["cleaning_id"]
    assert cleaning.admin_id == admin.id
    assert cleaning.photos == PHOTOS

    log = db.query(AdminLog).one()
    assert log.action == AdminAction.MARK_STORAGE_UNIT_CLEAN.value
    assert log.target_id == str(unit.id)


async def test_clean_occupied_unit_rejected(admin_client, db, customer, make_storage_unit):
    unit = make_storage_unit(status=StorageUnitStatus.OCCUPIED.value)
    db.add(StorageUnitUsage(storage_unit_id=unit.id, user_id=customer.id))
    db.commit()

    response = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/clean", json={"photos": PHOTOS}
    )
    assert response.status_code == 400
    assert db.query(StorageUnitCleaning).count() == 0


async def test_clean_unknown_unit_404(admin_client):
    response = await admin_client.post(
        f"/api/admin/storage-units/{uuid.uuid4()}/clean", json={"photos": PHOTOS}
    )
    assert response.status_code == 404


async def test_clean_viewer_forbidden(viewer_client, db, make_storage_unit):
    unit = make_storage_unit(status=StorageUnitStatus.PENDING_CLEANING.value)

    response = await viewer_client.post(
        f"/api/admin/storage-units/{unit.id}/clean", json={"photos": PHOTOS}
    )
    assert response.status_code == 403
    assert db.query(StorageUnitCleaning).count() == 0


def test_mark_clean_service_requires_photos(db, admin, make_storage_unit):
    unit = make_storage_unit(status=StorageUnitStatus.PENDING_CLEANING.value)
    with pytest.raises(ValueError):
        storage_unit_service.mark_clean(db, unit, photos=[], admin_id=admin.id)
    with pytest.raises(ValueError, match="At least one cleaning photo"):
        storage_unit_service.mark_clean(db, unit, photos=["", "   "], admin_id=admin.id)


@pytest.mark.parametrize("photos", [[""], ["   "], [PHOTOS[0], ""]])
async def test_clean_with_blank_photo_rejected(admin_client, db, make_storage_unit, photos):
    unit = make_storage_unit(status=StorageUnitStatus.PENDING_CLEANING.value)

    response = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/clean", json={"photos": photos}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"

    db.expire_all()
    assert unit.status == StorageUnitStatus.PENDING_CLEANING.value
    assert db.query(StorageUnitCleaning).count() == 0


async def test_clean_audit_failure_rolls_back_everything(
    admin_client, db, make_storage_unit, monkeypatch
):
    unit = make_storage_unit(status=StorageUnitStatus.PENDING_CLEANING.value)

    def failing_log(*args, **kwargs):
        raise SQLAlchemyError("admin_logs insert failed")

    monkeypatch.setattr(audit_service, "log_admin_action", failing_log)

    response = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/clean", json={"photos": PHOTOS}
    )

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to record cleaning"

    db.expire_all()
    assert unit.status == StorageUnitStatus.PENDING_CLEANING.value
    assert unit.last_cleaned_at is None
    assert db.query(StorageUnitCleaning).count() == 0
    assert db.query(AdminLog).count() == 0


# =============================================================================
# Occupancy
# =============================================================================

async def test_assign_and_release(admin_client, db, customer, make_storage_unit):
    unit = make_storage_unit()

    response = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/assign",
        json={"user_id": str(customer.id), "warehouse_name": "Oakland"},
    )
    assert response.status_code == 201
    assert response.json()["usage_end_date"] is None

    db.expire_all()
    assert unit.status == StorageUnitStatus.OCCUPIED.value

    response = await admin_client.post(f"/api/admin/storage-units/{unit.id}/release", json={})
    assert response.status_code == 200
    assert response.json()["usage_end_date"] is not None

    db.expire_all()
    assert unit.status == StorageUnitStatus.PENDING_CLEANING.value
    actions = sorted(log.action for log in db.query(AdminLog).all())
    assert actions == sorted(
        [AdminAction.ASSIGN_STORAGE_UNIT.value, AdminAction.RELEASE_STORAGE_UNIT.value]
    )


async def test_assign_occupied_unit_rejected(admin_client, customer, other_customer, make_storage_unit):
    unit = make_storage_unit()
    first = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/assign", json={"user_id": str(customer.id)}
    )
    assert first.status_code == 201

    second = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/assign", json={"user_id": str(other_customer.id)}
    )
    assert second.status_code == 400
    assert second.json()["error"] == "Storage unit is already in use"


async def test_assign_unknown_user_404(admin_client, make_storage_unit):
    unit = make_storage_unit()
    response = await admin_client.post(
        f"/api/admin/storage-units/{unit.id}/assign", json={"user_id": str(uuid.uuid4())}
    )
    assert response.status_code == 404


async def test_release_without_active_usage_404(admin_client, make_storage_unit):
    unit = make_storage_unit()
    response = await admin_client.post(f"/api/admin/storage-units/{unit.id}/release", json={})
    assert response.status_code == 404


def test_one_active_usage_per_unit_enforced_by_index(db, customer, other_customer, make_storage_unit):
    unit = make_storage_unit()
    db.add(StorageUnitUsage(storage_unit_id=unit.id, user_id=customer.id))
    db.commit()

    db.add(StorageUnitUsage(storage_unit_id=unit.id, user_id=other_customer.id))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_closed_usages_do_not_count_as_active(db, customer, other_customer, make_storage_unit):
    unit = make_storage_unit()
    db.add(StorageUnitUsage(storage_unit_id=unit.id, user_id=customer.id, usage_end_date=utcnow()))
    db.add(StorageUnitUsage(storage_unit_id=unit.id, user_id=other_customer.id))
    db.commit()

    active = storage_unit_service.get_active_usage(db, unit.id)
    assert active.user_id == other_customer.id


async def test_list_units_includes_active_usage(admin_client, db, customer, make_storage_unit):
    occupied = make_storage_unit(status=StorageUnitStatus.OCCUPIED.value)
    make_storage_unit()
    db.add(StorageUnitUsage(storage_unit_id=occupied.id, user_id=customer.id))
    db.commit()

    response = await admin_client.get("/api/admin/storage-units")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    by_number = {item["storage_unit_number"]: item for item in body["items"]}
    assert by_number[occupied.storage_unit_number]["active_usage"]["user_id"] == str(customer.id)
    assert by_number["A-002"]["active_usage"] is None


# =============================================================================
# Availability
# =============================================================================

def _units(make_storage_unit, empty: int, occupied: int = 0) -> None:
    for _ in range(empty):
        make_storage_unit()
    for _ in range(occupied):
        make_storage_unit(status=StorageUnitStatus.OCCUPIED.value)


async def test_available_count_subtracts_upcoming_reservations(client, make_storage_unit, make_appointment):
    _units(make_storage_unit, empty=5, occupied=2)
    make_appointment(number_of_units=2)
    make_appointment(appointment_type=AppointmentType.ADDITIONAL_STORAGE, number_of_units=1)

    response = await client.get("/api/storage-units/available-count")
    assert response.status_code == 200
    assert response.json() == {"available_count": 2}


async def test_available_count_ignores_non_reserving_appointments(client, make_storage_unit, make_appointment):
    _units(make_storage_unit, empty=3)
    make_appointment(appointment_type=AppointmentType.STORAGE_UNIT_ACCESS, number_of_units=2)
    make_appointment(number_of_units=1, status=AppointmentStatus.CANCELED.value)
    make_appointment(number_of_units=1, hours_ahead=-48)

    response = await client.get("/api/storage-units/available-count")
    assert response.json() == {"available_count": 3}


async def test_available_count_never_negative(client, make_storage_unit, make_appointment):
    _units(make_storage_unit, empty=1)
    make_appointment(number_of_units=4)

    response = await client.get("/api/storage-units/available-count")
    assert response.json() == {"available_count": 0}


async def test_available_count_with_no_units(client):
    response = await client.get("/api/storage-units/available-count")
    assert response.json() == {"available_count": 0}


async def test_storage_summary(admin_client, make_storage_unit, make_appointment):
    _units(make_storage_unit, empty=4, occupied=1)
    make_storage_unit(status=StorageUnitStatus.PENDING_CLEANING.value)
    make_appointment(number_of_units=1)

    response = await admin_client.get("/api/admin/storage-units/summary")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 6
    assert body["counts"] == {"Empty": 4, "Occupied": 1, "Pending Cleaning": 1}
    assert body["reserved_upcoming"] == 1
    assert body["available"] == 3
    assert body["low_stock"] is True


def test_unit_count_queries(db, make_storage_unit):
    make_storage_unit()
    make_storage_unit(status=StorageUnitStatus.OCCUPIED.value)
    assert storage_unit_service.count_empty_units(db) == 1
    assert db.query(StorageUnit).count() == 2
