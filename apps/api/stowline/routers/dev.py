"""Development-only endpoints for seeding and logging in without SMS."""

from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Response
from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.core.deps import get_db
from stowline.core.security import create_session_token
from stowline.db.enums import AccountType, AdminRole, StorageUnitStatus
from stowline.db.models import Admin, Driver, MovingPartner, StorageUnit, User
from stowline.routers.auth import set_session_cookie

router = APIRouter()


def _verify_dev_secret(x_dev_secret: str = Header(...)):
    """Dev endpoints need the X-Dev-Secret header on top of ENV=dev."""
    if x_dev_secret != settings.DEV_SECRET:
        raise HTTPException(status_code=403, detail="Invalid dev secret")


@router.post("/seed", dependencies=[Depends(_verify_dev_secret)])
def seed_test_data(db: Session = Depends(get_db)):
    """
    Create one account of each type and a handful of storage units.

    Idempotent - returns existing data if already seeded.
    """
    existing = db.query(Admin).filter(Admin.email == "admin@stowline.test").first()
    if existing:
        return {"status": "already_seeded", "admin_id": str(existing.id)}

    admin = Admin(email="admin@stowline.test", name="Dev Admin", role=AdminRole.SUPERADMIN.value)
    user = User(
        first_name="Casey",
        last_name="Customer",
        email="customer@stowline.test",
        phone_number="5550000001",
    )
    partner = MovingPartner(
        name="Dev Movers", email="movers@stowline.test", phone_number="5550000002"
    )
    driver = Driver(
        first_name="Drew",
        last_name="Driver",
        email="driver@stowline.test",
        phone_number="5550000003",
    )
    db.add_all([admin, user, partner, driver])
    for i in range(1, 11):
        db.add(StorageUnit(storage_unit_number=f"DEV-{i:03d}", status=StorageUnitStatus.EMPTY.value))
    db.commit()

    return {
        "status": "seeded",
        "admin_id": str(admin.id),
        "user_id": str(user.id),
        "moving_partner_id": str(partner.id),
        "driver_id": str(driver.id),
    }


@router.post("/login/{account_type}/{account_id}", dependencies=[Depends(_verify_dev_secret)])
def dev_login(account_type: AccountType, account_id: UUID, response: Response):
    """Set a session cookie for any account without a verification code."""
    set_session_cookie(response, create_session_token(account_id, account_type.value))
    return {"status": "logged_in", "account_type": account_type.value, "account_id": str(account_id)}
