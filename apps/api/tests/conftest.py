"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created and dropped per test
- One account of each type plus session-cookie clients for them
- Outbox fixture capturing SMS/email instead of calling providers
"""
import os
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from typing import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

# Must be set before stowline.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"

from stowline.main import app
from stowline.core.deps import COOKIE_NAME, CSRF_HEADER, CSRF_HEADER_VALUE, get_db
from stowline.core.security import create_session_token
from stowline.db.base import Base
from stowline.db.enums import AccountType, AdminRole, AppointmentType
from stowline.db.models import Admin, Appointment, Driver, MovingPartner, StorageUnit, User
from stowline.db.session import SessionLocal, engine
from stowline.services import email_service, sms_service
from stowline.utils.dates import utcnow


CSRF_HEADERS = {CSRF_HEADER: CSRF_HEADER_VALUE}


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema for every test.

    The app and the test share this session, so fixture data is committed
    (routers roll back on validation errors).
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


# =============================================================================
# Account Fixtures
# =============================================================================

def _unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def admin(db: Session) -> Admin:
    account = Admin(email=f"{_unique('ops')}@stowline.test", name="Ops Admin", role=AdminRole.ADMIN.value)
    db.add(account)
    db.commit()
    return account


@pytest.fixture
def viewer_admin(db: Session) -> Admin:
    account = Admin(email=f"{_unique('viewer')}@stowline.test", name="Read Only", role=AdminRole.VIEWER.value)
    db.add(account)
    db.commit()
    return account


@pytest.fixture
def customer(db: Session) -> User:
    user = User(
        first_name="Jane",
        last_name="Doe",
        email=f"{_unique('jane')}@example.com",
        phone_number="5551234567",
        verified_phone_number=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def other_customer(db: Session) -> User:
    user = User(
        first_name="Sam",
        last_name="Roe",
        email=f"{_unique('sam')}@example.com",
        phone_number="5559876543",
        verified_phone_number=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def driver(db: Session) -> Driver:
    account = Driver(
        first_name="Dana",
        last_name="Wheeler",
        email=f"{_unique('dana')}@example.com",
        phone_number="5550001111",
        services=["Storage Pickup"],
        vehicle_type="truck",
        application_complete=True,
    )
    db.add(account)
    db.commit()
    return account


@pytest.fixture
def mover(db: Session) -> MovingPartner:
    partner = MovingPartner(
        name="Careful Movers LLC",
        email=f"{_unique('careful')}@example.com",
        phone_number="5552223333",
        application_complete=True,
    )
    db.add(partner)
    db.commit()
    return partner


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def make_appointment(db: Session, customer: User):
    """Factory: appointment for `customer` `hours_ahead` hours from now."""
    def _make(
        *,
        hours_ahead: float = 72,
        appointment_type: AppointmentType = AppointmentType.INITIAL_PICKUP,
        number_of_units: int = 1,
        user: User | None = None,
        **fields,
    ) -> Appointment:
        appointment = Appointment(
            job_code=_unique("JOB").upper()[:20],
            user_id=(user or customer).id,
            appointment_type=appointment_type.value,
            address="123 Main St",
            zipcode="94110",
            date=utcnow() + timedelta(hours=hours_ahead),
            number_of_units=number_of_units,
            **fields,
        )
        db.add(appointment)
        db.commit()
        return appointment
    return _make


@pytest.fixture
def make_storage_unit(db: Session):
    counter = {"n": 0}

    def _make(status: str = "Empty") -> StorageUnit:
        counter["n"] += 1
        unit = StorageUnit(storage_unit_number=f"A-{counter['n']:03d}", status=status)
        db.add(unit)
        db.commit()
        return unit
    return _make


# =============================================================================
# Outbound Messaging
# =============================================================================

@dataclass
class Outbox:
    sms: list[tuple[str, str]] = field(default_factory=list)
    emails: list[tuple[str, str, str]] = field(default_factory=list)
    sms_result: tuple[bool, str | None] = (True, None)
    email_result: tuple[bool, str | None] = (True, None)


@pytest.fixture
def outbox(monkeypatch) -> Outbox:
    """Capture SMS and email sends."""
    box = Outbox()

    async def fake_send_sms(to_phone, body):
        box.sms.append((to_phone, body))
        return box.sms_result

    async def fake_send_email(to_email, subject, text, html=None):
        box.emails.append((to_email, subject, text))
        return box.email_result

    monkeypatch.setattr(sms_service, "send_sms", fake_send_sms)
    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return box


# =============================================================================
# Client Fixtures
# =============================================================================

@asynccontextmanager
async def _client(db: Session, cookies: dict | None = None, headers: dict | None = None):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies=cookies or {},
        headers=headers or {},
    ) as c:
        yield c

    app.dependency_overrides.clear()


def session_cookie(account_id, account_type: AccountType) -> dict:
    return {COOKIE_NAME: create_session_token(account_id, account_type.value)}


@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client without the CSRF header."""
    async with _client(db) as c:
        yield c


@pytest.fixture(scope="function")
async def admin_client(db: Session, admin: Admin) -> AsyncGenerator[AsyncClient, None]:
    async with _client(db, session_cookie(admin.id, AccountType.ADMIN), CSRF_HEADERS) as c:
        yield c


@pytest.fixture(scope="function")
async def viewer_client(db: Session, viewer_admin: Admin) -> AsyncGenerator[AsyncClient, None]:
    async with _client(db, session_cookie(viewer_admin.id, AccountType.ADMIN), CSRF_HEADERS) as c:
        yield c


@pytest.fixture(scope="function")
async def customer_client(db: Session, customer: User) -> AsyncGenerator[AsyncClient, None]:
    async with _client(db, session_cookie(customer.id, AccountType.USER), CSRF_HEADERS) as c:
        yield c


@pytest.fixture(scope="function")
async def other_customer_client(db: Session, other_customer: User) -> AsyncGenerator[AsyncClient, None]:
    async with _client(db, session_cookie(other_customer.id, AccountType.USER), CSRF_HEADERS) as c:
        yield c


@pytest.fixture(scope="function")
async def mover_client(db: Session, mover: MovingPartner) -> AsyncGenerator[AsyncClient, None]:
    async with _client(db, session_cookie(mover.id, AccountType.MOVER), CSRF_HEADERS) as c:
        yield c
