"""Tests for customer phone number updates."""

import pytest

from stowline.core.deps import COOKIE_NAME
from stowline.core.security import create_session_token
from stowline.db.models import User
from stowline.utils.normalization import normalize_phone, to_e164


# =============================================================================
# Normalization (unit)
# =============================================================================

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("(555) 123-4567", "5551234567"),
        ("555.123.4567", "5551234567"),
        ("5551234567", "5551234567"),
        ("", None),
        (None, None),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize("raw", ["555-1234", "+1 555 123 4567", "phone"])
def test_normalize_phone_rejects_wrong_length(raw):
    with pytest.raises(ValueError, match="Invalid phone number format"):
        normalize_phone(raw)


def test_to_e164():
    assert to_e164("5551234567") == "+15551234567"
    assert to_e164("+15551234567") == "+15551234567"


# =============================================================================
# PATCH /api/users/{id}/phone-number
# =============================================================================

async def test_update_phone_number(customer_client, db, customer):
    response = await customer_client.patch(
        f"/api/users/{customer.id}/phone-number", json={"phone_number": "(415) 555-0199"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["phone_number"] == "4155550199"
    assert body["verified_phone_number"] is False


@pytest.mark.parametrize("raw", ["555-1234", "555123456789", "not a phone", ""])
async def test_update_phone_number_invalid(customer_client, db, customer, raw):
    response = await customer_client.patch(
        f"/api/users/{customer.id}/phone-number", json={"phone_number": raw}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid phone number format"

    db.expire_all()
    assert customer.phone_number == "5551234567"
    assert customer.verified_phone_number is True


async def test_update_phone_number_taken(customer_client, db, customer, other_customer):
    response = await customer_client.patch(
        f"/api/users/{customer.id}/phone-number",
        json={"phone_number": other_customer.phone_number},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Phone number is already in use"


async def test_update_phone_number_same_number_is_allowed(customer_client, customer):
    response = await customer_client.patch(
        f"/api/users/{customer.id}/phone-number", json={"phone_number": "555-123-4567"}
    )
    assert response.status_code == 200
    assert response.json()["verified_phone_number"] is False


async def test_update_other_users_phone_forbidden(customer_client, db, other_customer):
    response = await customer_client.patch(
        f"/api/users/{other_customer.id}/phone-number", json={"phone_number": "4155550199"}
    )
    assert response.status_code == 403

    db.expire_all()
    assert db.get(User, other_customer.id).phone_number == "5559876543"


async def test_admin_can_update_any_phone(admin_client, customer):
    response = await admin_client.patch(
        f"/api/users/{customer.id}/phone-number", json={"phone_number": "4155550199"}
    )
    assert response.status_code == 200


async def test_update_phone_requires_csrf_header(client, customer):
    client.cookies.set(COOKIE_NAME, create_session_token(customer.id, "user"))
    response = await client.patch(
        f"/api/users/{customer.id}/phone-number", json={"phone_number": "4155550199"}
    )
    assert response.status_code == 403


async def test_get_user(customer_client, customer):
    response = await customer_client.get(f"/api/users/{customer.id}")
    assert response.status_code == 200
    assert response.json()["email"] == customer.email
