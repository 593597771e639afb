"""Authentication-related Pydantic schemas."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from stowline.db.enums import AccountType, AdminRole


class AccountSession(BaseModel):
    """
    Session context for authenticated requests.

    Returned by the get_current_account dependency; admin_role is only set
    for admin accounts and is re-read from the database on every request.
    """
    account_id: UUID
    account_type: AccountType
    email: str | None = None
    display_name: str
    admin_role: AdminRole | None = None

    @property
    def is_admin(self) -> bool:
        return self.account_type == AccountType.ADMIN


class VerificationCodeRequest(BaseModel):
    """Ask for a login code. Phone for customers/providers, email for admins."""
    account_type: AccountType
    contact: str = Field(min_length=3, max_length=255)


class VerificationCodeResponse(BaseModel):
    sent: bool
    channel: Literal["sms", "email"]


class LoginRequest(BaseModel):
    account_type: AccountType
    contact: str = Field(min_length=3, max_length=255)
    code: str = Field(min_length=6, max_length=6)


class MeResponse(BaseModel):
    """Response schema for GET /auth/me."""
    account_id: UUID
    account_type: AccountType
    email: str | None
    display_name: str
    admin_role: AdminRole | None = None
