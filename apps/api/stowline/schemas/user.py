"""Customer account schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone_number: str | None
    verified_phone_number: bool
    created_at: datetime


class PhoneNumberUpdate(BaseModel):
    phone_number: str = Field(max_length=32)
