"""Appointment schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from stowline.db.enums import AppointmentStatus, AppointmentType


class AppointmentCreate(BaseModel):
    """Customer booking request."""
    appointment_type: AppointmentType
    address: str = Field(min_length=3, max_length=500)
    zipcode: str = Field(pattern=r"^\d{5}$")
    date: datetime
    time: str | None = Field(default=None, max_length=50)
    number_of_units: int = Field(default=0, ge=0, le=20)
    plan_type: str | None = None
    insurance_coverage: str | None = None
    description: str | None = Field(default=None, max_length=2000)
    delivery_reason: str | None = None
    quoted_price: Decimal | None = Field(default=None, ge=0)
    loading_help_price: Decimal | None = Field(default=None, ge=0)
    monthly_storage_rate: Decimal | None = Field(default=None, ge=0)
    monthly_insurance_rate: Decimal | None = Field(default=None, ge=0)


class AppointmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_code: str
    user_id: UUID
    moving_partner_id: UUID | None
    appointment_type: str
    address: str
    zipcode: str
    date: datetime
    time: str | None
    number_of_units: int
    plan_type: str | None
    insurance_coverage: str | None
    description: str | None
    quoted_price: Decimal | None
    invoice_total: Decimal | None
    status: str
    called_moving_partner: bool
    got_hold_of_moving_partner: bool | None
    created_at: datetime
    updated_at: datetime


class AppointmentListResponse(BaseModel):
    items: list[AppointmentRead]
    total: int


class MovingPartnerContactUpdate(BaseModel):
    """
    Admin call log for the assigned moving partner.

    Strict booleans: "yes"/1 are rejected as malformed input.
    """
    called_moving_partner: StrictBool
    got_hold_of_moving_partner: StrictBool | None = None


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
    reason: str | None = Field(default=None, max_length=500)


class AppointmentCancelRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


class AppointmentCancellationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    appointment_id: UUID
    cancellation_fee: Decimal
    cancellation_reason: str | None
    cancellation_date: datetime
