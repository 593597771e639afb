"""Driver and moving partner schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DriverRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone_number: str | None
    services: list[str]
    vehicle_type: str | None
    is_approved: bool
    application_complete: bool
    status: str
    dispatch_worker_id: str | None
    dispatch_team_ids: list[str]
    created_at: datetime


class DriverListResponse(BaseModel):
    items: list[DriverRead]
    total: int


class MovingPartnerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str | None
    phone_number: str | None
    website: str | None
    is_approved: bool
    application_complete: bool
    status: str
    dispatch_team_id: str | None
    created_at: datetime


class MovingPartnerListResponse(BaseModel):
    items: list[MovingPartnerRead]
    total: int


class DriverApprovalResponse(BaseModel):
    driver: DriverRead
    activated_moving_partner_ids: list[UUID]


class MovingPartnerApproveRequest(BaseModel):
    dispatch_team_id: str | None = Field(default=None, max_length=100)


class ActivationResponse(BaseModel):
    moving_partner: MovingPartnerRead
    activated: bool
    approved_driver_count: int
