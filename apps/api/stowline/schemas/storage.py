"""Storage unit schemas."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints


class StorageUnitRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    storage_unit_number: str
    barcode: str | None
    status: str
    cleaning_photos: list[str]
    last_cleaned_at: datetime | None


class StorageUnitUsageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    storage_unit_id: UUID
    user_id: UUID
    start_appointment_id: UUID | None
    end_appointment_id: UUID | None
    usage_start_date: datetime
    usage_end_date: datetime | None
    warehouse_location: str | None
    warehouse_name: str | None


class StorageUnitListItem(StorageUnitRead):
    active_usage: StorageUnitUsageRead | None = None


class StorageUnitListResponse(BaseModel):
    items: list[StorageUnitListItem]
    total: int


class StorageSummaryResponse(BaseModel):
    total: int
    counts: dict[str, int]
    reserved_upcoming: int
    available: int
    low_stock: bool


class AvailableCountResponse(BaseModel):
    available_count: int


PhotoUrl = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2048)]


class CleaningRequest(BaseModel):
    """Photo URLs of the cleaned unit; at least one is required."""
    photos: list[PhotoUrl] = Field(default_factory=list, max_length=20)
    notes: str | None = Field(default=None, max_length=1000)


class CleaningResponse(BaseModel):
    storage_unit: StorageUnitRead
    cleaning_id: UUID


class AssignUnitRequest(BaseModel):
    user_id: UUID
    start_appointment_id: UUID | None = None
    padlock_combo: str | None = Field(default=None, max_length=20)
    warehouse_location: str | None = None
    warehouse_name: str | None = None
    description: str | None = None


class ReleaseUnitRequest(BaseModel):
    end_appointment_id: UUID | None = None
