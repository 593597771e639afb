"""Admin audit log schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AdminLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    admin_id: UUID
    action: str
    target_type: str
    target_id: str
    details: dict[str, Any] | None
    created_at: datetime


class AdminLogListResponse(BaseModel):
    items: list[AdminLogRead]
    total: int
