"""Admin audit log model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from stowline.db.base import Base
from stowline.utils.dates import utcnow


class AdminLog(Base):
    """
    Immutable record of an admin mutation.

    Rows are only ever inserted; details must not contain contact data.
    """

    __tablename__ = "admin_logs"
    __table_args__ = (
        Index("idx_admin_logs_target", "target_type", "target_id"),
        Index("idx_admin_logs_admin", "admin_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    admin_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("admins.id", ondelete="RESTRICT"), nullable=False
    )
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    target_type: Mapped[str] = mapped_column(String(50), nullable=False)
    target_id: Mapped[str] = mapped_column(String(64), nullable=False)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
