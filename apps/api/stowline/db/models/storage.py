"""Storage unit models: units, occupancy history and cleanings."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, Index, String, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stowline.db.base import Base
from stowline.db.enums import StorageUnitStatus
from stowline.utils.dates import utcnow

if TYPE_CHECKING:
    from stowline.db.models.accounts import User


class StorageUnit(Base):
    """A physical storage container."""

    __tablename__ = "storage_units"
    __table_args__ = (Index("idx_storage_units_status", "status"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    storage_unit_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    barcode: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30),
        default=StorageUnitStatus.EMPTY.value,
        server_default=StorageUnitStatus.EMPTY.value,
        nullable=False,
    )
    cleaning_photos: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    last_cleaned_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    usages: Mapped[list["StorageUnitUsage"]] = relationship(back_populates="storage_unit")


class StorageUnitUsage(Base):
    """
    One occupancy period of a unit by a customer.

    NULL usage_end_date marks the active occupancy; the partial unique index
    allows at most one per unit.
    """

    __tablename__ = "storage_unit_usages"
    __table_args__ = (
        Index(
            "uq_storage_unit_usages_active",
            "storage_unit_id",
            unique=True,
            postgresql_where=text("usage_end_date IS NULL"),
            sqlite_where=text("usage_end_date IS NULL"),
        ),
        Index("idx_storage_unit_usages_user", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    storage_unit_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("storage_units.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    start_appointment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    end_appointment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    usage_start_date: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    usage_end_date: Mapped[datetime | None] = mapped_column(nullable=True)
    warehouse_location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    warehouse_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    padlock_combo: Mapped[str | None] = mapped_column(String(20), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    storage_unit: Mapped[StorageUnit] = relationship(back_populates="usages")
    user: Mapped["User"] = relationship()


class StorageUnitCleaning(Base):
    """A completed cleaning of a unit with photo evidence."""

    __tablename__ = "storage_unit_cleanings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    storage_unit_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("storage_units.id", ondelete="CASCADE"), nullable=False
    )
    admin_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("admins.id", ondelete="RESTRICT"), nullable=False
    )
    cleaned_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    photos: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
