"""Appointment models."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    func,
    sql,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stowline.db.base import Base
from stowline.db.enums import DEFAULT_APPOINTMENT_STATUS
from stowline.utils.dates import utcnow

if TYPE_CHECKING:
    from stowline.db.models.accounts import User
    from stowline.db.models.partners import MovingPartner


class Appointment(Base):
    """
    A booked job: pickup, delivery, access visit or end of term.

    Contact tracking fields record whether an admin reached the assigned
    moving partner; `got_hold_of_moving_partner` stays NULL until a call
    has been attempted.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_user", "user_id", "date"),
        Index("idx_appointments_status_date", "status", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    job_code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    moving_partner_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("moving_partners.id", ondelete="SET NULL"), nullable=True
    )

    appointment_type: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    zipcode: Mapped[str] = mapped_column(String(10), nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    time: Mapped[str | None] = mapped_column(String(50), nullable=True)  # arrival window label
    number_of_units: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    plan_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    insurance_coverage: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Pricing
    quoted_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    loading_help_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    monthly_storage_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    monthly_insurance_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    invoice_total: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_APPOINTMENT_STATUS.value,
        server_default=DEFAULT_APPOINTMENT_STATUS.value,
        nullable=False,
    )

    # Moving partner contact tracking
    called_moving_partner: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    got_hold_of_moving_partner: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    user: Mapped["User"] = relationship()
    moving_partner: Mapped["MovingPartner"] = relationship()


class AppointmentCancellation(Base):
    """Record of a customer cancellation and the fee it incurred."""

    __tablename__ = "appointment_cancellations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    appointment_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False
    )
    cancellation_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0"), nullable=False
    )
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancellation_date: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
