"""Service provider models: drivers, moving partners, vehicles."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    sql,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stowline.db.base import Base
from stowline.db.enums import DriverStatus, MovingPartnerStatus
from stowline.utils.dates import utcnow


class Driver(Base):
    """
    An individual driver.

    Drivers either work directly for the platform or are linked to one or
    more moving partners through MovingPartnerDriver.
    """

    __tablename__ = "drivers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    verified_phone_number: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    services: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    vehicle_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    has_trailer_hitch: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )

    is_approved: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    application_complete: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=DriverStatus.PENDING.value,
        server_default=DriverStatus.PENDING.value,
        nullable=False,
    )

    # Dispatch platform registration
    dispatch_worker_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    dispatch_team_ids: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    # Payments platform linkage (identifiers only)
    payment_account_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    payment_onboarding_complete: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    payment_payouts_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    agreed_to_terms: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    moving_partner_links: Mapped[list["MovingPartnerDriver"]] = relationship(
        back_populates="driver"
    )


class MovingPartner(Base):
    """A moving company that fulfils jobs with its own drivers."""

    __tablename__ = "moving_partners"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    verified_phone_number: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    dispatch_team_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_approved: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    application_complete: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=MovingPartnerStatus.INACTIVE.value,
        server_default=MovingPartnerStatus.INACTIVE.value,
        nullable=False,
    )

    payment_account_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    payment_onboarding_complete: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    payment_payouts_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    agreed_to_terms: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False
    )

    driver_links: Mapped[list["MovingPartnerDriver"]] = relationship(
        back_populates="moving_partner"
    )


class MovingPartnerDriver(Base):
    """Link between a moving partner and one of its drivers."""

    __tablename__ = "moving_partner_drivers"
    __table_args__ = (
        UniqueConstraint("moving_partner_id", "driver_id", name="uq_moving_partner_driver"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    moving_partner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("moving_partners.id", ondelete="CASCADE"), nullable=False
    )
    driver_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=sql.true(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )

    moving_partner: Mapped[MovingPartner] = relationship(back_populates="driver_links")
    driver: Mapped[Driver] = relationship(back_populates="moving_partner_links")


class Vehicle(Base):
    """A vehicle owned by a driver or a moving partner."""

    __tablename__ = "vehicles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    driver_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("drivers.id", ondelete="CASCADE"), nullable=True
    )
    moving_partner_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("moving_partners.id", ondelete="CASCADE"), nullable=True
    )
    make: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    license_plate: Mapped[str | None] = mapped_column(String(20), nullable=True)
    photos: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    is_approved: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=sql.false(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
