"""In-app notification model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from stowline.db.base import Base
from stowline.db.enums import NotificationStatus
from stowline.utils.dates import utcnow


class Notification(Base):
    """
    In-app notification for any account type.

    Grouped notifications share a group_key; repeats bump group_count on the
    newest unread row instead of inserting.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notif_recipient_status", "recipient_id", "recipient_type", "status", "created_at"),
        Index("idx_notif_group", "recipient_id", "group_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    recipient_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    recipient_type: Mapped[str] = mapped_column(String(20), nullable=False)

    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=NotificationStatus.UNREAD.value,
        server_default=NotificationStatus.UNREAD.value,
        nullable=False,
    )

    group_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    group_count: Mapped[int] = mapped_column(Integer, default=1, server_default="1", nullable=False)

    # Click-through references
    appointment_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True
    )
    driver_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True
    )
    moving_partner_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("moving_partners.id", ondelete="SET NULL"), nullable=True
    )

    read_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow, server_default=func.now(), nullable=False
    )
