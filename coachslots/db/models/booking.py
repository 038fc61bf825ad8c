# coachslots/db/models/booking.py

from __future__ import annotations
from datetime import datetime, timezone
import uuid
import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from coachslots.db.session import Base

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        sa.CheckConstraint("status IN ('pending', 'confirmed', 'cancelled')", name="ck_bookings_status"),
        sa.Index("ix_bookings_user_id", "user_id"),
        sa.Index("ix_bookings_scheduled_at", "scheduled_at"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    event_id: Mapped[str | None] = mapped_column(sa.String(64), sa.ForeignKey("events.id", ondelete="SET NULL"))
    lead_id: Mapped[str | None] = mapped_column(sa.String(64))

    # Store as timezone-aware UTC
    scheduled_at: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)
    duration_minutes: Mapped[int | None] = mapped_column(sa.Integer, server_default="30")
    email: Mapped[str] = mapped_column(sa.String(320), nullable=False)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    phone: Mapped[str | None] = mapped_column(sa.String(40))
    note: Mapped[str | None] = mapped_column(sa.Text)
    source: Mapped[str | None] = mapped_column(sa.String(50))
    status: Mapped[str] = mapped_column(sa.String(16), nullable=False, server_default="pending", default="pending")

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
