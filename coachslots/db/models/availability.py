# coachslots/db/models/availability.py

from __future__ import annotations
from datetime import datetime, time, timezone
import uuid
import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from coachslots.db.session import Base

class WeeklyAvailability(Base):
    """A coach's recurring weekly open window; day_of_week is 0=Sunday .. 6=Saturday."""
    __tablename__ = "weekly_availability"
    __table_args__ = (
        sa.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_weekly_availability_day"),
        sa.CheckConstraint("slot_duration_minutes > 0", name="ck_weekly_availability_duration"),
        sa.Index("ix_weekly_availability_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    day_of_week: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(sa.Time, nullable=False)
    end_time: Mapped[time] = mapped_column(sa.Time, nullable=False)
    slot_duration_minutes: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="30", default=30)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )


class EventAvailability(Base):
    """Per-event weekly window; the slot length is the event's duration."""
    __tablename__ = "event_availability"
    __table_args__ = (
        sa.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_event_availability_day"),
        sa.Index("ix_event_availability_event_id", "event_id"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id: Mapped[str] = mapped_column(sa.String(64), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    day_of_week: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(sa.Time, nullable=False)
    end_time: Mapped[time] = mapped_column(sa.Time, nullable=False)
