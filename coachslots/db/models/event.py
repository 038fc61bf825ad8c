# coachslots/db/models/event.py

from __future__ import annotations
from datetime import datetime, timezone
import uuid
import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from coachslots.db.session import Base

class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "slug", name="uq_events_user_id_slug"),
        sa.Index("ix_events_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    slug: Mapped[str] = mapped_column(sa.String(120), nullable=False)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="30", default=30)
    min_advance_minutes: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="0", default=0)
    one_booking_per_email: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, server_default=sa.false(), default=False)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
