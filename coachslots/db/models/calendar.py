# coachslots/db/models/calendar.py

from __future__ import annotations
from datetime import datetime, timezone
import uuid
import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from coachslots.db.session import Base

class CalendarConnection(Base):
    """OAuth tokens of a coach's Google account, written by the connect flow."""
    __tablename__ = "calendar_connections"
    __table_args__ = (
        sa.UniqueConstraint("user_id", "provider", name="uq_calendar_connections_user_provider"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    provider: Mapped[str] = mapped_column(sa.String(32), nullable=False, server_default="google", default="google")
    access_token: Mapped[str | None] = mapped_column(sa.Text)
    refresh_token: Mapped[str | None] = mapped_column(sa.Text)
    expires_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True))
    calendar_id: Mapped[str | None] = mapped_column(sa.String(255))


class UserCalendar(Base):
    """A calendar (primary or secondary) whose events block the coach's slots."""
    __tablename__ = "user_calendars"
    __table_args__ = (
        sa.Index("ix_user_calendars_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    provider: Mapped[str] = mapped_column(sa.String(32), nullable=False, server_default="google", default="google")
    calendar_id: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    is_primary: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, server_default=sa.false(), default=False)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
