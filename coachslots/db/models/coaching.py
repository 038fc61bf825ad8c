# coachslots/db/models/coaching.py

from __future__ import annotations
from datetime import datetime, timezone
import uuid
import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from coachslots.db.session import Base

class Client(Base):
    __tablename__ = "clients"
    __table_args__ = (
        sa.Index("ix_clients_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(sa.String(320))

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )


class CoachingSession(Base):
    """A meeting the coach scheduled with a client (table "sessions").

    Older deployments have no ``user_id`` column; ownership then comes only
    through the client. Queries must not touch ``user_id`` unless the schema
    capability says it exists.
    """
    __tablename__ = "sessions"
    __table_args__ = (
        sa.Index("ix_sessions_scheduled_at", "scheduled_at"),
    )

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    client_id: Mapped[str | None] = mapped_column(sa.String(64), sa.ForeignKey("clients.id", ondelete="CASCADE"))
    user_id: Mapped[str | None] = mapped_column(sa.String(64))
    title: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    scheduled_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True))
    duration_minutes: Mapped[int | None] = mapped_column(sa.Integer)
    notes: Mapped[str | None] = mapped_column(sa.Text)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
