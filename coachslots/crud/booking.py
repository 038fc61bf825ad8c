# coachslots/crud/booking.py

from __future__ import annotations
from datetime import datetime
from typing import Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from coachslots.core.timezones import as_utc
from coachslots.db.expressions import ends_after
from coachslots.db.models.booking import Booking


async def list_blocking_bookings(
    db: AsyncSession,
    *,
    user_id: str,
    start_utc: datetime,
    end_utc: datetime,
    default_minutes: int = 30,
) -> Sequence[sa.Row]:
    """Non-cancelled bookings overlapping [start_utc, end_utc).

    A booking with no duration runs for default_minutes.
    """
    q = (
        sa.select(
            Booking.id,
            Booking.name.label("client_name"),
            Booking.scheduled_at,
            Booking.duration_minutes,
        )
        .where(
            Booking.user_id == user_id,
            Booking.status != "cancelled",
            Booking.scheduled_at < as_utc(end_utc),
            ends_after(Booking.scheduled_at, Booking.duration_minutes, default_minutes, as_utc(start_utc)),
        )
        .order_by(Booking.scheduled_at.asc())
    )
    res = await db.execute(q)
    return res.all()


async def active_booking_exists_for_email(db: AsyncSession, *, event_id: str, email: str) -> bool:
    q = (
        sa.select(Booking.id)
        .where(
            Booking.event_id == event_id,
            sa.func.lower(Booking.email) == email.strip().lower(),
            Booking.status != "cancelled",
        )
        .limit(1)
    )
    res = await db.execute(q)
    return res.scalar_one_or_none() is not None


async def create_booking(
    db: AsyncSession,
    *,
    user_id: str,
    scheduled_at_utc: datetime,
    duration_minutes: int,
    email: str,
    name: str,
    phone: Optional[str] = None,
    note: Optional[str] = None,
    source: Optional[str] = None,
    event_id: Optional[str] = None,
    lead_id: Optional[str] = None,
    status: str = "pending",
) -> Booking:
    booking = Booking(
        user_id=user_id,
        scheduled_at=as_utc(scheduled_at_utc),
        duration_minutes=duration_minutes,
        email=email,
        name=name,
        phone=phone,
        note=note,
        source=source,
        event_id=event_id,
        lead_id=lead_id,
        status=status,
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)
    return booking
