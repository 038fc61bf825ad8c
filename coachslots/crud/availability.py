# coachslots/crud/availability.py

from __future__ import annotations
from datetime import time
from typing import Iterable, Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from coachslots.db.models.availability import WeeklyAvailability, EventAvailability
from coachslots.db.models.event import Event


async def list_weekly_windows(db: AsyncSession, *, user_id: str) -> Sequence[WeeklyAvailability]:
    q = (
        sa.select(WeeklyAvailability)
        .where(WeeklyAvailability.user_id == user_id)
        .order_by(WeeklyAvailability.day_of_week.asc(), WeeklyAvailability.start_time.asc())
    )
    res = await db.execute(q)
    return res.scalars().all()


async def replace_weekly_windows(
    db: AsyncSession,
    *,
    user_id: str,
    windows: Iterable[dict],
) -> Sequence[WeeklyAvailability]:
    """Save is "delete all, insert all" for the coach; there is no partial update."""
    await db.execute(sa.delete(WeeklyAvailability).where(WeeklyAvailability.user_id == user_id))
    for w in windows:
        db.add(WeeklyAvailability(
            user_id=user_id,
            day_of_week=w["day_of_week"],
            start_time=_as_time(w["start_time"]),
            end_time=_as_time(w["end_time"]),
            slot_duration_minutes=w.get("slot_duration_minutes") or 30,
        ))
    await db.commit()
    return await list_weekly_windows(db, user_id=user_id)


async def get_event(db: AsyncSession, *, event_id: str, user_id: Optional[str] = None) -> Optional[Event]:
    q = sa.select(Event).where(Event.id == event_id)
    if user_id is not None:
        q = q.where(Event.user_id == user_id)
    res = await db.execute(q.limit(1))
    return res.scalar_one_or_none()


async def list_event_windows(db: AsyncSession, *, event_id: str) -> Sequence[EventAvailability]:
    q = (
        sa.select(EventAvailability)
        .where(EventAvailability.event_id == event_id)
        .order_by(EventAvailability.day_of_week.asc(), EventAvailability.start_time.asc())
    )
    res = await db.execute(q)
    return res.scalars().all()


async def replace_event_windows(
    db: AsyncSession,
    *,
    event_id: str,
    windows: Iterable[dict],
) -> Sequence[EventAvailability]:
    await db.execute(sa.delete(EventAvailability).where(EventAvailability.event_id == event_id))
    for w in windows:
        db.add(EventAvailability(
            event_id=event_id,
            day_of_week=w["day_of_week"],
            start_time=_as_time(w["start_time"]),
            end_time=_as_time(w["end_time"]),
        ))
    await db.commit()
    return await list_event_windows(db, event_id=event_id)


def _as_time(value) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))
