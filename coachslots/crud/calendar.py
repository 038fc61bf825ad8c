# coachslots/crud/calendar.py

from __future__ import annotations
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from coachslots.db.models.calendar import CalendarConnection, UserCalendar


async def get_calendar_connection(db: AsyncSession, *, user_id: str, provider: str = "google") -> Optional[CalendarConnection]:
    q = (
        sa.select(CalendarConnection)
        .where(CalendarConnection.user_id == user_id, CalendarConnection.provider == provider)
        .limit(1)
    )
    res = await db.execute(q)
    return res.scalar_one_or_none()


async def list_calendar_ids(
    db: AsyncSession,
    *,
    user_id: str,
    fallback: Optional[str] = None,
    provider: str = "google",
) -> List[str]:
    """Registered calendars, primary first; else the connection's calendar or "primary"."""
    q = (
        sa.select(UserCalendar.calendar_id)
        .where(UserCalendar.user_id == user_id, UserCalendar.provider == provider)
        .order_by(UserCalendar.is_primary.desc(), UserCalendar.created_at.asc())
    )
    res = await db.execute(q)
    ids = list(res.scalars().all())
    if ids:
        return ids
    return [fallback or "primary"]
