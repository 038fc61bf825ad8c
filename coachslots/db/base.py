# coachslots/db/base.py

"""
Model registry: importing this module puts every table on ``Base.metadata``.
Alembic's env.py and the schema helpers below rely on it.
"""
from sqlalchemy.ext.asyncio import AsyncEngine

from coachslots.db.models.availability import WeeklyAvailability, EventAvailability
from coachslots.db.models.booking import Booking
from coachslots.db.models.calendar import CalendarConnection, UserCalendar
from coachslots.db.models.coaching import Client, CoachingSession
from coachslots.db.models.event import Event
from coachslots.db.session import engine, Base

__all__ = [
    "Base", "engine", "init_db", "drop_db",
    "WeeklyAvailability", "EventAvailability", "Booking", "CalendarConnection",
    "UserCalendar", "Client", "CoachingSession", "Event",
]


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create missing tables; local SQLite runs use this instead of migrations."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(bind: AsyncEngine = engine) -> None:
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
