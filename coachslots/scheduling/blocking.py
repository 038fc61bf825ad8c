# coachslots/scheduling/blocking.py
"""
Collects the time a coach has already committed.

Bookings, sessions and external calendar events are read concurrently; each
database branch opens its own session because an AsyncSession cannot run two
statements at once.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import List, Optional, Protocol, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coachslots.core.errors import CalendarUnavailableError
from coachslots.crud.booking import list_blocking_bookings
from coachslots.crud.coaching_session import list_blocking_sessions
from coachslots.db.capabilities import SchemaCapabilities
from coachslots.scheduling.intervals import BlockedInterval, interval_for
from coachslots.services.google_calendar import ExternalCalendarEvent, event_bounds

logger = logging.getLogger(__name__)


class CalendarSource(Protocol):
    async def list_busy_events(
        self, user_id: str, start_utc: datetime, end_utc: datetime
    ) -> List[ExternalCalendarEvent]: ...


class BlockedIntervalCollector:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        calendar: CalendarSource,
        *,
        capabilities: SchemaCapabilities,
        tz_name: str,
        default_duration_minutes: int = 30,
    ):
        self._session_factory = session_factory
        self._calendar = calendar
        self.capabilities = capabilities
        self.tz_name = tz_name
        self.default_duration_minutes = default_duration_minutes

    async def collect(
        self,
        user_id: str,
        start_utc: datetime,
        end_utc: datetime,
        *,
        exclude_session_id: Optional[str] = None,
        calendar_start: Optional[datetime] = None,
        calendar_end: Optional[datetime] = None,
    ) -> List[BlockedInterval]:
        """
        All blocked intervals for the coach around [start_utc, end_utc).

        calendar_start/calendar_end widen the window used for the external
        calendar only. Results are concatenated as-is.
        """
        bookings, sessions, calendar = await asyncio.gather(
            self.fetch_bookings(user_id, start_utc, end_utc),
            self.fetch_sessions(user_id, start_utc, end_utc, exclude_session_id=exclude_session_id),
            self.fetch_calendar_intervals(
                user_id,
                calendar_start or start_utc,
                calendar_end or end_utc,
            ),
        )

        blocked: List[BlockedInterval] = []
        for row in bookings:
            blocked.append(interval_for(row.scheduled_at, row.duration_minutes,
                                        self.default_duration_minutes, source="booking"))
        for row in sessions:
            blocked.append(interval_for(row.scheduled_at, row.duration_minutes,
                                        self.default_duration_minutes, source="session"))
        blocked.extend(calendar)
        return blocked

    async def fetch_bookings(self, user_id: str, start_utc: datetime, end_utc: datetime) -> Sequence[sa.Row]:
        async with self._session_factory() as db:
            return await list_blocking_bookings(
                db,
                user_id=user_id,
                start_utc=start_utc,
                end_utc=end_utc,
                default_minutes=self.default_duration_minutes,
            )

    async def fetch_sessions(
        self,
        user_id: str,
        start_utc: datetime,
        end_utc: datetime,
        *,
        exclude_session_id: Optional[str] = None,
    ) -> Sequence[sa.Row]:
        async with self._session_factory() as db:
            return await list_blocking_sessions(
                db,
                user_id=user_id,
                start_utc=start_utc,
                end_utc=end_utc,
                default_minutes=self.default_duration_minutes,
                has_owner_column=self.capabilities.sessions_have_owner_column,
                exclude_session_id=exclude_session_id,
            )

    async def fetch_calendar_intervals(
        self, user_id: str, start_utc: datetime, end_utc: datetime
    ) -> List[BlockedInterval]:
        try:
            events = await self._calendar.list_busy_events(user_id, start_utc, end_utc)
        except CalendarUnavailableError as e:
            logger.warning("External calendar unavailable for %s, ignoring its events: %s", user_id, e)
            return []

        intervals: List[BlockedInterval] = []
        for ev in events:
            bounds = event_bounds(ev, self.tz_name)
            if bounds is None:
                continue
            intervals.append(BlockedInterval(start=bounds[0], end=bounds[1], source="calendar"))
        return intervals
