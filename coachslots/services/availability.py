# coachslots/services/availability.py
"""
Availability resolution for a coach's booking page.

Slots are never stored: every call recomputes them from the current windows,
bookings, sessions and external calendar events.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coachslots.core.config import Settings
from coachslots.core.timezones import as_utc, day_end_utc, day_start_utc, parse_instant, to_iso_z
from coachslots.crud.availability import get_event, list_event_windows, list_weekly_windows
from coachslots.db.capabilities import SchemaCapabilities
from coachslots.scheduling.blocking import BlockedIntervalCollector, CalendarSource
from coachslots.scheduling.intervals import Slot, filter_candidates, interval_for, is_blocked, overlaps
from coachslots.scheduling.windows import CandidateSlot, WeeklyWindow, date_range, expand_windows

logger = logging.getLogger(__name__)

# Offered-slot matching tolerates clients that drop sub-minute precision
SLOT_MATCH_TOLERANCE = timedelta(seconds=60)
BOOKING_CONFLICT_TITLE = "Intro call"


def _instant(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    return parse_instant(value)


class AvailabilityResolver:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        calendar: CalendarSource,
        *,
        capabilities: SchemaCapabilities,
        settings: Settings,
    ):
        self._session_factory = session_factory
        self.settings = settings
        self.tz_name = settings.COACH_TIMEZONE
        self.collector = BlockedIntervalCollector(
            session_factory,
            calendar,
            capabilities=capabilities,
            tz_name=settings.COACH_TIMEZONE,
            default_duration_minutes=settings.DEFAULT_DURATION_MINUTES,
        )

    async def get_available_slots(self, from_date: str, to_date: str, user_id: str) -> List[Slot]:
        """Open slots of the coach's weekly windows between two YYYY-MM-DD dates (inclusive)."""
        async with self._session_factory() as db:
            rows = await list_weekly_windows(db, user_id=user_id)

        if not rows:
            return []

        windows = [
            WeeklyWindow.from_times(r.id, r.day_of_week, r.start_time, r.end_time, r.slot_duration_minutes)
            for r in rows
        ]
        return await self._resolve(windows, from_date, to_date, user_id)

    async def get_available_slots_for_event(self, event_id: str, from_date: str, to_date: str) -> List[Slot]:
        """Open slots of one event type; window length is the event's duration."""
        async with self._session_factory() as db:
            event = await get_event(db, event_id=event_id)
            if event is None:
                return []
            rows = await list_event_windows(db, event_id=event_id)
            user_id = event.user_id
            duration = event.duration_minutes

        windows = [
            WeeklyWindow.from_times(
                r.id,
                r.day_of_week,
                r.start_time,
                r.end_time,
                duration,
            )
            for r in rows
        ]
        if not windows:
            return []
        return await self._resolve(windows, from_date, to_date, user_id)

    async def is_slot_free(
        self,
        scheduled_at: Union[str, datetime],
        duration_minutes: int,
        user_id: str,
        exclude_session_id: Optional[str] = None,
    ) -> bool:
        """
        Point check used right before a booking or session is written.

        External calendar events are fetched over the slot padded on both sides
        (CALENDAR_CHECK_PAD_HOURS); the overlap test itself is exact.
        """
        start = _instant(scheduled_at)
        end = start + timedelta(minutes=duration_minutes)
        pad = timedelta(hours=self.settings.CALENDAR_CHECK_PAD_HOURS)

        blocked = await self.collector.collect(
            user_id,
            start,
            end,
            exclude_session_id=exclude_session_id,
            calendar_start=start - pad,
            calendar_end=end + pad,
        )
        free = not is_blocked(start, end, blocked)
        if not free:
            logger.info("Slot %s (%s min) is taken for %s", to_iso_z(start), duration_minutes, user_id)
        return free

    async def is_slot_offered(
        self,
        scheduled_at: Union[str, datetime],
        user_id: str,
        event_id: Optional[str] = None,
    ) -> bool:
        """Whether the instant is one of the slots offered on its (UTC) date."""
        start = _instant(scheduled_at)
        day = start.date().isoformat()
        if event_id:
            slots = await self.get_available_slots_for_event(event_id, day, day)
        else:
            slots = await self.get_available_slots(day, day, user_id)
        return any(abs(parse_instant(s["slot_at"]) - start) < SLOT_MATCH_TOLERANCE for s in slots)

    async def find_conflicts(
        self,
        scheduled_at: Union[str, datetime],
        duration_minutes: int,
        user_id: str,
        exclude_session_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Sessions and bookings overlapping a proposed session time."""
        start = _instant(scheduled_at)
        end = start + timedelta(minutes=duration_minutes)
        default = self.settings.DEFAULT_DURATION_MINUTES

        sessions, bookings = await asyncio.gather(
            self.collector.fetch_sessions(user_id, start, end, exclude_session_id=exclude_session_id),
            self.collector.fetch_bookings(user_id, start, end),
        )

        conflicts: List[Dict[str, Any]] = []
        for kind, rows in (("session", sessions), ("booking", bookings)):
            for row in rows:
                iv = interval_for(row.scheduled_at, row.duration_minutes, default, source=kind)
                if not overlaps(start, end, iv.start, iv.end):
                    continue
                conflicts.append({
                    "type": kind,
                    "id": row.id,
                    "title": row.title if kind == "session" else BOOKING_CONFLICT_TITLE,
                    "scheduled_at": to_iso_z(iv.start),
                    "duration_minutes": row.duration_minutes or default,
                    "client_name": row.client_name or "",
                })
        return conflicts

    async def _resolve(
        self,
        windows: Sequence[WeeklyWindow],
        from_date: str,
        to_date: str,
        user_id: str,
    ) -> List[Slot]:
        range_start = day_start_utc(from_date)
        range_end = day_end_utc(to_date)
        # A slot starting just before range_end still runs past it
        longest = max(w.slot_duration_minutes for w in windows)

        blocked = await self.collector.collect(
            user_id, range_start, range_end + timedelta(minutes=longest)
        )

        candidates: List[CandidateSlot] = []
        for day in date_range(from_date, to_date):
            candidates.extend(expand_windows(day, windows, self.tz_name))

        slots = filter_candidates(candidates, blocked, range_start, range_end)
        logger.debug(
            "Resolved %d of %d candidate slots for %s (%s..%s, %d blocked)",
            len(slots), len(candidates), user_id, from_date, to_date, len(blocked),
        )
        return slots
