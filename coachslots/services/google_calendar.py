# coachslots/services/google_calendar.py
"""
Google Calendar busy-time lookup for slot blocking.
Reads events from every calendar a coach connected; never writes.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Callable, List, Optional, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coachslots.core.errors import CalendarUnavailableError
from coachslots.core.timezones import get_zone, parse_instant
from coachslots.crud.calendar import get_calendar_connection, list_calendar_ids
from coachslots.db.models.calendar import CalendarConnection

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"


@dataclass(frozen=True)
class ExternalCalendarEvent:
    start: str  # RFC 3339 dateTime, or YYYY-MM-DD for all-day events
    end: str


def build_calendar_service(
    connection: CalendarConnection,
    client_id: Optional[str],
    client_secret: Optional[str],
):
    """Calendar v3 service authorised with the coach's stored tokens.

    Token refresh is handled by google-auth when the access token has expired.
    """
    if not connection.access_token and not connection.refresh_token:
        raise CalendarUnavailableError("calendar connection has no tokens")

    expiry = None
    if connection.expires_at is not None:
        # google-auth compares expiry as naive UTC
        expiry = connection.expires_at
        if expiry.tzinfo is not None:
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)

    credentials = Credentials(
        token=connection.access_token,
        refresh_token=connection.refresh_token,
        token_uri=GOOGLE_TOKEN_URL,
        client_id=client_id,
        client_secret=client_secret,
        scopes=[CALENDAR_SCOPE],
        expiry=expiry,
    )
    return build("calendar", "v3", credentials=credentials, cache_discovery=False)


def fetch_events_for_calendar(
    service,
    calendar_id: str,
    start_utc: datetime,
    end_utc: datetime,
) -> List[ExternalCalendarEvent]:
    """
    List events of one calendar between two instants, following pagination.

    A failing calendar is logged and contributes no events, so one broken
    secondary calendar does not hide the others.
    """
    events: List[ExternalCalendarEvent] = []
    page_token: Optional[str] = None

    try:
        while True:
            result = service.events().list(
                calendarId=calendar_id,
                timeMin=start_utc.isoformat(),
                timeMax=end_utc.isoformat(),
                singleEvents=True,
                orderBy="startTime",
                pageToken=page_token,
            ).execute()

            for item in result.get("items", []):
                # Skip cancelled events
                if item.get("status") == "cancelled":
                    continue
                start = (item.get("start") or {})
                end = (item.get("end") or {})
                ev_start = start.get("dateTime") or start.get("date")
                ev_end = end.get("dateTime") or end.get("date")
                if ev_start and ev_end:
                    events.append(ExternalCalendarEvent(start=ev_start, end=ev_end))

            page_token = result.get("nextPageToken")
            if not page_token:
                break

    except HttpError as e:
        logger.error("Google Calendar events fetch failed for %s: %s", calendar_id, e)
        return []

    return events


def merge_events(events: Sequence[ExternalCalendarEvent]) -> List[ExternalCalendarEvent]:
    """Sort by start and drop exact (start, end) duplicates across calendars."""
    seen = set()
    merged: List[ExternalCalendarEvent] = []
    for ev in sorted(events, key=lambda e: e.start):
        key = (ev.start, ev.end)
        if key in seen:
            continue
        seen.add(key)
        merged.append(ev)
    return merged


def event_bounds(event: ExternalCalendarEvent, tz_name: str) -> Optional[tuple[datetime, datetime]]:
    """
    Absolute [start, end) of a provider event, or None when it cannot be parsed.

    All-day events carry date-only values with an exclusive end date and block
    whole civil days in the coach timezone.
    """
    try:
        return _to_instant(event.start, tz_name), _to_instant(event.end, tz_name)
    except ValueError:
        logger.debug("Skipping unparseable calendar event %s - %s", event.start, event.end)
        return None


def _to_instant(value: str, tz_name: str) -> datetime:
    if len(value) == 10:
        d = date.fromisoformat(value)
        return datetime.combine(d, time(0, 0), tzinfo=get_zone(tz_name)).astimezone(timezone.utc)
    return parse_instant(value)


class GoogleCalendarClient:
    """Lists a coach's external calendar events; empty when nothing is connected."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        enabled: bool,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        service_builder: Callable[..., Any] = build_calendar_service,
    ):
        self._session_factory = session_factory
        self.enabled = enabled
        self._client_id = client_id
        self._client_secret = client_secret
        self._service_builder = service_builder

    async def list_busy_events(
        self,
        user_id: str,
        start_utc: datetime,
        end_utc: datetime,
    ) -> List[ExternalCalendarEvent]:
        """
        Events from all of the coach's calendars between two instants.

        Returns [] when the integration is disabled or the coach has no
        connection. Raises CalendarUnavailableError when the provider cannot
        be reached at all.
        """
        if not self.enabled:
            return []

        async with self._session_factory() as db:
            connection = await get_calendar_connection(db, user_id=user_id)
            if connection is None:
                return []
            calendar_ids = await list_calendar_ids(db, user_id=user_id, fallback=connection.calendar_id)

        try:
            return await asyncio.to_thread(
                self._fetch_all, connection, calendar_ids, start_utc, end_utc
            )
        except GoogleAuthError as e:
            raise CalendarUnavailableError(f"Google authorisation failed: {e}") from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise CalendarUnavailableError(f"Google Calendar unreachable: {e}") from e

    def _fetch_all(
        self,
        connection: CalendarConnection,
        calendar_ids: Sequence[str],
        start_utc: datetime,
        end_utc: datetime,
    ) -> List[ExternalCalendarEvent]:
        service = self._service_builder(connection, self._client_id, self._client_secret)
        all_events: List[ExternalCalendarEvent] = []
        for calendar_id in calendar_ids:
            all_events.extend(fetch_events_for_calendar(service, calendar_id, start_utc, end_utc))
        return merge_events(all_events)
