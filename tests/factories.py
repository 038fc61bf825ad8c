#!/usr/bin/env python3
"""
Row builders shared by database-backed tests.
"""

from datetime import datetime, time, timezone

from coachslots.db.models.availability import EventAvailability, WeeklyAvailability
from coachslots.db.models.booking import Booking
from coachslots.db.models.coaching import Client, CoachingSession
from coachslots.db.models.event import Event

COACH_ID = "user_coach_1"
OTHER_COACH_ID = "user_coach_2"
API_KEY = "test_api_key"
COACH_HEADERS = {"X-API-Key": API_KEY, "X-User-Id": COACH_ID}


async def add_weekly_window(db, user_id=COACH_ID, day_of_week=1, start="09:00", end="10:00", duration=30):
    row = WeeklyAvailability(
        user_id=user_id,
        day_of_week=day_of_week,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        slot_duration_minutes=duration,
    )
    db.add(row)
    await db.commit()
    return row


async def add_booking(db, scheduled_at, duration=30, user_id=COACH_ID, status="pending",
                      email="client@example.com", event_id=None):
    row = Booking(
        user_id=user_id,
        scheduled_at=scheduled_at,
        duration_minutes=duration,
        email=email,
        name="Client",
        status=status,
        event_id=event_id,
    )
    db.add(row)
    await db.commit()
    return row


async def add_session(db, scheduled_at, duration=None, user_id=COACH_ID, owner_on_session=False,
                      title="Coaching", with_client=True):
    client_id = None
    if with_client:
        client = Client(user_id=user_id, name="Jana Novakova")
        db.add(client)
        await db.flush()
        client_id = client.id
    row = CoachingSession(
        client_id=client_id,
        user_id=user_id if owner_on_session else None,
        title=title,
        scheduled_at=scheduled_at,
        duration_minutes=duration,
    )
    db.add(row)
    await db.commit()
    return row


async def add_event(db, user_id=COACH_ID, duration=60, windows=(), one_booking_per_email=False, slug="intro"):
    event = Event(
        user_id=user_id,
        slug=slug,
        name="Intro session",
        duration_minutes=duration,
        one_booking_per_email=one_booking_per_email,
    )
    db.add(event)
    await db.flush()
    for day_of_week, start, end in windows:
        db.add(EventAvailability(
            event_id=event.id,
            day_of_week=day_of_week,
            start_time=time.fromisoformat(start),
            end_time=time.fromisoformat(end),
        ))
    await db.commit()
    return event


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


