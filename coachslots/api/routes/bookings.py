# coachslots/api/routes/bookings.py
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coachslots.api.auth import optional_coach_id
from coachslots.api.deps import get_resolver
from coachslots.core.config import settings
from coachslots.core.errors import (
    DuplicateBookingError,
    NotFoundError,
    SchedulingError,
    SlotNotOfferedError,
    SlotUnavailableError,
)
from coachslots.core.logging import get_logger
from coachslots.core.timezones import parse_instant, to_iso_z
from coachslots.crud.availability import get_event
from coachslots.crud.booking import active_booking_exists_for_email, create_booking
from coachslots.db.session import get_session
from coachslots.schemas.booking import BookingCreate, BookingCreated
from coachslots.services.availability import AvailabilityResolver

router = APIRouter(prefix="/bookings", tags=["bookings"])
logger = get_logger(__name__)


def _clamp_duration(value: Optional[int]) -> int:
    if value is None:
        return settings.DEFAULT_DURATION_MINUTES
    return min(settings.MAX_BOOKING_DURATION_MINUTES, max(settings.MIN_BOOKING_DURATION_MINUTES, int(value)))


@router.post("", response_model=BookingCreated)
async def create_booking_route(
    body: BookingCreate,
    db: AsyncSession = Depends(get_session),
    resolver: AvailabilityResolver = Depends(get_resolver),
    coach_id: Optional[str] = Depends(optional_coach_id),
):
    """
    Book a slot.

    Public callers may only take a slot currently offered on the booking page;
    a coach adding a booking manually may pick any free time. Either way the
    slot is re-checked for freedom right before the insert.
    """
    is_coach_adding = coach_id is not None
    resolved_coach = body.coach or coach_id
    duration = _clamp_duration(body.duration_minutes)
    one_booking_per_email = False

    if body.event_id:
        event = await get_event(db, event_id=body.event_id)
        if event is None:
            raise NotFoundError("Event not found")
        if not is_coach_adding:
            # The event decides the coach and the length for public bookings
            resolved_coach = event.user_id
            duration = _clamp_duration(event.duration_minutes)
        elif body.duration_minutes is None:
            duration = _clamp_duration(event.duration_minutes)
        one_booking_per_email = event.one_booking_per_email

    if not resolved_coach:
        raise SchedulingError("coach (user ID) or event_id is required")
    if not body.scheduled_at or not body.email or not body.name:
        raise SchedulingError("scheduled_at, email, and name are required")

    try:
        scheduled_at = parse_instant(body.scheduled_at)
    except ValueError:
        raise SchedulingError("Invalid scheduled_at")

    if not await resolver.is_slot_free(scheduled_at, duration, resolved_coach):
        raise SlotUnavailableError()

    if not is_coach_adding and not await resolver.is_slot_offered(
        scheduled_at, resolved_coach, event_id=body.event_id
    ):
        raise SlotNotOfferedError()

    if body.event_id and one_booking_per_email:
        if await active_booking_exists_for_email(db, event_id=body.event_id, email=body.email):
            raise DuplicateBookingError(
                "A booking with this e-mail already exists for this offer. "
                "Please use a different e-mail or contact us for another appointment."
            )

    # Freedom was checked above; a concurrent request can still insert between
    # the check and this commit (no unique constraint on coach + start).
    booking = await create_booking(
        db,
        user_id=resolved_coach,
        scheduled_at_utc=scheduled_at,
        duration_minutes=duration,
        email=body.email,
        name=body.name,
        phone=body.phone,
        note=body.note,
        source=body.source,
        event_id=body.event_id,
    )
    logger.info(
        "booking_created",
        booking_id=booking.id,
        coach=resolved_coach,
        scheduled_at=to_iso_z(scheduled_at),
        duration_minutes=duration,
        by_coach=is_coach_adding,
    )
    return BookingCreated(booking_id=booking.id, lead_id=booking.lead_id)
