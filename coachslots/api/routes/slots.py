# coachslots/api/routes/slots.py
from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from coachslots.api.deps import get_resolver
from coachslots.core.config import settings
from coachslots.core.errors import SchedulingError
from coachslots.schemas.availability import SlotsResponse
from coachslots.services.availability import AvailabilityResolver

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _parse_day(value: str, field: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise SchedulingError(f"{field} must be a date in YYYY-MM-DD format")


@router.get("/slots", response_model=SlotsResponse)
async def list_slots(
    from_date: str = Query(..., alias="from"),
    to_date: str = Query(..., alias="to"),
    coach: Optional[str] = None,
    event_id: Optional[str] = None,
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    """Bookable slots of a coach (weekly windows) or of one event type."""
    start = _parse_day(from_date, "from")
    end = _parse_day(to_date, "to")
    if start > end:
        raise SchedulingError("from must not be after to")
    if (end - start).days + 1 > settings.MAX_SLOT_RANGE_DAYS:
        raise SchedulingError(f"date range is limited to {settings.MAX_SLOT_RANGE_DAYS} days")

    if event_id:
        slots = await resolver.get_available_slots_for_event(event_id, start.isoformat(), end.isoformat())
    elif coach:
        slots = await resolver.get_available_slots(start.isoformat(), end.isoformat(), coach)
    else:
        raise SchedulingError("coach (user ID) or event_id is required")

    return {"slots": slots}
