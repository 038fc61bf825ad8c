# coachslots/api/routes/sessions.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from coachslots.api.auth import current_coach_id
from coachslots.api.deps import get_resolver
from coachslots.core.config import settings
from coachslots.core.errors import SchedulingError
from coachslots.core.timezones import parse_instant
from coachslots.schemas.session import ConflictsResponse, SlotCheck, SlotCheckResponse
from coachslots.services.availability import AvailabilityResolver

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _checked_start(body: SlotCheck):
    try:
        return parse_instant(body.scheduled_at)
    except ValueError:
        raise SchedulingError("Invalid scheduled_at")


@router.post("/check-conflicts", response_model=ConflictsResponse)
async def check_conflicts(
    body: SlotCheck,
    coach_id: str = Depends(current_coach_id),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    """Sessions and bookings that a session at this time would collide with."""
    start = _checked_start(body)
    duration = body.duration_minutes or settings.DEFAULT_DURATION_MINUTES
    conflicts = await resolver.find_conflicts(start, duration, coach_id, body.exclude_session_id)
    return {"conflicts": conflicts}


@router.post("/check-slot", response_model=SlotCheckResponse)
async def check_slot(
    body: SlotCheck,
    coach_id: str = Depends(current_coach_id),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    """Whether a session can be placed (or moved) here, external calendar included."""
    start = _checked_start(body)
    duration = body.duration_minutes or settings.DEFAULT_DURATION_MINUTES
    free = await resolver.is_slot_free(start, duration, coach_id, exclude_session_id=body.exclude_session_id)
    return {"free": free}
