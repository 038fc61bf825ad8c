# coachslots/api/routes/availability.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from coachslots.api.auth import current_coach_id
from coachslots.core.errors import NotFoundError
from coachslots.core.logging import get_logger
from coachslots.crud.availability import (
    get_event,
    list_event_windows,
    list_weekly_windows,
    replace_event_windows,
    replace_weekly_windows,
)
from coachslots.db.session import get_session
from coachslots.schemas.availability import (
    EventWindowOut,
    EventWindowsUpdate,
    WeeklyWindowOut,
    WeeklyWindowsUpdate,
)

router = APIRouter(tags=["availability"])
logger = get_logger(__name__)


@router.get("/availability/weekly", response_model=List[WeeklyWindowOut])
async def get_weekly_availability(
    coach_id: str = Depends(current_coach_id),
    db: AsyncSession = Depends(get_session),
):
    return await list_weekly_windows(db, user_id=coach_id)


@router.put("/availability/weekly", response_model=List[WeeklyWindowOut])
async def put_weekly_availability(
    body: WeeklyWindowsUpdate,
    coach_id: str = Depends(current_coach_id),
    db: AsyncSession = Depends(get_session),
):
    """Replace every weekly window of the coach with the submitted set."""
    rows = await replace_weekly_windows(db, user_id=coach_id, windows=[w.model_dump() for w in body.windows])
    logger.info("weekly_availability_saved", windows=len(rows))
    return rows


async def _owned_event(db: AsyncSession, event_id: str, coach_id: str):
    event = await get_event(db, event_id=event_id, user_id=coach_id)
    if event is None:
        raise NotFoundError("Not found")
    return event


@router.get("/events/{event_id}/availability", response_model=List[EventWindowOut])
async def get_event_availability(
    event_id: str,
    coach_id: str = Depends(current_coach_id),
    db: AsyncSession = Depends(get_session),
):
    await _owned_event(db, event_id, coach_id)
    return await list_event_windows(db, event_id=event_id)


@router.put("/events/{event_id}/availability", response_model=List[EventWindowOut])
async def put_event_availability(
    event_id: str,
    body: EventWindowsUpdate,
    coach_id: str = Depends(current_coach_id),
    db: AsyncSession = Depends(get_session),
):
    """Replace every window of one event type."""
    await _owned_event(db, event_id, coach_id)
    rows = await replace_event_windows(db, event_id=event_id, windows=[w.model_dump() for w in body.windows])
    logger.info("event_availability_saved", event_id=event_id, windows=len(rows))
    return rows
