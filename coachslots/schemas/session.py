# coachslots/schemas/session.py

from __future__ import annotations
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class SlotCheck(BaseModel):
    scheduled_at: str
    duration_minutes: Optional[int] = Field(None, gt=0)
    exclude_session_id: Optional[str] = None


class Conflict(BaseModel):
    type: Literal["session", "booking"]
    id: str
    title: str
    scheduled_at: str
    duration_minutes: int
    client_name: str


class ConflictsResponse(BaseModel):
    conflicts: List[Conflict]


class SlotCheckResponse(BaseModel):
    free: bool
