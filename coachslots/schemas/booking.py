# coachslots/schemas/booking.py

from __future__ import annotations
import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

_SOURCE_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


class BookingCreate(BaseModel):
    coach: Optional[str] = None
    event_id: Optional[str] = None
    source: Optional[str] = None
    scheduled_at: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    note: Optional[str] = None
    duration_minutes: Optional[int] = None

    @field_validator("coach", "event_id", "name", "phone", mode="before")
    @classmethod
    def _strip_blank(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, v):
        if v is None:
            return None
        v = str(v).strip().lower()
        return v or None

    @field_validator("source", mode="before")
    @classmethod
    def _clean_source(cls, v):
        # Unsafe tracking sources are dropped rather than rejected
        if not isinstance(v, str):
            return None
        v = v.strip()[:50]
        return v if _SOURCE_RE.match(v) else None

    @field_validator("note", mode="before")
    @classmethod
    def _clip_note(cls, v):
        if not isinstance(v, str):
            return None
        return v.strip()[:2000] or None


class BookingCreated(BaseModel):
    ok: bool = True
    booking_id: str
    lead_id: Optional[str] = None
