# coachslots/scheduling/intervals.py
"""
Half-open interval arithmetic for slot blocking.

A candidate ``[cs, ce)`` is taken by a blocked interval ``[bs, be)`` iff
``cs < be and bs < ce``; back-to-back ranges do not collide.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, TypedDict

from coachslots.core.timezones import as_utc, to_iso_z
from coachslots.scheduling.windows import CandidateSlot


class Slot(TypedDict):
    slot_at: str
    duration_minutes: int


@dataclass(frozen=True)
class BlockedInterval:
    start: datetime
    end: datetime
    source: str = "booking"  # booking | session | calendar


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end


def interval_for(
    scheduled_at: datetime,
    duration_minutes: Optional[int],
    default_minutes: int = 30,
    source: str = "booking",
) -> BlockedInterval:
    """Interval committed by a booking or session; null durations use the default."""
    start = as_utc(scheduled_at)
    minutes = duration_minutes if duration_minutes is not None else default_minutes
    return BlockedInterval(start=start, end=start + timedelta(minutes=minutes), source=source)


def is_blocked(start: datetime, end: datetime, blocked: Iterable[BlockedInterval]) -> bool:
    return any(overlaps(start, end, b.start, b.end) for b in blocked)


def filter_candidates(
    candidates: Iterable[CandidateSlot],
    blocked: List[BlockedInterval],
    range_start: datetime,
    range_end: datetime,
) -> List[Slot]:
    """Offered slots: inside [range_start, range_end] and free of every blocked interval."""
    out: List[Slot] = []
    for c in candidates:
        if c.slot_at < range_start or c.slot_at > range_end:
            continue
        if is_blocked(c.slot_at, c.ends_at, blocked):
            continue
        out.append({"slot_at": to_iso_z(c.slot_at), "duration_minutes": c.duration_minutes})

    # Lexical order of the canonical UTC string is chronological order
    out.sort(key=lambda s: s["slot_at"])
    return out
