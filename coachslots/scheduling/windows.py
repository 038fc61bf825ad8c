# coachslots/scheduling/windows.py
"""
Expansion of recurring weekly windows into concrete candidate slots.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, List, Union

from coachslots.core.timezones import local_to_utc, minutes_to_time, time_to_minutes, weekday_in_timezone


@dataclass(frozen=True)
class WeeklyWindow:
    id: str
    day_of_week: int  # 0=Sunday .. 6=Saturday
    start_time: str   # "HH:MM" or "HH:MM:SS", coach-local wall clock
    end_time: str
    slot_duration_minutes: int

    @classmethod
    def from_times(
        cls,
        id: str,
        day_of_week: int,
        start_time: Union[time, str],
        end_time: Union[time, str],
        slot_duration_minutes: int,
    ) -> "WeeklyWindow":
        return cls(
            id=id,
            day_of_week=day_of_week,
            start_time=_time_str(start_time),
            end_time=_time_str(end_time),
            slot_duration_minutes=slot_duration_minutes,
        )


@dataclass(frozen=True)
class CandidateSlot:
    slot_at: datetime  # aware UTC
    duration_minutes: int

    @property
    def ends_at(self) -> datetime:
        return self.slot_at + timedelta(minutes=self.duration_minutes)


def _time_str(value: Union[time, str]) -> str:
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


def expand_windows(date_str: str, windows: Iterable[WeeklyWindow], tz_name: str) -> List[CandidateSlot]:
    """Candidate slots for one date; no partial trailing slot is produced."""
    result: List[CandidateSlot] = []
    day_of_week = weekday_in_timezone(date_str, tz_name)

    for w in windows:
        if w.day_of_week != day_of_week:
            continue
        duration = w.slot_duration_minutes
        if duration <= 0:
            continue
        start_min = time_to_minutes(w.start_time)
        end_min = time_to_minutes(w.end_time)

        m = start_min
        while m + duration <= end_min:
            slot_at = local_to_utc(date_str, minutes_to_time(m), tz_name)
            result.append(CandidateSlot(slot_at=slot_at, duration_minutes=duration))
            m += duration

    return result


def date_range(from_date: str, to_date: str) -> Iterator[str]:
    """Every YYYY-MM-DD from from_date through to_date, inclusive."""
    day = date.fromisoformat(from_date)
    last = date.fromisoformat(to_date)
    while day <= last:
        yield day.isoformat()
        day += timedelta(days=1)
