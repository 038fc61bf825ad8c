# coachslots/core/timezones.py
from __future__ import annotations
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

UTC = timezone.utc


@lru_cache(maxsize=None)
def get_zone(tz_name: str) -> ZoneInfo:
    return ZoneInfo(tz_name)


def _noon_utc(date_str: str) -> datetime:
    # Noon UTC falls on the same civil date in every timezone within ±11h
    d = date.fromisoformat(date_str)
    return datetime.combine(d, time(12, 0), tzinfo=UTC)


def weekday_in_timezone(date_str: str, tz_name: str) -> int:
    """Weekday of YYYY-MM-DD as observed in tz_name, 0=Sunday .. 6=Saturday."""
    local = _noon_utc(date_str).astimezone(get_zone(tz_name))
    # date.weekday() is 0=Monday .. 6=Sunday
    return (local.weekday() + 1) % 7


def utc_offset_hours(date_str: str, tz_name: str) -> int:
    """Whole-hour UTC offset of tz_name on that date (DST-aware)."""
    local = _noon_utc(date_str).astimezone(get_zone(tz_name))
    # Floor keeps half-hour zones on the local wall-clock hour (+05:30 -> 5, -03:30 -> -4)
    return int(local.utcoffset().total_seconds() // 3600)


def time_to_minutes(value: str) -> int:
    """Parse "HH:MM" or "HH:MM:SS" to minutes since midnight."""
    parts = value.split(":")
    hours = int(parts[0]) if parts and parts[0] else 0
    minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def local_to_utc(date_str: str, time_str: str, tz_name: str) -> datetime:
    """Place a wall-clock time on date_str in tz_name as an aware UTC datetime."""
    d = date.fromisoformat(date_str)
    offset = utc_offset_hours(date_str, tz_name)
    midnight = datetime.combine(d, time(0, 0), tzinfo=UTC)
    return midnight + timedelta(minutes=time_to_minutes(time_str)) - timedelta(hours=offset)


def day_start_utc(date_str: str) -> datetime:
    return datetime.combine(date.fromisoformat(date_str), time(0, 0), tzinfo=UTC)


def day_end_utc(date_str: str) -> datetime:
    return datetime.combine(date.fromisoformat(date_str), time(23, 59, 59), tzinfo=UTC)


def as_utc(value: datetime) -> datetime:
    """Normalise a datetime from the database; naive values are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_iso_z(value: datetime) -> str:
    """Canonical UTC ISO-8601 with millisecond precision, e.g. 2024-06-03T07:00:00.000Z"""
    v = as_utc(value)
    return v.strftime("%Y-%m-%dT%H:%M:%S.") + f"{v.microsecond // 1000:03d}Z"


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant; a trailing Z is accepted, naive values are UTC."""
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))
