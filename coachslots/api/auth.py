# coachslots/api/auth.py
"""
Request identity.

Coaches are authenticated by the upstream identity provider; requests reach
this service carrying the shared API key and the coach's user id.
"""
from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header

from coachslots.core.config import settings
from coachslots.core.errors import UnauthorizedError
from coachslots.core.logging import bind_coach


def _api_key_ok(api_key: Optional[str]) -> bool:
    expected = settings.COACHSLOTS_API_KEY or ""
    return bool(expected) and secrets.compare_digest(api_key or "", expected)


def require_api_key(x_api_key: Optional[str] = Header(None)) -> str:
    if not _api_key_ok(x_api_key):
        raise UnauthorizedError("Invalid or missing API key")
    return x_api_key


async def current_coach_id(
    x_api_key: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
) -> str:
    require_api_key(x_api_key)
    coach_id = (x_user_id or "").strip()
    if not coach_id:
        raise UnauthorizedError("Unauthorized")
    bind_coach(coach_id)
    return coach_id


async def optional_coach_id(
    x_api_key: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
) -> Optional[str]:
    """The coach id when the request is coach-authenticated, else None (public caller)."""
    coach_id = (x_user_id or "").strip()
    if coach_id and _api_key_ok(x_api_key):
        bind_coach(coach_id)
        return coach_id
    return None
