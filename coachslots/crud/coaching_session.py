# coachslots/crud/coaching_session.py

from __future__ import annotations
from datetime import datetime
from typing import Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from coachslots.core.timezones import as_utc
from coachslots.db.expressions import ends_after
from coachslots.db.models.coaching import Client, CoachingSession

# Shown for sessions whose client was deleted or never set
NO_CLIENT_NAME = "No client"


async def list_blocking_sessions(
    db: AsyncSession,
    *,
    user_id: str,
    start_utc: datetime,
    end_utc: datetime,
    has_owner_column: bool,
    default_minutes: int = 30,
    exclude_session_id: Optional[str] = None,
) -> Sequence[sa.Row]:
    """Scheduled sessions of the coach overlapping [start_utc, end_utc).

    With an owner column a session belongs to the coach directly, or through its
    client when the owner is unset. Without it, only through the client.
    A session with no duration runs for default_minutes.
    """
    client_name = sa.func.coalesce(Client.name, NO_CLIENT_NAME).label("client_name")
    q = sa.select(
        CoachingSession.id,
        CoachingSession.title,
        CoachingSession.scheduled_at,
        CoachingSession.duration_minutes,
        client_name,
    )

    if has_owner_column:
        q = q.outerjoin(Client, Client.id == CoachingSession.client_id).where(
            sa.or_(
                CoachingSession.user_id == user_id,
                sa.and_(CoachingSession.user_id.is_(None), Client.user_id == user_id),
            )
        )
    else:
        q = q.join(Client, sa.and_(Client.id == CoachingSession.client_id, Client.user_id == user_id))

    q = q.where(
        CoachingSession.scheduled_at.is_not(None),
        CoachingSession.scheduled_at < as_utc(end_utc),
        ends_after(CoachingSession.scheduled_at, CoachingSession.duration_minutes, default_minutes, as_utc(start_utc)),
    )
    if exclude_session_id:
        q = q.where(CoachingSession.id != exclude_session_id)

    res = await db.execute(q.order_by(CoachingSession.scheduled_at.asc()))
    return res.all()
