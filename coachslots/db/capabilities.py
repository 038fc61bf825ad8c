# coachslots/db/capabilities.py
"""
Schema capabilities that differ between deployments.

Resolved once at startup and passed into the availability resolver, so query
shape is chosen by an explicit flag rather than by retrying on SQL errors.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaCapabilities:
    sessions_have_owner_column: bool = True


def _sessions_columns(sync_conn) -> set[str]:
    inspector = sa.inspect(sync_conn)
    if not inspector.has_table("sessions"):
        return set()
    return {col["name"] for col in inspector.get_columns("sessions")}


async def detect_capabilities(
    engine: AsyncEngine,
    sessions_owner_column: Optional[bool] = None,
) -> SchemaCapabilities:
    """Inspect the live schema unless the setting pins the answer."""
    if sessions_owner_column is not None:
        return SchemaCapabilities(sessions_have_owner_column=sessions_owner_column)

    async with engine.connect() as conn:
        columns = await conn.run_sync(_sessions_columns)

    has_owner = "user_id" in columns
    logger.info("Schema capabilities resolved: sessions.user_id present=%s", has_owner)
    return SchemaCapabilities(sessions_have_owner_column=has_owner)
