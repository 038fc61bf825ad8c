# coachslots/db/session.py

from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from coachslots.core.config import settings


def _make_engine(url: str) -> AsyncEngine:
    # SQLite (local runs, tests) has no server side to ping
    if url.startswith("sqlite"):
        return create_async_engine(url)
    return create_async_engine(url, pool_pre_ping=True)


# Engine shared by the resolver branches and request handlers
engine = _make_engine(settings.async_db_uri)

# Slot resolution opens several of these concurrently, one per query branch
AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,  # rows are read after commit by the routes
    class_=AsyncSession,
)


class Base(DeclarativeBase):
    pass


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request."""
    async with AsyncSessionLocal() as session:
        yield session
