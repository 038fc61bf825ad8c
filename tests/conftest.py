#!/usr/bin/env python3
"""
Pytest configuration and shared fixtures.

The application engine is pointed at a throwaway SQLite file before any
coachslots module is imported, so routes and services run unchanged.
"""

import os
import sys
import tempfile

# Add the project root to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

_TEST_DB_DIR = tempfile.mkdtemp(prefix="coachslots-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"
os.environ["APP_ENV"] = "testing"
os.environ["COACH_TIMEZONE"] = "Europe/Prague"
os.environ["COACHSLOTS_API_KEY"] = "test_api_key"
os.environ["GOOGLE_CALENDAR_ENABLED"] = "false"
os.environ["SESSIONS_OWNER_COLUMN"] = "true"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from coachslots.api.deps import get_resolver
from coachslots.core.config import settings
from coachslots.db.base import drop_db, engine, init_db
from coachslots.db.capabilities import SchemaCapabilities
from coachslots.db.session import AsyncSessionLocal
from coachslots.services.availability import AvailabilityResolver
from mocks.external_services import GoogleCalendarMock


@pytest_asyncio.fixture
async def db_engine():
    """Fresh schema per test; the pool is disposed so no connection outlives its loop."""
    await init_db(engine)
    yield engine
    await drop_db(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    async with AsyncSessionLocal() as session:
        yield session

@pytest.fixture
def calendar():
    return GoogleCalendarMock()

@pytest.fixture
def resolver(db_engine, calendar):
    return AvailabilityResolver(
        AsyncSessionLocal,
        calendar,
        capabilities=SchemaCapabilities(sessions_have_owner_column=True),
        settings=settings,
    )

@pytest_asyncio.fixture
async def api_client(resolver):
    """HTTP client bound to the app with the test resolver installed."""
    from coachslots.main import app

    app.dependency_overrides[get_resolver] = lambda: resolver
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_resolver, None)

# Pytest configuration hooks
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line("markers", "smoke: Quick validation tests")
    config.addinivalue_line("markers", "unit: Pure unit tests with no external dependencies")
    config.addinivalue_line("markers", "integration: Tests that touch the database")
