#!/usr/bin/env python3
"""
Tests for startup schema capability detection.
"""

import pytest
import pytest_asyncio
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import create_async_engine

from coachslots.db.capabilities import SchemaCapabilities, detect_capabilities


@pytest_asyncio.fixture
async def scratch_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'legacy.db'}")
    yield engine
    await engine.dispose()


class TestDetectCapabilities:
    async def test_setting_pins_the_answer(self, scratch_engine):
        caps = await detect_capabilities(scratch_engine, sessions_owner_column=False)
        assert caps == SchemaCapabilities(sessions_have_owner_column=False)

    async def test_current_schema_has_owner_column(self, db_engine):
        caps = await detect_capabilities(db_engine)
        assert caps.sessions_have_owner_column is True

    async def test_legacy_schema_without_owner_column(self, scratch_engine):
        async with scratch_engine.begin() as conn:
            await conn.execute(sa.text(
                "CREATE TABLE sessions (id VARCHAR(64) PRIMARY KEY, client_id VARCHAR(64), "
                "title VARCHAR(200), scheduled_at DATETIME, duration_minutes INTEGER)"
            ))
        caps = await detect_capabilities(scratch_engine)
        assert caps.sessions_have_owner_column is False

    async def test_missing_table_reports_no_owner_column(self, scratch_engine):
        caps = await detect_capabilities(scratch_engine)
        assert caps.sessions_have_owner_column is False


class TestOwnerColumnSetting:
    @pytest.mark.parametrize("raw,expected", [
        ("auto", None),
        ("true", True),
        ("1", True),
        ("FALSE", False),
        ("no", False),
    ])
    def test_override_parsing(self, raw, expected):
        from coachslots.core.config import Settings

        assert Settings(SESSIONS_OWNER_COLUMN=raw).sessions_owner_column_override is expected
