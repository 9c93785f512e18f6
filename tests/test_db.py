"""Database handle lifecycle."""

from __future__ import annotations

import pytest

from app.db import Database
from tests.conftest import make_settings


@pytest.mark.asyncio
async def test_connect_ping_disconnect():
    db = Database("sqlite+aiosqlite:///:memory:")
    assert not db.is_connected
    assert await db.ping() is False

    await db.connect()
    assert db.is_connected
    assert await db.ping() is True

    await db.disconnect()
    assert not db.is_connected
    assert await db.ping() is False


@pytest.mark.asyncio
async def test_connect_is_idempotent():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.connect()
    engine = db.engine
    await db.connect()
    assert db.engine is engine
    await db.disconnect()
    await db.disconnect()


@pytest.mark.asyncio
async def test_session_requires_connection():
    db = Database("sqlite+aiosqlite:///:memory:")
    with pytest.raises(RuntimeError):
        async with db.session():
            pass
    with pytest.raises(RuntimeError):
        db.engine


def test_from_settings_copies_pool_options():
    db = Database.from_settings(make_settings(db_pool_size=3, db_max_overflow=1, db_pool_timeout=2.5))
    assert db.url == "sqlite+aiosqlite:///:memory:"
    assert (db.pool_size, db.max_overflow, db.pool_timeout) == (3, 1, 2.5)
    assert db.echo is False
