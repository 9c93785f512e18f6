"""Shared pytest fixtures – uses async SQLite for fast in-memory tests."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.db import Database
from app.main import create_app
from app.models.company import Company

ACME_CORP_ID = uuid.UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")
ACME_LABS_ID = uuid.UUID("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb")
GLOBEX_ID = uuid.UUID("cccccccc-cccc-cccc-cccc-cccccccccccc")


def make_settings(**overrides) -> Settings:
    values = {
        "app_env": "test",
        "database_url": "sqlite+aiosqlite:///:memory:",
        "rate_limit_enabled": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def database():
    """A connected in-memory database with every table created."""
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.connect()
    await db.create_all()
    yield db
    await db.disconnect()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as sess:
        yield sess


@pytest_asyncio.fixture
async def seeded_database(database):
    """Database pre-loaded with three companies, inserted in a known order."""
    async with database.session() as sess:
        sess.add_all(
            [
                Company(
                    id=ACME_CORP_ID,
                    name="Acme Corp",
                    email="info@acme.com",
                    industry="Technology",
                    location=["New York", "Boston"],
                    founded_year=1999,
                    employees=120,
                    website="https://acme.com",
                    is_active=True,
                    created_at=datetime(2024, 1, 10, tzinfo=timezone.utc),
                    updated_at=datetime(2024, 1, 10, tzinfo=timezone.utc),
                ),
                Company(
                    id=ACME_LABS_ID,
                    name="Acme Labs",
                    email="labs@acme.io",
                    industry="Healthcare",
                    location=["San Francisco"],
                    employees=45,
                    is_active=True,
                    created_at=datetime(2024, 3, 5, tzinfo=timezone.utc),
                    updated_at=datetime(2024, 3, 5, tzinfo=timezone.utc),
                ),
                Company(
                    id=GLOBEX_ID,
                    name="Globex Industries",
                    email="hello@globex.com",
                    industry="Technology",
                    location=["Springfield", "Shelbyville"],
                    founded_year=1950,
                    employees=5000,
                    is_active=False,
                    created_at=datetime(2024, 6, 20, tzinfo=timezone.utc),
                    updated_at=datetime(2024, 6, 20, tzinfo=timezone.utc),
                ),
            ]
        )
        await sess.commit()
    return database


@pytest_asyncio.fixture
async def seeded_session(seeded_database):
    async with seeded_database.session() as sess:
        yield sess


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def seeded_client(settings, seeded_database):
    app = create_app(settings=settings, database=seeded_database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def company_body() -> dict:
    return {
        "name": "Tech Corp",
        "email": "a@b.com",
        "industry": "Technology",
        "location": ["NY"],
    }
