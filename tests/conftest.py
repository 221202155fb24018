"""Shared fixtures: a fresh SQLite database per test."""

import uuid

import pytest
from litestar.testing import AsyncTestClient

from civicboard.config import get_settings
from civicboard.db import Database


@pytest.fixture(autouse=True)
def settings(tmp_path, monkeypatch):
    """Point the application at a temporary database."""
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "civicboard.db"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
async def database(settings):
    """Connected database for service-level tests."""
    db = Database(settings.database_path)
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def add_issue(database):
    """Insert an issue row directly and return its ID."""

    async def _add_issue(title: str, city: str = "Springfield", **fields) -> str:
        issue_id = uuid.uuid4().hex[:16]
        await database.execute(
            """
            INSERT INTO issues (id, title, description, category, city, vote_count)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                issue_id,
                title,
                fields.get("description", f"Details about {title}"),
                fields.get("category"),
                city,
                fields.get("vote_count", 0),
            ),
        )
        await database.commit()
        return issue_id

    return _add_issue


@pytest.fixture
async def client(settings):
    """Create async test client."""
    from civicboard.app import app

    async with AsyncTestClient(app=app) as client:
        yield client
