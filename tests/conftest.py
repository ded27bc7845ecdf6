"""
Shared fixtures: a fresh SQLite database per test, a controllable clock,
and an HTTP client bound to an app using that database.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from shortlinks.core.setting import Settings
from shortlinks.db.session import Database
from shortlinks.main import create_app
from shortlinks.services.link_store import LinkStore
from shortlinks.services.visit_ledger import VisitLedger

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    db = Database(database_url)
    await db.create_tables()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture
def link_store(database, clock):
    return LinkStore(database, now=clock)


@pytest.fixture
def visit_ledger(database, clock):
    return VisitLedger(database, now=clock)


@pytest.fixture
def test_settings(database_url):
    return Settings(
        DATABASE_URL=database_url,
        BASE_URL="http://sho.rt",
        DEFAULT_VALIDITY_MINUTES=30,
        LOG_FILE="",
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
