from datetime import date

import pytest

from revisor.clock import FixedClock
from revisor.config import Settings
from revisor.kernel import RevisionKernel
from revisor.store import SqliteStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_revisor.db")
    return db_path


@pytest.fixture
def clock():
    return FixedClock(date(2024, 1, 1))


@pytest.fixture
def settings(tmp_db):
    return Settings(db_path=tmp_db, weekly_available_days=5, lock_timeout_seconds=0.1)


@pytest.fixture
def store(tmp_db):
    return SqliteStore(tmp_db)


@pytest.fixture
def kernel(store, clock, settings):
    return RevisionKernel(store, clock, settings)
