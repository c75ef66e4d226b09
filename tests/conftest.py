"""
Pytest configuration for recall tests.

Provides a controllable clock, engines bound to it, and persistence
backends that never touch real data.
"""

import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from recall.scheduling import MemoryModelScheduler, StepScheduler
from recall.storage.persistence import JsonFilePersistence, MemoryPersistence


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def step_engine(clock):
    return StepScheduler(clock=clock)


@pytest.fixture
def memory_engine(clock):
    return MemoryModelScheduler(clock=clock)


@pytest.fixture
def memory_persistence():
    return MemoryPersistence()


@pytest.fixture
def json_persistence(tmp_path):
    return JsonFilePersistence(tmp_path / "data" / "recall.json")


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'recall.db'}"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    # Keep developer .env settings out of the tests
    for name in ("TEST_MODE", "DATABASE_URL", "RECALL_DATA_FILE", "RECALL_DOCUMENT_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _utc_local_time():
    # Sessions end at local midnight; pin the local zone so results do not
    # depend on the machine running the tests
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "UTC"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()
