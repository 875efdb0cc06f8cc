"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from trend_monitor.adapters.storage import InMemoryTimeSeriesStore, SQLiteTimeSeriesStore
from trend_monitor.core import TimeSeriesStore

START = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(params=["sqlite", "memory"])
def store(request: pytest.FixtureRequest, tmp_path: Path, clock: FakeClock) -> TimeSeriesStore:
    """Each store implementation, initialised and driven by the fake clock."""
    if request.param == "sqlite":
        store = SQLiteTimeSeriesStore(tmp_path / "trends.db", clock=clock)
    else:
        store = InMemoryTimeSeriesStore(clock=clock)
    store.init_db()
    yield store
    store.close()
