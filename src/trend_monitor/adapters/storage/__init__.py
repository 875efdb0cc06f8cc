"""Time series store adapters."""

from trend_monitor.adapters.storage.memory_store import InMemoryTimeSeriesStore, KeyedLock
from trend_monitor.adapters.storage.sqlite_store import SQLiteTimeSeriesStore

__all__ = ["InMemoryTimeSeriesStore", "KeyedLock", "SQLiteTimeSeriesStore"]
