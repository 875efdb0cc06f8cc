"""In-memory time series store."""

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Iterator, Optional

from trend_monitor.core.entities import Item, Observation, Snapshot
from trend_monitor.core.interfaces import Clock, TimeSeriesStore


class KeyedLock:
    """Mutual exclusion per key; entries live only while someone holds them."""

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[str, tuple[Lock, int]] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock, waiters = self._locks.get(key, (None, 0))
            if lock is None:
                lock = Lock()
            self._locks[key] = (lock, waiters + 1)

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                _, waiters = self._locks[key]
                if waiters == 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, waiters - 1)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class InMemoryTimeSeriesStore(TimeSeriesStore):
    """Process-local store for tests and dry runs.

    Writes to one url are serialised by a per-url lock. The item update and
    its snapshot are published together under a short store-wide lock that
    readers also take, so no reader sees one without the other.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        super().__init__(clock)
        self._url_locks = KeyedLock()
        self._commit_lock = Lock()
        self._items: dict[int, Item] = {}
        self._ids_by_url: dict[str, int] = {}
        self._snapshots: dict[int, list[Snapshot]] = {}
        self._next_item_id = 1
        self._next_snapshot_id = 1

    def init_db(self) -> None:
        pass

    def record_observation(
        self, url: str, title: str, author: str, uses_count: int, category: str
    ) -> int:
        observation = Observation(
            url=url, title=title, author=author or "", uses_count=uses_count, category=category
        )

        with self._url_locks.hold(observation.url):
            now = self.clock()
            existing = self.get_item_by_url(observation.url)

            with self._commit_lock:
                if existing is None:
                    item = Item(
                        id=self._next_item_id,
                        title=observation.title,
                        author=observation.author,
                        url=observation.url,
                        uses_count=observation.uses_count,
                        category=observation.category,
                        created_at=now,
                        updated_at=now,
                    )
                    self._next_item_id += 1
                    self._ids_by_url[item.url] = item.id
                else:
                    item = replace(
                        existing,
                        title=observation.title,
                        author=observation.author,
                        uses_count=observation.uses_count,
                        category=observation.category,
                        updated_at=now,
                    )

                self._items[item.id] = item
                self._snapshots.setdefault(item.id, []).append(
                    Snapshot(
                        id=self._next_snapshot_id,
                        item_id=item.id,
                        uses_count=observation.uses_count,
                        recorded_at=now,
                    )
                )
                self._next_snapshot_id += 1

        return item.id

    def get_item_by_url(self, url: str) -> Optional[Item]:
        with self._commit_lock:
            item_id = self._ids_by_url.get(url)
            return self._items.get(item_id) if item_id is not None else None

    def list_by_category(self, category: str, limit: int) -> list[Item]:
        with self._commit_lock:
            items = [item for item in self._items.values() if item.category == category]

        items.sort(key=lambda item: item.id)
        items.sort(key=lambda item: item.updated_at, reverse=True)
        return items[:limit] if limit > 0 else items

    def earliest_snapshot_since(self, item_id: int, cutoff: datetime) -> Optional[Snapshot]:
        candidates = [s for s in self.list_snapshots(item_id) if s.recorded_at >= cutoff]
        return candidates[0] if candidates else None

    def list_snapshots(self, item_id: int) -> list[Snapshot]:
        with self._commit_lock:
            snapshots = list(self._snapshots.get(item_id, []))
        return sorted(snapshots, key=lambda s: (s.recorded_at, s.id))
