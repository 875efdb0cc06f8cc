"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from trend_monitor.core.entities import Item, Observation, ScoredItem, Snapshot

Clock = Callable[[], datetime]

# Upper bound on items scanned per category when loading baselines.
DEFAULT_SCAN_LIMIT = 1000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimeSeriesStore(ABC):
    """Durable storage of items and their append-only snapshot history."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self.clock: Clock = clock or utc_now

    @abstractmethod
    def init_db(self) -> None:
        """Create storage structures if they don't exist."""
        pass

    @abstractmethod
    def record_observation(
        self, url: str, title: str, author: str, uses_count: int, category: str
    ) -> int:
        """Create or update the item for url and append a snapshot, atomically.

        Returns:
            Id of the created or updated item.
        """
        pass

    @abstractmethod
    def get_item_by_url(self, url: str) -> Optional[Item]:
        """Item for url, or None."""
        pass

    @abstractmethod
    def list_by_category(self, category: str, limit: int) -> list[Item]:
        """Items in category, most recently updated first.

        Ties on updated_at are broken by id ascending. A non-positive limit
        returns every item.
        """
        pass

    @abstractmethod
    def earliest_snapshot_since(self, item_id: int, cutoff: datetime) -> Optional[Snapshot]:
        """Oldest snapshot of item_id recorded at or after cutoff, or None."""
        pass

    @abstractmethod
    def list_snapshots(self, item_id: int) -> list[Snapshot]:
        """Full snapshot history of item_id, oldest first."""
        pass

    def close(self) -> None:
        """Release any held resources."""

    def record(self, observation: Observation) -> int:
        """Record an already validated observation."""
        return self.record_observation(
            observation.url,
            observation.title,
            observation.author,
            observation.uses_count,
            observation.category,
        )

    def bulk_load_with_baseline(
        self, category: str, lookback_hours: int, max_items: int = DEFAULT_SCAN_LIMIT
    ) -> tuple[list[Item], dict[int, Snapshot]]:
        """Load a category's items with each item's baseline snapshot.

        The baseline is the earliest snapshot inside the lookback window.
        Items without one are left out of the mapping. The first storage
        error aborts the whole load.

        Returns:
            Tuple of (items, baselines keyed by item id)
        """
        cutoff = self.clock() - timedelta(hours=lookback_hours)
        items = self.list_by_category(category, max_items)

        baselines: dict[int, Snapshot] = {}
        for item in items:
            snapshot = self.earliest_snapshot_since(item.id, cutoff)
            if snapshot is not None:
                baselines[item.id] = snapshot

        return items, baselines


class ObservationSource(ABC):
    """Interface for fetching usage observations from an external source."""

    name = "source"

    @abstractmethod
    async def fetch_observations(self, category: str) -> list[Observation]:
        """Fetch current observations for a category."""
        pass


class TrendNotifier(ABC):
    """Interface for delivering trending alerts."""

    @abstractmethod
    async def send_trending(self, category_name: str, items: list[ScoredItem]) -> bool:
        """Deliver a ranked list of trending items for one category.

        Returns:
            True if the list was delivered
        """
        pass
