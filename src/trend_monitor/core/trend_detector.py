"""Trend detection over stored usage history."""

import logging
from dataclasses import dataclass
from typing import Optional

from trend_monitor.core.entities import (
    CategoryAnalysis,
    EstablishedGrowth,
    Item,
    NewItemGrowth,
    ScoredItem,
    Snapshot,
)
from trend_monitor.core.errors import CriteriaError
from trend_monitor.core.interfaces import DEFAULT_SCAN_LIMIT, TimeSeriesStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrendCriteria:
    """Thresholds an item must meet to count as trending.

    The uses count band keeps out both noise (too few uses) and items that
    are already saturated; the detector is after emerging trends.
    """

    min_uses_count: int = 500
    max_uses_count: int = 30000
    min_growth_percent: float = 150.0
    lookback_hours: int = 24

    def __post_init__(self) -> None:
        if self.min_uses_count < 0:
            raise CriteriaError("min_uses_count cannot be negative")
        if self.min_uses_count > self.max_uses_count:
            raise CriteriaError(
                f"min_uses_count ({self.min_uses_count}) is greater than "
                f"max_uses_count ({self.max_uses_count})"
            )
        if self.lookback_hours < 0:
            raise CriteriaError("lookback_hours cannot be negative")


def calculate_growth(old_count: int, new_count: int) -> float:
    """Growth percentage from old_count to new_count (0.0 for a zero baseline)."""
    if old_count == 0:
        return 0.0
    return (new_count - old_count) / old_count * 100.0


def _ranking_key(scored: ScoredItem) -> tuple[float, int, int]:
    return (-scored.growth_percent, -scored.uses_count, scored.item.id)


class TrendDetector:
    """Detects trending items by comparing current counts to a baseline."""

    def __init__(
        self,
        store: TimeSeriesStore,
        default_criteria: Optional[TrendCriteria] = None,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
    ) -> None:
        self.store = store
        self.default_criteria = default_criteria or TrendCriteria()
        self.scan_limit = scan_limit

    def detect_trending(
        self, category: str, limit: int = 0, criteria: Optional[TrendCriteria] = None
    ) -> list[ScoredItem]:
        """Rank the trending items of a category.

        Args:
            category: Category key to analyse
            limit: Maximum number of results; non-positive means no limit
            criteria: Thresholds to apply (detector defaults if None)

        Returns:
            Items sorted by growth descending, then uses count descending,
            then item id ascending.
        """
        criteria = criteria or self.default_criteria
        items, baselines = self.store.bulk_load_with_baseline(
            category, criteria.lookback_hours, self.scan_limit
        )
        logger.debug("Analyzing %d items for trends in category: %s", len(items), category)

        trending: list[ScoredItem] = []
        for item in items:
            scored = self._score(item, baselines.get(item.id), criteria)
            if scored is not None:
                trending.append(scored)

        trending.sort(key=_ranking_key)

        if limit > 0:
            trending = trending[:limit]

        logger.info("Found %d trending items in category: %s", len(trending), category)
        return trending

    def analyze_category(
        self, category: str, limit: int = 10, criteria: Optional[TrendCriteria] = None
    ) -> CategoryAnalysis:
        """Summarise the trending items of a category."""
        ranked = self.detect_trending(category, limit, criteria)

        average_growth = 0.0
        if ranked:
            average_growth = sum(s.growth_percent for s in ranked) / len(ranked)

        return CategoryAnalysis(
            category=category,
            count=len(ranked),
            average_growth=average_growth,
            top_item=ranked[0] if ranked else None,
            ranked=ranked,
        )

    def _score(
        self, item: Item, baseline: Optional[Snapshot], criteria: TrendCriteria
    ) -> Optional[ScoredItem]:
        if item.uses_count < criteria.min_uses_count or item.uses_count > criteria.max_uses_count:
            return None

        # No snapshot inside the lookback window; older history is never used.
        if baseline is None:
            return None

        old_count = baseline.uses_count
        if old_count == 0:
            return ScoredItem(item=item, growth=NewItemGrowth(), old_uses_count=0)

        growth = calculate_growth(old_count, item.uses_count)
        if growth < criteria.min_growth_percent:
            return None

        return ScoredItem(
            item=item, growth=EstablishedGrowth(percent=growth), old_uses_count=old_count
        )
