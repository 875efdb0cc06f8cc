"""Business logic use cases."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from trend_monitor.core import (
    CategoryRegistry,
    ObservationSource,
    ScoredItem,
    SourceError,
    StorageError,
    TimeSeriesStore,
    TrendCriteria,
    TrendDetector,
    TrendNotifier,
)

logger = logging.getLogger(__name__)


@dataclass
class CollectionReport:
    """Outcome of one collection run."""

    recorded: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def total_recorded(self) -> int:
        return sum(self.recorded.values())


@dataclass
class AlertReport:
    """Outcome of one alert run."""

    sent: dict[str, int] = field(default_factory=dict)
    empty: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def _resolve_categories(
    registry: CategoryRegistry, categories: Optional[Iterable[str]]
) -> list[str]:
    if categories is None:
        return registry.keys

    selected = list(categories)
    unknown = [c for c in selected if c not in registry]
    if unknown:
        raise ValueError(f"Unknown categories: {', '.join(unknown)}")
    return selected


class CollectionService:
    """Service for polling a source and recording observations."""

    def __init__(
        self,
        source: ObservationSource,
        store: TimeSeriesStore,
        categories: CategoryRegistry,
    ) -> None:
        self.source = source
        self.store = store
        self.categories = categories

    async def collect(self, categories: Optional[Iterable[str]] = None) -> CollectionReport:
        """Fetch and record observations for each category.

        A category whose fetch fails is reported and skipped; observations
        that fail to save are counted and the rest of the batch continues.
        """
        report = CollectionReport()

        for category in _resolve_categories(self.categories, categories):
            try:
                observations = await self.source.fetch_observations(category)
            except SourceError as e:
                logger.error("Error fetching observations for %s: %s", category, e)
                report.failed[category] = str(e)
                continue

            logger.info(
                "Fetched %d observations for category: %s", len(observations), category
            )

            recorded = 0
            skipped = 0
            for observation in observations:
                if observation.category != category:
                    logger.warning(
                        "Skipping %s: reported category %s while collecting %s",
                        observation.url, observation.category, category,
                    )
                    skipped += 1
                    continue
                try:
                    self.store.record(observation)
                    recorded += 1
                except StorageError as e:
                    logger.error("Error saving %s: %s", observation.title, e)
                    skipped += 1

            report.recorded[category] = recorded
            if skipped:
                report.skipped[category] = skipped

        logger.info("Collection completed: %d observations recorded", report.total_recorded)
        return report


class AlertService:
    """Service for detecting trending items and delivering alerts."""

    def __init__(
        self,
        detector: TrendDetector,
        notifier: TrendNotifier,
        categories: CategoryRegistry,
        limit: int = 5,
        criteria: Optional[TrendCriteria] = None,
    ) -> None:
        self.detector = detector
        self.notifier = notifier
        self.categories = categories
        self.limit = limit
        self.criteria = criteria

    def detect(self, category: str) -> list[ScoredItem]:
        return self.detector.detect_trending(category, self.limit, self.criteria)

    async def send_alerts(self, categories: Optional[Iterable[str]] = None) -> AlertReport:
        """Detect and send trending alerts for each category."""
        report = AlertReport()

        for category in _resolve_categories(self.categories, categories):
            try:
                trending = self.detect(category)
            except StorageError as e:
                logger.error("Error detecting trends for %s: %s", category, e)
                report.failed[category] = str(e)
                continue

            if not trending:
                logger.info("No trending items found for category: %s", category)
                report.empty.append(category)
                continue

            delivered = await self.notifier.send_trending(
                self.categories.display_name(category), trending
            )
            if not delivered:
                logger.error("Alert for %s was not delivered", category)
                report.failed[category] = "notification not delivered"
                continue

            report.sent[category] = len(trending)

        logger.info("Alert sending completed. Sent %d alerts", len(report.sent))
        return report
