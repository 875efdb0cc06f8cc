"""Core domain layer."""

from trend_monitor.core.categories import DEFAULT_CATEGORIES, CategoryRegistry
from trend_monitor.core.entities import (
    NEW_ITEM_GROWTH_PERCENT,
    CategoryAnalysis,
    EstablishedGrowth,
    Growth,
    Item,
    NewItemGrowth,
    Observation,
    ScoredItem,
    Snapshot,
)
from trend_monitor.core.errors import (
    ConfigurationError,
    CriteriaError,
    SourceError,
    StorageError,
    TrendMonitorError,
)
from trend_monitor.core.interfaces import ObservationSource, TimeSeriesStore, TrendNotifier
from trend_monitor.core.trend_detector import TrendCriteria, TrendDetector, calculate_growth

__all__ = [
    "Item",
    "Snapshot",
    "Observation",
    "Growth",
    "EstablishedGrowth",
    "NewItemGrowth",
    "NEW_ITEM_GROWTH_PERCENT",
    "ScoredItem",
    "CategoryAnalysis",
    "CategoryRegistry",
    "DEFAULT_CATEGORIES",
    "TimeSeriesStore",
    "ObservationSource",
    "TrendNotifier",
    "TrendCriteria",
    "TrendDetector",
    "calculate_growth",
    "TrendMonitorError",
    "StorageError",
    "ConfigurationError",
    "CriteriaError",
    "SourceError",
]
