"""Source adapters for fetching observations."""

from trend_monitor.adapters.sources.fixture_source import FixtureObservationSource
from trend_monitor.adapters.sources.json_feed_source import JSONFeedObservationSource

__all__ = ["FixtureObservationSource", "JSONFeedObservationSource"]
