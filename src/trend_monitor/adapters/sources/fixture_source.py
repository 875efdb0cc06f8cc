"""YAML fixture source for offline runs."""

from pathlib import Path

import yaml

from trend_monitor.adapters.sources.parsing import parse_observations
from trend_monitor.core import Observation, ObservationSource, SourceError


class FixtureObservationSource(ObservationSource):
    """Read observations from a YAML file keyed by category.

    Example:
        tech:
          - title: AI Revolution
            author: TechWave
            url: https://www.tiktok.com/music/ai-1
            uses_count: 9200
    """

    emoji = "📁"
    name = "Fixture"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def fetch_observations(self, category: str) -> list[Observation]:
        """Load the records listed under category."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise SourceError(self.name, category, str(e)) from e

        if not isinstance(data, dict):
            raise SourceError(self.name, category, "fixture must be a mapping of categories")

        return parse_observations(data.get(category) or [], category)
