"""HTTP JSON feed source."""

from typing import Any

import httpx

from trend_monitor.adapters.sources.parsing import parse_observations
from trend_monitor.core import Observation, ObservationSource, SourceError


class JSONFeedObservationSource(ObservationSource):
    """Poll a JSON feed that lists current usage counts per category.

    GET {base_url}/{category} must return either a list of records or the
    nested form {"data": {"music_list": [...]}}.
    """

    emoji = "🌐"
    name = "JSON feed"

    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Accept": "application/json",
            "User-Agent": "trend-monitor/0.1",
        }

    async def fetch_observations(self, category: str) -> list[Observation]:
        """Fetch and parse the feed for one category."""
        url = f"{self.base_url}/{category}"

        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            try:
                response = await client.get(url, headers=self.headers)
                response.raise_for_status()
                payload = response.json()
            except httpx.HTTPError as e:
                raise SourceError(self.name, category, str(e)) from e
            except ValueError as e:
                raise SourceError(self.name, category, f"invalid JSON: {e}") from e

        return parse_observations(self._extract_records(payload), category)

    def _extract_records(self, payload: Any) -> Any:
        if isinstance(payload, dict):
            data = payload.get("data")
            if isinstance(data, dict):
                return data.get("music_list", [])
            return payload.get("items", [])
        return payload
