"""Shared parsing utilities for sources."""

import logging
from typing import Any, Optional

from trend_monitor.core import Observation

logger = logging.getLogger(__name__)

URL_KEYS = ("url", "music_url")
USES_KEYS = ("uses_count", "use_count", "usesCount")


def _first(raw: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def parse_observation(raw: Any, category: str) -> Optional[Observation]:
    """
    Build an observation from a raw source record.

    Args:
        raw: Mapping with title, author, url and uses count keys
        category: Category the record was fetched for

    Returns:
        The observation, or None if the record is malformed
    """
    if not isinstance(raw, dict):
        logger.warning("Skipping non-object record in %s: %r", category, raw)
        return None

    # A missing count is not a zero reading; it would become a zero baseline.
    uses_count = _first(raw, USES_KEYS)
    if uses_count is None:
        logger.warning("Skipping record without uses count in %s: %r", category, raw)
        return None

    try:
        return Observation(
            url=str(_first(raw, URL_KEYS) or "").strip(),
            title=str(raw.get("title") or "").strip(),
            author=str(raw.get("author") or "").strip(),
            uses_count=int(uses_count),
            category=category,
        )
    except (TypeError, ValueError) as e:
        logger.warning("Skipping malformed record in %s: %s", category, e)
        return None


def parse_observations(records: Any, category: str) -> list[Observation]:
    """Parse every well-formed record, dropping the rest."""
    if not isinstance(records, list):
        return []

    observations = []
    for raw in records:
        observation = parse_observation(raw, category)
        if observation is not None:
            observations.append(observation)
    return observations
