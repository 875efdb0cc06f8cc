"""Tests for core entities."""

from datetime import datetime, timezone

import pytest

from trend_monitor.core import (
    NEW_ITEM_GROWTH_PERCENT,
    CategoryRegistry,
    EstablishedGrowth,
    Item,
    NewItemGrowth,
    Observation,
    ScoredItem,
)


def make_item(**overrides) -> Item:
    now = datetime.now(timezone.utc)
    fields = dict(
        id=1,
        title="AI Revolution",
        author="TechWave",
        url="https://www.tiktok.com/music/ai-1",
        uses_count=2600,
        category="tech",
        created_at=now,
        updated_at=now,
    )
    fields.update(overrides)
    return Item(**fields)


def test_observation_creation() -> None:
    """Test creating a valid observation."""
    observation = Observation(
        url="https://www.tiktok.com/music/ai-1",
        title="AI Revolution",
        author="TechWave",
        uses_count=9200,
        category="tech",
    )

    assert observation.title == "AI Revolution"
    assert observation.uses_count == 9200


def test_observation_validation() -> None:
    """Test observation validation."""
    with pytest.raises(ValueError, match="URL cannot be empty"):
        Observation(url="", title="T", author="A", uses_count=1, category="tech")

    with pytest.raises(ValueError, match="Title cannot be empty"):
        Observation(url="u1", title="", author="A", uses_count=1, category="tech")

    with pytest.raises(ValueError, match="Category cannot be empty"):
        Observation(url="u1", title="T", author="A", uses_count=1, category="")

    with pytest.raises(ValueError, match="Uses count cannot be negative"):
        Observation(url="u1", title="T", author="A", uses_count=-1, category="tech")


def test_observation_allows_zero_uses() -> None:
    """Zero uses is a valid reading."""
    assert Observation(url="u1", title="T", author="", uses_count=0, category="tech").uses_count == 0


def test_growth_variants_are_distinguishable() -> None:
    """New items carry the sentinel percent but are tagged as new."""
    established = EstablishedGrowth(percent=NEW_ITEM_GROWTH_PERCENT)
    new = NewItemGrowth()

    assert new.percent == NEW_ITEM_GROWTH_PERCENT
    assert new.is_new
    assert not established.is_new
    assert established != new


def test_scored_item_to_dict() -> None:
    """Scored items flatten into the reporting shape."""
    scored = ScoredItem(
        item=make_item(), growth=EstablishedGrowth(percent=160.0), old_uses_count=1000
    )

    assert scored.to_dict() == {
        "title": "AI Revolution",
        "author": "TechWave",
        "url": "https://www.tiktok.com/music/ai-1",
        "uses_count": 2600,
        "category": "tech",
        "growth_percent": 160.0,
        "old_uses_count": 1000,
        "is_new": False,
    }


def test_scored_new_item_to_dict() -> None:
    """New items report zero old uses and the new flag."""
    scored = ScoredItem(item=make_item(uses_count=800), growth=NewItemGrowth(), old_uses_count=0)

    data = scored.to_dict()
    assert data["is_new"] is True
    assert data["old_uses_count"] == 0
    assert data["growth_percent"] == NEW_ITEM_GROWTH_PERCENT


def test_category_registry_defaults() -> None:
    """Default registry holds the built-in categories in order."""
    registry = CategoryRegistry()

    assert registry.keys[0] == "fitness"
    assert "tech" in registry
    assert registry.display_name("tech") == "Tech"
    assert len(registry) == 7


def test_category_registry_custom() -> None:
    """A custom set replaces the defaults entirely."""
    registry = CategoryRegistry({"music": "Music", "dance": ""})

    assert list(registry) == ["music", "dance"]
    assert "tech" not in registry
    assert registry.display_name("dance") == "dance"
    assert registry.display_name("unknown") == "unknown"


def test_category_registry_rejects_empty_key() -> None:
    """Blank keys are rejected."""
    with pytest.raises(ValueError):
        CategoryRegistry({" ": "Blank"})


def test_reported_sentinel_growth_distinguished_by_flag() -> None:
    """A real 999.9% growth and a new item differ only in is_new."""
    real = ScoredItem(
        item=make_item(uses_count=10999),
        growth=EstablishedGrowth(percent=NEW_ITEM_GROWTH_PERCENT),
        old_uses_count=1000,
    )
    new = ScoredItem(item=make_item(uses_count=10999), growth=NewItemGrowth(), old_uses_count=0)

    assert real.to_dict()["growth_percent"] == new.to_dict()["growth_percent"]
    assert real.to_dict()["is_new"] is False
    assert new.to_dict()["is_new"] is True
