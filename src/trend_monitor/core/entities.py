"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

# Legacy marker reported as the growth of items whose baseline was zero.
# The normal formula can also produce it (1000 -> 10999); is_new tells them apart.
NEW_ITEM_GROWTH_PERCENT = 999.9


@dataclass(frozen=True)
class Observation:
    """A single reading of an item's usage counter produced by a source."""

    url: str
    title: str
    author: str
    uses_count: int
    category: str

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("URL cannot be empty")
        if not self.title:
            raise ValueError("Title cannot be empty")
        if not self.category:
            raise ValueError("Category cannot be empty")
        if self.uses_count < 0:
            raise ValueError("Uses count cannot be negative")


@dataclass(frozen=True)
class Item:
    """A tracked content unit, identified by its URL."""

    id: int
    title: str
    author: str
    url: str
    uses_count: int
    category: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Snapshot:
    """Immutable timestamped observation of an item's uses count."""

    id: int
    item_id: int
    uses_count: int
    recorded_at: datetime


@dataclass(frozen=True)
class EstablishedGrowth:
    """Growth measured against a non-zero baseline."""

    percent: float
    is_new: bool = field(default=False, init=False)


@dataclass(frozen=True)
class NewItemGrowth:
    """Growth from a zero baseline; no meaningful percentage exists."""

    percent: float = field(default=NEW_ITEM_GROWTH_PERCENT, init=False)
    is_new: bool = field(default=True, init=False)


Growth = Union[EstablishedGrowth, NewItemGrowth]


@dataclass(frozen=True)
class ScoredItem:
    """An item that passed trend detection, with its growth."""

    item: Item
    growth: Growth
    old_uses_count: int

    @property
    def growth_percent(self) -> float:
        return self.growth.percent

    @property
    def is_new(self) -> bool:
        return self.growth.is_new

    @property
    def title(self) -> str:
        return self.item.title

    @property
    def author(self) -> str:
        return self.item.author

    @property
    def url(self) -> str:
        return self.item.url

    @property
    def uses_count(self) -> int:
        return self.item.uses_count

    @property
    def category(self) -> str:
        return self.item.category

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the shape handed to reporting collaborators."""
        return {
            "title": self.title,
            "author": self.author,
            "url": self.url,
            "uses_count": self.uses_count,
            "category": self.category,
            "growth_percent": self.growth_percent,
            "old_uses_count": self.old_uses_count,
            "is_new": self.is_new,
        }


@dataclass
class CategoryAnalysis:
    """Aggregate view of the trending items in one category."""

    category: str
    count: int
    average_growth: float
    top_item: Optional[ScoredItem]
    ranked: list[ScoredItem]
