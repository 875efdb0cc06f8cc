"""Category registry."""

from typing import Iterator, Mapping, Optional

DEFAULT_CATEGORIES: dict[str, str] = {
    "fitness": "Fitness",
    "beauty": "Beauty",
    "comedy": "Comedy",
    "business": "Business",
    "tech": "Tech",
    "lifestyle": "Lifestyle",
    "gaming": "Gaming",
}


class CategoryRegistry:
    """Ordered set of category keys with human-readable display names.

    Passed to the components that need it instead of being global state,
    so a deployment (or a test) can swap in its own set.
    """

    def __init__(self, categories: Optional[Mapping[str, str]] = None) -> None:
        source = DEFAULT_CATEGORIES if categories is None else categories
        self._names: dict[str, str] = {}
        for key, name in source.items():
            key = str(key).strip()
            if not key:
                raise ValueError("Category key cannot be empty")
            self._names[key] = str(name) if name else key

    @property
    def keys(self) -> list[str]:
        return list(self._names)

    def display_name(self, key: str) -> str:
        """Display name for key, or the key itself when unknown."""
        return self._names.get(key) or key

    def __contains__(self, key: object) -> bool:
        return key in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)
