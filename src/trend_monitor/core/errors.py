"""Error types raised by the trend monitor."""

from typing import Optional


class TrendMonitorError(Exception):
    """Base error for the trend monitor."""


class StorageError(TrendMonitorError):
    """Persistence layer failure, annotated with the operation and key."""

    def __init__(
        self, operation: str, key: object = None, cause: Optional[BaseException] = None
    ) -> None:
        self.operation = operation
        self.key = key
        self.cause = cause
        message = f"{operation} failed"
        if key is not None:
            message += f" for {key!r}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ConfigurationError(TrendMonitorError):
    """Invalid settings."""


class CriteriaError(ConfigurationError):
    """Invalid trend detection criteria."""


class SourceError(TrendMonitorError):
    """Ingestion source failed to produce observations for a category."""

    def __init__(self, source: str, category: str, reason: str) -> None:
        self.source = source
        self.category = category
        super().__init__(f"{source} failed for category '{category}': {reason}")
