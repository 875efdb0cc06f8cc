"""Configuration management."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from trend_monitor.core import DEFAULT_CATEGORIES, CategoryRegistry, ConfigurationError, TrendCriteria


@dataclass
class StorageConfig:
    """Storage settings."""
    db_path: Path = Path("data/trends.db")
    busy_timeout: float = 30.0


@dataclass
class DetectionConfig:
    """Trend detection settings."""
    min_uses_count: int = 500
    max_uses_count: int = 30000
    min_growth_percent: float = 150.0
    lookback_hours: int = 24
    scan_limit: int = 1000
    alert_limit: int = 10

    def to_criteria(self) -> TrendCriteria:
        return TrendCriteria(
            min_uses_count=self.min_uses_count,
            max_uses_count=self.max_uses_count,
            min_growth_percent=self.min_growth_percent,
            lookback_hours=self.lookback_hours,
        )


@dataclass
class SourceConfig:
    """Ingestion source settings."""
    fixture_path: Optional[Path] = None
    feed_url: Optional[str] = None
    request_timeout: float = 30.0


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file: Optional[Path] = None


@dataclass
class Settings:
    """Application settings."""

    # Secrets (from environment only)
    slack_webhook_url: Optional[str] = None

    # Config sections
    storage: StorageConfig = field(default_factory=StorageConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    sources: SourceConfig = field(default_factory=SourceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    categories: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORIES))

    @property
    def db_path(self) -> Path:
        return self.storage.db_path

    @property
    def criteria(self) -> TrendCriteria:
        return self.detection.to_criteria()

    @property
    def category_registry(self) -> CategoryRegistry:
        return CategoryRegistry(self.categories)


PATH_FIELDS = {"db_path", "fixture_path", "file"}


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")
    return config


def _apply_section(section: Any, values: Any, name: str) -> None:
    if not isinstance(values, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping")

    known = {f.name for f in fields(section)}
    for key, value in values.items():
        if key not in known:
            raise ConfigurationError(f"Unknown setting '{name}.{key}'")
        if key in PATH_FIELDS and value is not None:
            value = Path(value)
        setattr(section, key, value)


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    # Load YAML config
    config = load_config(config_path)

    settings = Settings(slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL") or None)

    # Apply YAML config
    for name in ("storage", "detection", "sources", "logging"):
        if name in config:
            _apply_section(getattr(settings, name), config[name], name)

    if "categories" in config:
        categories = config["categories"]
        if not isinstance(categories, dict) or not categories:
            raise ConfigurationError("'categories' must be a non-empty mapping of key to name")
        settings.categories = {str(k): str(v) for k, v in categories.items()}

    # Environment overrides
    if os.getenv("TREND_MONITOR_DB_PATH"):
        settings.storage.db_path = Path(os.environ["TREND_MONITOR_DB_PATH"])
    if os.getenv("TREND_FEED_URL"):
        settings.sources.feed_url = os.environ["TREND_FEED_URL"]
    if os.getenv("LOG_LEVEL"):
        settings.logging.level = os.environ["LOG_LEVEL"]

    return settings
