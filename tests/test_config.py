"""Tests for configuration loading."""

from pathlib import Path

import pytest

from trend_monitor.config import get_settings, load_config
from trend_monitor.core import ConfigurationError, CriteriaError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SLACK_WEBHOOK_URL", "TREND_MONITOR_DB_PATH", "TREND_FEED_URL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    """Without a config file every default applies."""
    settings = get_settings(tmp_path / "absent.yaml")

    assert settings.slack_webhook_url is None
    assert settings.db_path == Path("data/trends.db")
    assert settings.criteria.min_growth_percent == 150.0
    assert settings.detection.scan_limit == 1000
    assert "gaming" in settings.category_registry


def test_yaml_sections_applied(tmp_path: Path) -> None:
    """YAML values override defaults and paths become Path objects."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "storage:\n"
        "  db_path: /var/lib/trends.db\n"
        "detection:\n"
        "  min_growth_percent: 80\n"
        "  lookback_hours: 12\n"
        "sources:\n"
        "  fixture_path: fixtures/sounds.yaml\n"
        "categories:\n"
        "  music: Music\n",
        encoding="utf-8",
    )

    settings = get_settings(config_path)

    assert settings.db_path == Path("/var/lib/trends.db")
    assert settings.criteria.min_growth_percent == 80
    assert settings.criteria.lookback_hours == 12
    assert settings.sources.fixture_path == Path("fixtures/sounds.yaml")
    assert list(settings.category_registry) == ["music"]


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Secrets and deployment paths come from the environment."""
    monkeypatch.setenv("SLACK_WEBHOOK_URL", "https://hooks.slack.com/services/x")
    monkeypatch.setenv("TREND_MONITOR_DB_PATH", str(tmp_path / "env.db"))
    monkeypatch.setenv("TREND_FEED_URL", "https://feed.example.com")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = get_settings(tmp_path / "absent.yaml")

    assert settings.slack_webhook_url == "https://hooks.slack.com/services/x"
    assert settings.db_path == tmp_path / "env.db"
    assert settings.sources.feed_url == "https://feed.example.com"
    assert settings.logging.level == "DEBUG"


def test_unknown_setting_rejected(tmp_path: Path) -> None:
    """Typos in setting names are configuration errors."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("detection:\n  min_growth: 80\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="detection.min_growth"):
        get_settings(config_path)


def test_invalid_yaml_rejected(tmp_path: Path) -> None:
    """Unparseable YAML is a configuration error."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("detection: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        load_config(config_path)


def test_empty_categories_rejected(tmp_path: Path) -> None:
    """The category set cannot be empty."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("categories: {}\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        get_settings(config_path)


def test_inconsistent_criteria_rejected(tmp_path: Path) -> None:
    """An empty uses band fails when criteria are built."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "detection:\n  min_uses_count: 5000\n  max_uses_count: 100\n", encoding="utf-8"
    )

    settings = get_settings(config_path)

    with pytest.raises(CriteriaError):
        settings.criteria
