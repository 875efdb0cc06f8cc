"""CLI entry point for trend monitor."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from trend_monitor.adapters.notifications import SlackNotifier
from trend_monitor.adapters.notifications.slack_notifier import format_growth, format_number
from trend_monitor.adapters.sources import FixtureObservationSource, JSONFeedObservationSource
from trend_monitor.adapters.storage import SQLiteTimeSeriesStore
from trend_monitor.config import Settings, get_settings
from trend_monitor.core import (
    ConfigurationError,
    ObservationSource,
    ScoredItem,
    StorageError,
    TrendCriteria,
    TrendDetector,
)
from trend_monitor.logging_setup import setup_logging
from trend_monitor.use_cases import AlertService, CollectionService

app = typer.Typer(help="Track usage counts over time and detect trending items.")

CONFIG_OPTION = typer.Option(Path("config.yaml"), "--config", "-c", help="Path to config.yaml")


def _load_settings(config: Path) -> Settings:
    try:
        settings = get_settings(config)
    except ConfigurationError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=2)

    setup_logging(settings.logging.level, settings.logging.file)
    return settings


def _open_store(settings: Settings) -> SQLiteTimeSeriesStore:
    store = SQLiteTimeSeriesStore(settings.db_path, busy_timeout=settings.storage.busy_timeout)
    try:
        store.init_db()
    except StorageError as e:
        print(f"❌ Cannot open database: {e}")
        raise typer.Exit(code=1)
    return store


def _configured_criteria(settings: Settings) -> TrendCriteria:
    try:
        return settings.criteria
    except ConfigurationError as e:
        print(f"❌ Invalid criteria: {e}")
        raise typer.Exit(code=2)


def _build_source(settings: Settings) -> ObservationSource:
    if settings.sources.fixture_path:
        return FixtureObservationSource(settings.sources.fixture_path)
    if settings.sources.feed_url:
        return JSONFeedObservationSource(
            settings.sources.feed_url, timeout=settings.sources.request_timeout
        )
    print("❌ No source configured: set sources.fixture_path or sources.feed_url")
    raise typer.Exit(code=2)


def _check_category(settings: Settings, category: str) -> None:
    registry = settings.category_registry
    if category not in registry:
        print(f"❌ Unknown category '{category}'. Known: {', '.join(registry.keys)}")
        raise typer.Exit(code=2)


def _build_criteria(
    settings: Settings,
    min_growth: Optional[float],
    min_uses: Optional[int],
    max_uses: Optional[int],
    lookback_hours: Optional[int],
) -> TrendCriteria:
    detection = settings.detection
    try:
        return TrendCriteria(
            min_uses_count=detection.min_uses_count if min_uses is None else min_uses,
            max_uses_count=detection.max_uses_count if max_uses is None else max_uses,
            min_growth_percent=detection.min_growth_percent if min_growth is None else min_growth,
            lookback_hours=detection.lookback_hours if lookback_hours is None else lookback_hours,
        )
    except ConfigurationError as e:
        print(f"❌ Invalid criteria: {e}")
        raise typer.Exit(code=2)


def _print_ranked(category_name: str, ranked: list[ScoredItem]) -> None:
    print(f"\n🔥 Trending - {category_name}")
    print("=" * 70)
    if not ranked:
        print("No trending items found yet. Check back later!")
        return

    for i, item in enumerate(ranked, 1):
        author = f" by {item.author}" if item.author else ""
        print(f"{i}. \"{item.title}\"{author}")
        print(
            f"   📊 {format_number(item.old_uses_count)} → {format_number(item.uses_count)}"
            f" ({format_growth(item)})"
        )
        print(f"   🔗 {item.url}")


@app.command()
def collect(
    config: Path = CONFIG_OPTION,
    category: Optional[list[str]] = typer.Option(
        None, "--category", help="Category to collect (repeatable, default: all)"
    ),
) -> None:
    """Poll the configured source and record observations."""
    settings = _load_settings(config)
    for key in category or []:
        _check_category(settings, key)

    source = _build_source(settings)
    store = _open_store(settings)
    service = CollectionService(source, store, settings.category_registry)

    print(f"\n{getattr(source, 'emoji', '•')} Collecting from {source.name}...")
    report = asyncio.run(service.collect(category or None))

    for key, count in report.recorded.items():
        skipped = report.skipped.get(key, 0)
        suffix = f" ({skipped} skipped)" if skipped else ""
        print(f"  ✓ {settings.category_registry.display_name(key)}: {count}{suffix}")
    for key, error in report.failed.items():
        print(f"  ✗ {settings.category_registry.display_name(key)}: {error}")

    print(f"\n✅ Recorded {report.total_recorded} observations")
    if report.failed:
        raise typer.Exit(code=1)


@app.command()
def trending(
    category: str = typer.Argument(..., help="Category key"),
    config: Path = CONFIG_OPTION,
    limit: int = typer.Option(10, "--limit", "-n", help="Max results (0 = no limit)"),
    min_growth: Optional[float] = typer.Option(None, "--min-growth", help="Minimum growth %"),
    min_uses: Optional[int] = typer.Option(None, "--min-uses", help="Minimum current uses"),
    max_uses: Optional[int] = typer.Option(None, "--max-uses", help="Maximum current uses"),
    lookback_hours: Optional[int] = typer.Option(None, "--lookback-hours", help="Baseline window"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    notify: bool = typer.Option(False, "--notify", help="Send results to Slack"),
) -> None:
    """Show the trending items of a category."""
    settings = _load_settings(config)
    _check_category(settings, category)
    criteria = _build_criteria(settings, min_growth, min_uses, max_uses, lookback_hours)

    store = _open_store(settings)
    detector = TrendDetector(store, criteria, scan_limit=settings.detection.scan_limit)
    ranked = detector.detect_trending(category, limit)

    if as_json:
        print(json.dumps([s.to_dict() for s in ranked], indent=2, ensure_ascii=False))
    else:
        _print_ranked(settings.category_registry.display_name(category), ranked)

    if notify:
        if not settings.slack_webhook_url:
            print("⚠️  SLACK_WEBHOOK_URL not set; skipping notification")
            return
        notifier = SlackNotifier(settings.slack_webhook_url)
        delivered = asyncio.run(
            notifier.send_trending(settings.category_registry.display_name(category), ranked)
        )
        if ranked and not delivered:
            print("⚠️  Slack notification was not delivered")


@app.command()
def analyze(
    category: str = typer.Argument(..., help="Category key"),
    config: Path = CONFIG_OPTION,
    limit: int = typer.Option(10, "--limit", "-n", help="Max items in the analysis"),
) -> None:
    """Summarise trending activity in a category."""
    settings = _load_settings(config)
    _check_category(settings, category)
    criteria = _configured_criteria(settings)

    store = _open_store(settings)
    detector = TrendDetector(store, criteria, scan_limit=settings.detection.scan_limit)
    analysis = detector.analyze_category(category, limit)

    print(f"\n📈 Analysis - {settings.category_registry.display_name(category)}")
    print(f"  • Trending items: {analysis.count}")
    print(f"  • Average growth: {analysis.average_growth:.1f}%")
    if analysis.top_item:
        top = analysis.top_item
        print(f"  • Top item: \"{top.title}\" ({format_growth(top)})")
    else:
        print("  • Top item: none")


@app.command()
def alert(
    config: Path = CONFIG_OPTION,
    category: Optional[list[str]] = typer.Option(
        None, "--category", help="Category to alert on (repeatable, default: all)"
    ),
) -> None:
    """Detect trending items in every category and send Slack alerts."""
    settings = _load_settings(config)
    for key in category or []:
        _check_category(settings, key)
    criteria = _configured_criteria(settings)

    if not settings.slack_webhook_url:
        print("❌ SLACK_WEBHOOK_URL not set")
        raise typer.Exit(code=2)

    store = _open_store(settings)
    detector = TrendDetector(store, criteria, scan_limit=settings.detection.scan_limit)
    service = AlertService(
        detector,
        SlackNotifier(settings.slack_webhook_url),
        settings.category_registry,
        limit=settings.detection.alert_limit,
    )
    report = asyncio.run(service.send_alerts(category or None))

    print(f"\n✅ Sent {len(report.sent)} alerts")
    for key, error in report.failed.items():
        print(f"  ✗ {settings.category_registry.display_name(key)}: {error}")
    if report.failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
