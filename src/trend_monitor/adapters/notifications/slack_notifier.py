"""Slack notification adapter."""

import logging
from typing import Optional

import httpx

from trend_monitor.core import ScoredItem, TrendNotifier

logger = logging.getLogger(__name__)


def format_number(n: int) -> str:
    """Format a count with K/M/B suffixes."""
    if n >= 1_000_000_000:
        return f"{n / 1_000_000_000:.1f}B"
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


def format_growth(item: ScoredItem) -> str:
    """Render growth, with new items shown as NEW rather than a percentage."""
    if item.is_new:
        return "NEW"
    return f"+{item.growth_percent:.0f}%"


class SlackNotifier(TrendNotifier):
    """Send trending alerts to Slack via webhook."""

    def __init__(self, webhook_url: Optional[str] = None) -> None:
        """Initialize Slack notifier.

        Args:
            webhook_url: Slack webhook URL. If None, notifications are skipped.
        """
        self.webhook_url = webhook_url

    def format_message(self, category_name: str, items: list[ScoredItem]) -> str:
        """Build the Slack mrkdwn message for a ranked list."""
        lines = [f"🔥 *Trending Sounds - {category_name}*", ""]

        for i, item in enumerate(items, 1):
            header = f'*{i}. "{item.title}"*'
            if item.author:
                header += f" by {item.author}"
            lines.append(header)
            lines.append(
                f"   📊 Uses: {format_number(item.old_uses_count)} → "
                f"{format_number(item.uses_count)} ({format_growth(item)})"
            )
            lines.append(f"   🔗 <{item.url}|Listen>")
            lines.append("")

        return "\n".join(lines).rstrip() + "\n"

    async def send_trending(self, category_name: str, items: list[ScoredItem]) -> bool:
        """Send a trending list to Slack.

        Args:
            category_name: Display name of the category
            items: Ranked trending items

        Returns:
            True if Slack accepted the message, False if it was skipped or failed
        """
        if not self.webhook_url or not items:
            return False

        payload = {
            "text": self.format_message(category_name, items),
            "mrkdwn": True,
        }

        async with httpx.AsyncClient(timeout=30.0) as client:
            try:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
                logger.info("Sent %d trending items for %s to Slack", len(items), category_name)
                return True
            except httpx.HTTPError as e:
                logger.warning("Failed to send Slack alert for %s: %s", category_name, e)
                return False
