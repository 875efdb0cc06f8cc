"""Notification adapters."""

from trend_monitor.adapters.notifications.slack_notifier import SlackNotifier

__all__ = ["SlackNotifier"]
