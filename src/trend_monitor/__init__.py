"""Trend monitor: usage time series and trending detection."""

__version__ = "0.1.0"
