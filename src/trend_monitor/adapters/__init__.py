"""Adapters for storage, sources and notifications."""
