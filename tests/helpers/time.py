"""Shared, deterministic timestamps for tests."""

from datetime import UTC, datetime


# Fixed timestamp so recency scores do not depend on the wall clock.
FIXED_NOW = datetime(2025, 6, 13, 12, 0, 0, tzinfo=UTC)
