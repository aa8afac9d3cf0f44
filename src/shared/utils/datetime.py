"""Timezone helpers. All timestamps in Workboard are UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(UTC)
