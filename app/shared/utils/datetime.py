"""
UTC datetime utilities for consistent timezone handling.

SQLite hands back naive datetimes for server_default=now() columns while
PostgreSQL returns aware ones; repositories normalize through ensure_utc()
so DTOs always carry timezone-aware UTC values.
"""

from datetime import UTC, datetime


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
