"""Time helpers for timezone-aware UTC timestamps on orders and tasks."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for column defaults and onupdate hooks."""
    return datetime.now(UTC)
