"""Time utilities."""
from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return current UTC time with timezone awareness."""

    return datetime.now(tz=UTC)


def hours_ago(hours: int) -> datetime:
    return utcnow() - timedelta(hours=hours)


__all__ = ["utcnow", "hours_ago"]
