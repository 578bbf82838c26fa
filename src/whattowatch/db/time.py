# src/whattowatch/db/time.py
"""Time utilities for timestamps and rolling windows."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def window_cutoff(hours: float, now: datetime | None = None) -> datetime:
    """Return the oldest timestamp still inside a window of ``hours`` ending at ``now``."""
    return (now or utcnow()) - timedelta(hours=hours)
