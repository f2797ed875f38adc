"""
Clock abstraction.

All lifecycle math runs on naive UTC datetimes. The API reads "now" through
the ``get_clock`` dependency and the sweeper receives a clock at construction,
so tests can swap in a FrozenClock.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Normalize a datetime (aware or naive UTC) to naive UTC."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SystemClock:
    """Wall clock"""

    def now(self) -> datetime:
        return utcnow()


class FrozenClock:
    """Manually driven clock for tests and replays."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = as_naive_utc(start) if start else utcnow()

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        self._now = as_naive_utc(value)

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        self._now = self._now + timedelta(seconds=seconds, **kwargs)
        return self._now
