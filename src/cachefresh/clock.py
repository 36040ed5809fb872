"""Time sources for freshness calculations.

The calculator never reads the wall clock directly; it asks a
:class:`Clock`.  Production code uses :class:`SystemClock`, tests use
:class:`FrozenClock` so that ages and TTLs are exact.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything with a ``now()`` returning a timezone-aware UTC datetime."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """A clock that stands still until told to move.

    Args:
        instant: The time to report.  Naive datetimes are taken as UTC.
    """

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, seconds: float) -> None:
        """Move the clock forward by *seconds* (negative values move it back)."""
        self._instant = self._instant + timedelta(seconds=seconds)
