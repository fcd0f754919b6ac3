"""Time sources.

Lifecycle state is derived from stored end times plus "now", so every
component takes a Clock instead of calling datetime.now() directly.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return utc_now()


class ManualClock:
    """Clock that only moves when told to. Used by tests and simulations."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or utc_now()

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> datetime:
        self._now = self._now + delta
        return self._now

    def set(self, when: datetime) -> None:
        if when.tzinfo is None:
            raise ValueError("ManualClock requires a timezone-aware datetime")
        self._now = when
