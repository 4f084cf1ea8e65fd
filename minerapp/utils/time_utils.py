"""Clock helpers shared by the mining engine and its tests."""

from __future__ import annotations

import datetime as dt
from typing import Callable, Optional

UTC = dt.timezone.utc

#: A clock returns the current time as integer milliseconds since the epoch.
Clock = Callable[[], int]


def now_utc() -> dt.datetime:
    """Return the current time as an aware ``datetime`` in UTC."""

    return dt.datetime.now(UTC)


def _ensure_aware_utc(value: dt.datetime) -> dt.datetime:
    """Coerce ``value`` to an aware UTC datetime without altering the instant."""

    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_millis(value: dt.datetime) -> int:
    """Return ``value`` as integer milliseconds since the Unix epoch."""

    aware = _ensure_aware_utc(value)
    return int(aware.timestamp() * 1000)


def from_millis(value: int) -> dt.datetime:
    return dt.datetime.fromtimestamp(value / 1000, tz=UTC)


def system_clock() -> int:
    """Wall-clock time in milliseconds."""

    return to_millis(now_utc())


class ManualClock:
    """Clock whose time only moves when told to."""

    def __init__(self, start: int = 0) -> None:
        self._now = int(start)

    def __call__(self) -> int:
        return self._now

    def set(self, value: int) -> None:
        self._now = int(value)

    def advance(self, millis: int = 0, *, seconds: Optional[float] = None) -> int:
        if seconds is not None:
            millis += int(seconds * 1000)
        self._now += int(millis)
        return self._now


__all__ = [
    "UTC",
    "Clock",
    "ManualClock",
    "from_millis",
    "now_utc",
    "system_clock",
    "to_millis",
]
