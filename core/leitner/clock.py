"""
Clock sources for scheduling.

Every top-level operation reads "now" exactly once from a Clock so that
ordering decisions inside a single call are deterministic.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Protocol

from core.schemas import ensure_utc


class Clock(Protocol):
    def now(self) -> datetime:
        """Current time as an aware UTC datetime."""
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Manually controlled clock (tests, replays).
    """

    def __init__(self, current: datetime):
        self.current = ensure_utc(current)

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = ensure_utc(current)

    def advance(self, **kwargs) -> datetime:
        """Move forward by timedelta keyword arguments, e.g. advance(days=1)."""
        self.current = self.current + timedelta(**kwargs)
        return self.current


def local_date(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of a moment in the reference timezone (UTC by default)."""
    return ensure_utc(moment).astimezone(tz or timezone.utc).date()
