"""
Core Module - Clock.

============================================================
RESPONSIBILITY
============================================================
Provides the injectable time source for signal computation.

- Window arithmetic, decay and cache expiry all read this clock
- Tests swap in MockClock to pin "now"

============================================================
DESIGN PRINCIPLES
============================================================
- UTC only; the "today" offset is applied by the window module
- Timestamps are Unix seconds (float)

============================================================
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional
import time


# ============================================================
# CLOCK PROTOCOL
# ============================================================

class ClockProtocol(ABC):
    """Abstract interface for the service clock."""

    @abstractmethod
    def now(self) -> datetime:
        """Get current timezone-aware UTC datetime."""
        pass

    def timestamp(self) -> float:
        """Get current Unix timestamp in seconds."""
        return self.now().timestamp()

    def isoformat(self, dt: Optional[datetime] = None) -> str:
        """Format a UTC datetime the way the API emits it."""
        dt = dt or self.now()
        return format_utc(dt)


def format_utc(dt: datetime) -> str:
    """Render as ISO 8601 with millisecond precision and a Z suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


# ============================================================
# SYSTEM CLOCK (PRODUCTION)
# ============================================================

class SystemClock(ClockProtocol):
    """Production clock backed by the host's wall time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> float:
        return time.time()


# ============================================================
# MOCK CLOCK (TESTING)
# ============================================================

class MockClock(ClockProtocol):
    """
    Mock clock for testing.

    Time only moves when the test moves it.
    """

    def __init__(self, initial_time: Optional[datetime] = None) -> None:
        self._time = _ensure_utc(initial_time or datetime.now(timezone.utc))

    def now(self) -> datetime:
        return self._time

    def set_time(self, new_time: datetime) -> None:
        """Set the current time."""
        self._time = _ensure_utc(new_time)

    def advance(self, seconds: float = 0, **kwargs) -> None:
        """
        Advance time by the specified amount.

        Args:
            seconds: Number of seconds to advance
            **kwargs: Passed to timedelta (hours, minutes, days, etc.)
        """
        self._time = self._time + timedelta(seconds=seconds, **kwargs)


def _ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
