"""
Signal Engine - Time Window & Decay.

============================================================
RESPONSIBILITY
============================================================
Defines "today" and how much an article's age discounts it.

- Start of day at a fixed minute offset from UTC, no tz database
- Window = minutes from local midnight to now (at least 1)
- Linear decay from 1.0 (just published) to the floor (window edge)

============================================================
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional


DEFAULT_DECAY_FLOOR = 0.7


def clamp(lo: float, hi: float, value: float) -> float:
    return min(hi, max(lo, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# ============================================================
# WINDOW ARITHMETIC
# ============================================================

def compute_start_of_day(now: datetime, offset_minutes: float) -> datetime:
    """
    Local midnight for a fixed UTC offset, returned in UTC.

    Shift now into the local frame, truncate to midnight, shift back.
    """
    offset = offset_minutes if math.isfinite(offset_minutes) else 0
    shift = timedelta(minutes=offset)
    shifted = _as_utc(now) + shift
    local_midnight = shifted.replace(hour=0, minute=0, second=0, microsecond=0)
    return local_midnight - shift


def compute_window_minutes(now: datetime, start_of_day: datetime) -> int:
    elapsed = (_as_utc(now) - _as_utc(start_of_day)).total_seconds() / 60
    return max(1, round_half_up(elapsed))


def minutes_ago(published: datetime, now: datetime) -> float:
    return (_as_utc(now) - _as_utc(published)).total_seconds() / 60


def within_window(published: Optional[datetime], now: datetime, window_minutes: float) -> bool:
    if published is None:
        return False
    age = minutes_ago(published, now)
    return 0 <= age <= window_minutes


# ============================================================
# DECAY
# ============================================================

def linear_time_decay(
    age_minutes: float,
    window_minutes: float,
    floor: float = DEFAULT_DECAY_FLOOR,
) -> float:
    """1.0 at age 0 falling linearly to floor at the window edge."""
    safe_window = max(window_minutes, 1)
    ratio = clamp(0, safe_window, age_minutes) / safe_window
    return clamp(floor, 1.0, 1.0 - ratio * (1.0 - floor))


def decay_weight(
    published: datetime,
    now: datetime,
    window_minutes: float,
    floor: float = DEFAULT_DECAY_FLOOR,
) -> float:
    """Decay multiplier, 0 outside the window."""
    age = minutes_ago(published, now)
    if age < 0 or age > window_minutes:
        return 0.0
    return linear_time_decay(age, window_minutes, floor)


# ============================================================
# PUBLISH DATE PARSING
# ============================================================

def parse_published(value: Any) -> Optional[datetime]:
    """
    Parse a feed publish date.

    Accepts datetimes, ISO 8601 and RFC 822 strings. Naive values are UTC.
    Returns None for anything unparsable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        return _as_utc(datetime.fromisoformat(iso))
    except ValueError:
        pass

    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    return _as_utc(parsed) if parsed is not None else None


# ============================================================
# WINDOW VALUE OBJECT
# ============================================================

@dataclass(frozen=True)
class TimeWindow:
    """The "today" window of one computation."""
    now: datetime
    start_of_day: datetime
    minutes: int
    offset_minutes: int
    decay_floor: float = DEFAULT_DECAY_FLOOR

    @classmethod
    def for_now(
        cls,
        now: datetime,
        offset_minutes: int,
        decay_floor: float = DEFAULT_DECAY_FLOOR,
    ) -> "TimeWindow":
        now = _as_utc(now)
        start = compute_start_of_day(now, offset_minutes)
        return cls(
            now=now,
            start_of_day=start,
            minutes=compute_window_minutes(now, start),
            offset_minutes=offset_minutes,
            decay_floor=decay_floor,
        )

    def contains(self, published: Optional[datetime]) -> bool:
        return within_window(published, self.now, self.minutes)

    def decay(self, published: datetime) -> float:
        return decay_weight(published, self.now, self.minutes, self.decay_floor)
