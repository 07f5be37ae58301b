"""
Signal Engine - Output Models.

The serialized field names (camelCase) are the public API contract.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, List

from core.clock import format_utc
from data_ingestion.types import FeedOutcome
from sentiment.models import Sentiment


class Recommendation(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class SignalItem:
    """One scored, weighted article."""
    title: str
    link: str
    pub_date: datetime
    source: str
    sentiment: Sentiment
    score: float
    weight: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "pubDate": format_utc(self.pub_date),
            "source": self.source,
            "sentiment": self.sentiment.value,
            "score": self.score,
            "weight": self.weight,
        }


@dataclass(frozen=True)
class SignalResponse:
    """Full computed signal for one window."""
    window_minutes: int
    timezone_offset_minutes: int
    generated_at: datetime
    counts: dict[str, int]
    weights: dict[str, float]
    long_pct: int
    short_pct: int
    recommendation: Recommendation
    items: List[SignalItem] = field(default_factory=list)
    feed_outcomes: List[FeedOutcome] = field(default_factory=list, compare=False, repr=False)

    def with_window(self, window_minutes: int, timezone_offset_minutes: int) -> "SignalResponse":
        """Same snapshot, window fields refreshed for a new "now"."""
        return replace(
            self,
            window_minutes=window_minutes,
            timezone_offset_minutes=timezone_offset_minutes,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "windowMinutes": self.window_minutes,
            "timezoneOffsetMinutes": self.timezone_offset_minutes,
            "generatedAt": format_utc(self.generated_at),
            "counts": dict(self.counts),
            "weights": dict(self.weights),
            "longPct": self.long_pct,
            "shortPct": self.short_pct,
            "recommendation": self.recommendation.value,
            "items": [item.to_dict() for item in self.items],
        }
