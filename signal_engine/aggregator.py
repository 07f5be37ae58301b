"""
Signal Engine - Aggregator.

============================================================
RESPONSIBILITY
============================================================
Turns scored, weighted items into a long/short signal.

- Per-class running weight and count
- Long/short split over directional weight (neutral excluded)
- Recommendation with a hysteresis band around parity

============================================================
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Tuple

from core.config import SignalTunables
from sentiment.models import Sentiment

from .models import Recommendation, SignalItem, SignalResponse
from .window import clamp, round_half_up


logger = logging.getLogger(__name__)


def compute_percentages(pos_weight: float, neg_weight: float) -> Tuple[int, int]:
    """(longPct, shortPct); both 0 when there is no directional weight."""
    directional = pos_weight + neg_weight
    if directional <= 0:
        return 0, 0
    long_pct = round_half_up(pos_weight / directional * 100)
    return long_pct, 100 - long_pct


def recommend(
    pos_weight: float,
    neg_weight: float,
    hysteresis: float = 1.05,
) -> Recommendation:
    if pos_weight > neg_weight * hysteresis:
        return Recommendation.LONG
    if neg_weight > pos_weight * hysteresis:
        return Recommendation.SHORT
    return Recommendation.NEUTRAL


@dataclass
class AggregateState:
    """Running per-class totals for a single computation."""
    tunables: SignalTunables = field(default_factory=SignalTunables)
    pos_weight: float = 0.0
    neg_weight: float = 0.0
    neu_weight: float = 0.0
    pos_count: int = 0
    neg_count: int = 0
    neu_count: int = 0

    def accumulate(self, sentiment: Sentiment, score: float, weight_factor: float) -> float:
        """
        Add one item; return its signed display weight (4 dp).

        The class total receives the clamped magnitude times the factor,
        so the display weight and the aggregated contribution differ.
        """
        t = self.tunables
        contribution = clamp(t.magnitude_min, t.magnitude_max, abs(score)) * weight_factor

        if sentiment == Sentiment.POSITIVE:
            self.pos_weight += contribution
            self.pos_count += 1
        elif sentiment == Sentiment.NEGATIVE:
            self.neg_weight += contribution
            self.neg_count += 1
        else:
            self.neu_weight += contribution
            self.neu_count += 1

        return round(score * weight_factor, 4)

    @property
    def total_count(self) -> int:
        return self.pos_count + self.neg_count + self.neu_count

    def build_response(
        self,
        window_minutes: int,
        timezone_offset_minutes: int,
        generated_at: datetime,
        items: Iterable[SignalItem],
        feed_outcomes: Optional[list] = None,
    ) -> SignalResponse:
        """Final payload; items are ordered newest first."""
        long_pct, short_pct = compute_percentages(self.pos_weight, self.neg_weight)
        recommendation = recommend(
            self.pos_weight, self.neg_weight, self.tunables.recommendation_hysteresis
        )
        ordered = sorted(items, key=lambda item: item.pub_date, reverse=True)

        logger.debug(
            f"Aggregated {self.total_count} items: posW={self.pos_weight:.4f} "
            f"negW={self.neg_weight:.4f} neuW={self.neu_weight:.4f}"
        )

        return SignalResponse(
            window_minutes=window_minutes,
            timezone_offset_minutes=timezone_offset_minutes,
            generated_at=generated_at,
            counts={
                "positive": self.pos_count,
                "negative": self.neg_count,
                "neutral": self.neu_count,
            },
            weights={
                "posW": self.pos_weight,
                "negW": self.neg_weight,
                "neuW": self.neu_weight,
            },
            long_pct=long_pct,
            short_pct=short_pct,
            recommendation=recommendation,
            items=ordered,
            feed_outcomes=list(feed_outcomes or []),
        )
