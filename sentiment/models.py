"""
Sentiment Data Models - Normalized sentiment structures.

A sentiment result is always a (label, signed score) pair: the sign carries
direction, the magnitude carries strength. Lexicon scores are integer keyword
differences, model scores are probability margins scaled into the same range.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Sentiment(str, Enum):
    """Three-way sentiment class."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ModelTrack(str, Enum):
    """Transformer model tracks, routed by script detection."""
    FINANCE = "finbert"
    MULTILINGUAL = "xlmr"


class BackendState(str, Enum):
    """Lifecycle of a lazily loaded classification backend."""
    UNCONFIGURED = "unconfigured"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def label_from_score(score: float) -> Sentiment:
    """Derive the sentiment class from the sign of a score."""
    if score > 0:
        return Sentiment.POSITIVE
    if score < 0:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


@dataclass(frozen=True)
class SentimentScore:
    """
    Scored sentiment for one article.

    label: positive | negative | neutral
    score: signed strength; 0.0 for neutral
    """
    label: Sentiment
    score: float

    @classmethod
    def from_score(cls, score: float) -> "SentimentScore":
        return cls(label=label_from_score(score), score=score)

    @classmethod
    def neutral(cls) -> "SentimentScore":
        return cls(label=Sentiment.NEUTRAL, score=0.0)

    @property
    def magnitude(self) -> float:
        return abs(self.score)

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label.value, "score": self.score}
