"""
Lexicon Sentiment Scorer - Deterministic keyword counting.

Score = (positive keyword hits) - (negative keyword hits) over the lowercase
alphanumeric/hyphen tokens of "title snippet". No normalization: three
negative hits score -3.
"""

import re

from .models import SentimentScore


POSITIVE_WORDS: frozenset[str] = frozenset({
    "gain", "gains",
    "rally",
    "bull", "bullish",
    "surge", "surges",
    "breakout",
    "record", "all-time",
    "positive",
    "upgrade", "outperform",
    "buy", "accumulate",
    "support", "uptrend",
    "rebound", "recover",
    "green",
    "approve", "approval", "approved",
    "adopt", "adoption",
    "partnership",
    "investment", "invest", "funding",
    "etf",
    "listing",
})

NEGATIVE_WORDS: frozenset[str] = frozenset({
    "drop", "drops",
    "fall", "falls",
    "bear", "bearish",
    "plunge", "crash",
    "selloff", "sell-off",
    "decline", "downtrend",
    "negative",
    "downgrade", "underperform",
    "sell",
    "resistance",
    "reject", "rejection",
    "ban", "lawsuit", "probe",
    "fraud", "hack", "exploit", "scam",
    "fud",
    "outflow",
    "liquidation", "liquidations",
    "insolvency", "bankrupt",
    "delist",
    "concern",
    "steal", "steals", "stole", "stolen", "theft",
})

_NON_TOKEN = re.compile(r"[^a-z0-9\s-]+")


def tokenize(text: str) -> list[str]:
    """Lowercase, blank out anything but [a-z0-9 -], split on whitespace."""
    return _NON_TOKEN.sub(" ", text.lower()).split()


def score_lexicon(title: str, snippet: str = "") -> SentimentScore:
    """Score an article by counting keyword hits."""
    tokens = tokenize(f"{title or ''} {snippet or ''}")
    pos = sum(1 for token in tokens if token in POSITIVE_WORDS)
    neg = sum(1 for token in tokens if token in NEGATIVE_WORDS)
    return SentimentScore.from_score(float(pos - neg))
