"""
Signal Engine - Source Resolution & Weighting.

Publisher name priority:
1. Explicit author/creator
2. Feed-supplied source (string, or a mapping with a title)
3. Link hostname without "www."
4. "Unknown"

Reputation multipliers are looked up by exact trimmed name; anything not
listed weighs 1.0.
"""

from typing import Any, Mapping, Optional

from data_ingestion.links import link_hostname


UNKNOWN_SOURCE = "Unknown"

SOURCE_WEIGHTS: dict[str, float] = {
    "Reuters": 1.3,
    "Bloomberg": 1.25,
    "The Wall Street Journal": 1.2,
    "WSJ": 1.2,
    "Financial Times": 1.2,
    "CoinDesk": 1.15,
    "Cointelegraph": 1.1,
    "The Block": 1.1,
}


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def resolve_source(creator: Optional[str], source: Any, link: str) -> str:
    """Derive the publisher name for an item."""
    candidate = _text(creator) or _text(source)
    if not candidate and isinstance(source, Mapping):
        candidate = _text(source.get("title"))
    if candidate:
        return candidate
    return link_hostname(link) or UNKNOWN_SOURCE


def weight_for_source(
    source: str,
    weights: Optional[Mapping[str, float]] = None,
) -> float:
    table = SOURCE_WEIGHTS if weights is None else weights
    return table.get(source.strip(), 1.0)
