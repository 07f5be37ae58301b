"""
Data Ingestion - Type Definitions.

============================================================
PURPOSE
============================================================
Shared types for the data ingestion layer.

- Raw news item as handed over by a feed client
- Per-feed outcome records for one fetch batch

============================================================
DESIGN PRINCIPLES
============================================================
- Raw items are ephemeral, one request only
- Outcomes make partial failure observable without changing the
  success path
- No business logic

============================================================
"""

import html
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union


_TAG = re.compile(r"<[^>]+>")
_SPACE = re.compile(r"\s+")


def strip_html(text: str) -> str:
    """Plain-text snippet from an HTML fragment."""
    if not text:
        return ""
    return _SPACE.sub(" ", html.unescape(_TAG.sub(" ", text))).strip()


# =============================================================
# ENUMS
# =============================================================

class FeedStatus(str, Enum):
    """Outcome of fetching a single feed."""
    SUCCESS = "success"
    FAILED = "failed"


# =============================================================
# RAW DATA ITEM TYPES
# =============================================================

SourceHint = Union[str, Mapping[str, Any], None]


@dataclass
class RawNewsItem:
    """Raw news item as returned by a feed client."""
    title: str = ""
    link: str = ""
    pub_date: Optional[Any] = None
    snippet: str = ""
    creator: Optional[str] = None
    source: SourceHint = None
    feed_url: str = ""

    @classmethod
    def from_feed_entry(cls, entry: Mapping[str, Any], feed_url: str = "") -> "RawNewsItem":
        """Build from a feedparser entry."""
        snippet = entry.get("summary") or ""
        if not snippet and entry.get("content"):
            snippet = entry["content"][0].get("value", "")
        source = entry.get("source")
        return cls(
            title=entry.get("title") or "",
            link=entry.get("link") or "",
            pub_date=entry.get("published") or entry.get("updated"),
            snippet=strip_html(snippet),
            creator=entry.get("author"),
            source=dict(source) if isinstance(source, Mapping) else source,
            feed_url=feed_url,
        )


# =============================================================
# FETCH OUTCOME TYPES
# =============================================================

@dataclass
class FeedOutcome:
    """Result of fetching one feed."""
    url: str
    status: FeedStatus = FeedStatus.SUCCESS
    items: List[RawNewsItem] = field(default_factory=list)
    error: Optional[str] = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == FeedStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/monitoring."""
        return {
            "url": self.url,
            "status": self.status.value,
            "item_count": len(self.items),
            "error": self.error,
            "duration_ms": round(self.duration_ms, 1),
        }


@dataclass
class FeedBatch:
    """All feed outcomes of one fetch, in feed-array order."""
    outcomes: List[FeedOutcome] = field(default_factory=list)

    def iter_items(self) -> Iterator[RawNewsItem]:
        """Yield items of successful feeds, feed order then item order."""
        for outcome in self.outcomes:
            if outcome.succeeded:
                yield from outcome.items

    @property
    def succeeded(self) -> List[FeedOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> List[FeedOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    def summary(self) -> Dict[str, Any]:
        return {
            "feeds": len(self.outcomes),
            "succeeded": len(self.succeeded),
            "failed": len(self.failed),
            "items": sum(len(o.items) for o in self.succeeded),
        }
