"""
Data Ingestion - Ingestion Service.

============================================================
RESPONSIBILITY
============================================================
Fetches every configured feed for one signal computation.

- All feeds fetched concurrently
- Each feed awaited independently to completion or failure
- Per-feed outcome recorded; a failed feed contributes nothing
- Per-run link dedup (first seen, in feed order, wins)

============================================================
DESIGN PRINCIPLES
============================================================
- Failure isolation between feeds
- No retries, no cancellation propagation
- No business logic - scoring happens downstream

============================================================
"""

import asyncio
import logging
import time
from typing import List, Optional, Sequence, Set

from .feeds import BaseFeedClient
from .types import FeedBatch, FeedOutcome, FeedStatus, RawNewsItem


logger = logging.getLogger(__name__)


class LinkDeduplicator:
    """Seen-set of normalized links for a single computation run."""

    def __init__(self) -> None:
        self._seen: Set[str] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def is_seen(self, link: str) -> bool:
        return link in self._seen

    def mark_seen(self, link: str) -> None:
        self._seen.add(link)


class IngestionService:
    """
    Concurrent multi-feed fetcher.

    ============================================================
    USAGE
    ============================================================
    ```python
    service = IngestionService(RssFeedClient(timeout=10))
    batch = await service.fetch_all(build_feed_urls(config))
    for item in batch.iter_items():
        ...
    ```
    ============================================================
    """

    def __init__(self, client: BaseFeedClient) -> None:
        self._client = client
        self._last_batch: Optional[FeedBatch] = None

    @property
    def last_batch(self) -> Optional[FeedBatch]:
        return self._last_batch

    async def fetch_all(self, urls: Sequence[str]) -> FeedBatch:
        """Fetch all feeds concurrently; never raises for a feed failure."""
        outcomes = await asyncio.gather(*(self._fetch_one(url) for url in urls))
        batch = FeedBatch(outcomes=list(outcomes))
        self._last_batch = batch

        summary = batch.summary()
        logger.info(
            f"Fetched {summary['feeds']} feeds: {summary['succeeded']} ok, "
            f"{summary['failed']} failed, {summary['items']} items"
        )
        return batch

    async def _fetch_one(self, url: str) -> FeedOutcome:
        started = time.monotonic()
        try:
            items: List[RawNewsItem] = await self._client.fetch(url)
        except Exception as e:
            duration = (time.monotonic() - started) * 1000
            logger.warning(f"Feed failed ({url}): {e}")
            return FeedOutcome(
                url=url,
                status=FeedStatus.FAILED,
                error=str(e) or type(e).__name__,
                duration_ms=duration,
            )
        duration = (time.monotonic() - started) * 1000
        return FeedOutcome(url=url, items=list(items or []), duration_ms=duration)

    async def close(self) -> None:
        await self._client.close()
