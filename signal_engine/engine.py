"""
Signal Engine - Computation Engine.

============================================================
RESPONSIBILITY
============================================================
Produces one sentiment signal per request.

Flow:
1. Compute the "today" window for the configured offset
2. Serve the response cache unless forced
3. Sweep the sentiment cache, fetch all feeds concurrently
4. Per item, in feed order: normalize, dedup, window filter,
   score, weight, accumulate
5. Merge the token-gated CryptoPanic source the same way
6. Sort newest first, build, cache, return

============================================================
DESIGN PRINCIPLES
============================================================
- Request driven; no background scheduler
- A failed feed contributes nothing, never aborts the run
- Items are scored strictly in order so dedup is first-seen-wins
- Caches are injected; one engine per process shares them

============================================================
"""

import logging
from typing import List, Optional, Sequence

from core.clock import ClockProtocol, SystemClock
from core.config import SignalConfig
from data_ingestion.cryptopanic import CryptoPanicClient
from data_ingestion.feeds import RssFeedClient, build_feed_urls
from data_ingestion.ingestion_service import IngestionService, LinkDeduplicator
from data_ingestion.links import normalize_link
from data_ingestion.types import RawNewsItem
from sentiment.cache import TTLCache
from sentiment.scorer import SentimentScorer
from sentiment.transformer import TransformerEnsemble

from .aggregator import AggregateState
from .models import SignalItem, SignalResponse
from .response_cache import ResponseCache
from .weighting import resolve_source, weight_for_source
from .window import TimeWindow, parse_published


logger = logging.getLogger(__name__)

UNTITLED = "(untitled)"


class SignalEngine:
    """
    Orchestrates one signal computation.

    ============================================================
    USAGE
    ============================================================
    ```python
    engine = SignalEngine.from_config(SignalConfig.from_env())
    response = await engine.compute(force=False)
    payload = response.to_dict()
    await engine.close()
    ```
    ============================================================
    """

    def __init__(
        self,
        config: SignalConfig,
        ingestion: IngestionService,
        scorer: SentimentScorer,
        clock: Optional[ClockProtocol] = None,
        cryptopanic: Optional[CryptoPanicClient] = None,
        response_cache: Optional[ResponseCache] = None,
        feed_urls: Optional[Sequence[str]] = None,
    ) -> None:
        self.config = config
        self.ingestion = ingestion
        self.scorer = scorer
        self.clock = clock or SystemClock()
        self.cryptopanic = cryptopanic
        self.response_cache = (
            response_cache
            if response_cache is not None
            else ResponseCache(config.response_cache_ttl_seconds)
        )
        self.feed_urls: List[str] = list(
            feed_urls if feed_urls is not None else build_feed_urls(config)
        )

    @classmethod
    def from_config(
        cls,
        config: SignalConfig,
        clock: Optional[ClockProtocol] = None,
    ) -> "SignalEngine":
        """Wire the default collaborators for a configuration."""
        ensemble = (
            TransformerEnsemble.from_config(config)
            if config.enable_transformers
            else None
        )
        scorer = SentimentScorer(
            ensemble=ensemble,
            cache=TTLCache(
                ttl_seconds=config.sentiment_cache_ttl_seconds,
                max_entries=config.sentiment_cache_max_entries,
            ),
        )
        cryptopanic = (
            CryptoPanicClient(config.cryptopanic_token, timeout=config.feed_timeout_seconds)
            if config.cryptopanic_token
            else None
        )
        return cls(
            config=config,
            ingestion=IngestionService(RssFeedClient(timeout=config.feed_timeout_seconds)),
            scorer=scorer,
            clock=clock,
            cryptopanic=cryptopanic,
        )

    # ============================================================
    # COMPUTATION
    # ============================================================

    async def compute(self, force: bool = False) -> SignalResponse:
        """Compute (or serve cached) signal for the current window."""
        now = self.clock.now()
        ts = now.timestamp()
        window = TimeWindow.for_now(
            now,
            self.config.timezone_offset_minutes,
            decay_floor=self.config.tunables.decay_floor,
        )

        cached = self.response_cache.get(ts, force=force)
        if cached is not None:
            return cached.with_window(window.minutes, window.offset_minutes)

        expired = self.scorer.sweep(ts)
        if expired:
            logger.debug(f"Swept {expired} expired sentiment entries")

        batch = await self.ingestion.fetch_all(self.feed_urls)

        dedup = LinkDeduplicator()
        state = AggregateState(tunables=self.config.tunables)
        items: List[SignalItem] = []

        for raw in batch.iter_items():
            item = await self._process(raw, window, dedup, state, ts)
            if item is not None:
                items.append(item)

        if self.cryptopanic is not None and self.cryptopanic.enabled:
            items.extend(await self._merge_cryptopanic(window, dedup, state, ts))

        response = state.build_response(
            window_minutes=window.minutes,
            timezone_offset_minutes=window.offset_minutes,
            generated_at=self.clock.now(),
            items=items,
            feed_outcomes=batch.outcomes,
        )
        self.response_cache.store(response, ts)

        logger.info(
            f"Signal computed: {response.recommendation.value} "
            f"long={response.long_pct}% short={response.short_pct}% "
            f"items={len(response.items)} window={window.minutes}m"
        )
        return response

    async def _merge_cryptopanic(
        self,
        window: TimeWindow,
        dedup: LinkDeduplicator,
        state: AggregateState,
        ts: float,
    ) -> List[SignalItem]:
        try:
            posts = await self.cryptopanic.fetch_posts()
        except Exception as e:
            logger.warning(f"CryptoPanic fetch failed, continuing without it: {e}")
            return []

        merged: List[SignalItem] = []
        for raw in posts:
            item = await self._process(raw, window, dedup, state, ts)
            if item is not None:
                merged.append(item)
        return merged

    async def _process(
        self,
        raw: RawNewsItem,
        window: TimeWindow,
        dedup: LinkDeduplicator,
        state: AggregateState,
        ts: float,
    ) -> Optional[SignalItem]:
        """Score and accumulate one raw item; None if it is skipped."""
        link = normalize_link(raw.link)
        if not link or dedup.is_seen(link):
            return None

        published = parse_published(raw.pub_date)
        if published is None or not window.contains(published):
            return None

        sentiment = await self.scorer.score(link, raw.title, raw.snippet, ts)
        source = resolve_source(raw.creator, raw.source, link)
        weight_factor = weight_for_source(source) * window.decay(published)

        # Only accepted items claim the link
        dedup.mark_seen(link)
        display_weight = state.accumulate(sentiment.label, sentiment.score, weight_factor)

        return SignalItem(
            title=raw.title or UNTITLED,
            link=link,
            pub_date=published,
            source=source,
            sentiment=sentiment.label,
            score=sentiment.score,
            weight=display_weight,
        )

    # ============================================================
    # LIFECYCLE / STATUS
    # ============================================================

    def get_status(self) -> dict:
        return {
            "feeds": len(self.feed_urls),
            "cryptopanic_enabled": bool(self.cryptopanic and self.cryptopanic.enabled),
            "response_cache_ttl_seconds": self.response_cache.ttl_seconds,
            "timezone_offset_minutes": self.config.timezone_offset_minutes,
            "sentiment": self.scorer.get_stats(),
            "last_batch": (
                self.ingestion.last_batch.summary()
                if self.ingestion.last_batch is not None
                else None
            ),
        }

    async def close(self) -> None:
        await self.ingestion.close()
        if self.cryptopanic is not None:
            await self.cryptopanic.close()
