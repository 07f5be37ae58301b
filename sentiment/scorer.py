"""
Sentiment Scorer - Cache-or-compute facade over the scoring pipeline.

For each article:
1. Look up the normalized link in the sentiment cache
2. On miss: lexicon score, then the transformer ensemble when enabled
3. Combine, cache, return

NEVER raises - any model failure degrades to the lexicon result.
"""

import logging
from typing import Any, Optional

from core.config import SENTIMENT_CACHE_TTL_SECONDS

from .cache import TTLCache
from .combiner import combine_sentiments
from .lexicon import score_lexicon
from .models import SentimentScore
from .transformer import TransformerEnsemble


logger = logging.getLogger(__name__)


class SentimentScorer:
    """
    Hybrid lexicon + transformer scorer with per-link memoization.

    Usage:
        scorer = SentimentScorer(ensemble=TransformerEnsemble.from_config(config))
        result = await scorer.score(link, title, snippet, now=clock.timestamp())
    """

    def __init__(
        self,
        ensemble: Optional[TransformerEnsemble] = None,
        cache: Optional[TTLCache[str, SentimentScore]] = None,
    ) -> None:
        self.ensemble = ensemble
        # An empty TTLCache is falsy, so compare against None
        self.cache: TTLCache[str, SentimentScore] = (
            cache
            if cache is not None
            else TTLCache(ttl_seconds=SENTIMENT_CACHE_TTL_SECONDS, max_entries=10_000)
        )
        self._stats = {"scored": 0, "cache_hits": 0, "model_used": 0, "model_fallbacks": 0}

    async def score(
        self,
        link: str,
        title: str,
        snippet: str,
        now: float,
    ) -> SentimentScore:
        """Return the combined sentiment for an article, cached by link."""
        cached = self.cache.get(link, now)
        if cached is not None:
            self._stats["cache_hits"] += 1
            return cached

        result = await self.compute(title, snippet)
        self.cache.set(link, result, now)
        self._stats["scored"] += 1
        return result

    async def compute(self, title: str, snippet: str) -> SentimentScore:
        """Score without touching the cache."""
        lexicon_score = score_lexicon(title, snippet)
        if self.ensemble is None:
            return lexicon_score

        text = f"{title or ''} {snippet or ''}".strip()
        if not text:
            return lexicon_score

        try:
            model_score = await self.ensemble.score(text)
        except Exception as e:
            logger.warning(f"Transformer scoring failed, using lexicon: {e}")
            model_score = None

        if model_score is None:
            self._stats["model_fallbacks"] += 1
        else:
            self._stats["model_used"] += 1
        return combine_sentiments(model_score, lexicon_score)

    def sweep(self, now: float) -> int:
        """Drop expired cache entries."""
        return self.cache.sweep(now)

    def get_stats(self) -> dict[str, Any]:
        return {
            **self._stats,
            "cache": self.cache.get_stats(),
            "transformers": self.ensemble.get_status() if self.ensemble else None,
        }
