"""
Sentiment Scoring Layer - Hybrid lexicon + transformer sentiment.

This package provides:
- Lexicon: deterministic keyword scorer
- TransformerEnsemble: optional, lazily loaded, language-routed ML scorer
- combine_sentiments: merge policy for the two results
- TTLCache: bounded TTL memoization used for per-link results
- SentimentScorer: cache-or-compute facade that never raises

Usage:
    from sentiment import SentimentScorer, TransformerEnsemble

    scorer = SentimentScorer(ensemble=TransformerEnsemble.from_config(config))
    result = await scorer.score(link, title, snippet, now=clock.timestamp())

    print(result.label.value, result.score)

Output Schema:
- label: positive | negative | neutral
- score: signed strength (lexicon: keyword difference, model: >= 0.5)
"""

from .cache import CacheEntry, TTLCache
from .combiner import combine_sentiments
from .lexicon import NEGATIVE_WORDS, POSITIVE_WORDS, score_lexicon, tokenize
from .models import (
    BackendState,
    ModelTrack,
    Sentiment,
    SentimentScore,
    label_from_score,
)
from .scorer import SentimentScorer
from .transformer import (
    ModelBackend,
    TransformerEnsemble,
    has_hangul,
    interpret_outputs,
    map_model_label,
)


__all__ = [
    # Models
    "Sentiment",
    "SentimentScore",
    "ModelTrack",
    "BackendState",
    "label_from_score",

    # Lexicon
    "POSITIVE_WORDS",
    "NEGATIVE_WORDS",
    "tokenize",
    "score_lexicon",

    # Transformers
    "TransformerEnsemble",
    "ModelBackend",
    "has_hangul",
    "map_model_label",
    "interpret_outputs",

    # Combination & caching
    "combine_sentiments",
    "CacheEntry",
    "TTLCache",
    "SentimentScorer",
]
