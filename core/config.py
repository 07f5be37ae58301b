"""
Core Module - Configuration.

============================================================
RESPONSIBILITY
============================================================
Single configuration object for the signal service.

- Feature flags (SEC feed, transformers, CryptoPanic token)
- Model candidate lists per track, env override first
- Cache TTLs and the minute offset that defines "today"
- Empirical tunables, named so they are never inlined

============================================================
ENVIRONMENT
============================================================
INCLUDE_SEC=1                 include SEC press releases RSS
CRYPTOPANIC_TOKEN=...         enable the CryptoPanic JSON source
ENABLE_TRANSFORMERS=1         enable the transformer ensemble
FINBERT_MODEL_ID / XLMR_MODEL_ID   prepend a model id to a track
SIGNAL_CACHE_TTL_MS           response cache TTL (0 disables)
TIMEZONE_OFFSET_MINUTES       minutes east of UTC for "today"
                              (TZ_OFFSET_MINUTES accepted too)
EXTRA_FEED_URLS               comma-separated extra RSS feeds
FEED_TIMEOUT_SECONDS          per-feed HTTP timeout
SENTIMENT_CACHE_MAX_ENTRIES   sentiment cache bound
LOG_LEVEL, SIGNAL_API_HOST, SIGNAL_API_PORT

============================================================
"""

import math
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


DEFAULT_FINBERT_MODELS: Tuple[str, ...] = (
    "ProsusAI/finbert",
    "yiyanghkust/finbert-tone",
    "distilbert-base-uncased-finetuned-sst-2-english",
)

DEFAULT_XLMR_MODELS: Tuple[str, ...] = (
    "cardiffnlp/twitter-xlm-roberta-base-sentiment",
    "nlptown/bert-base-multilingual-uncased-sentiment",
)

SENTIMENT_CACHE_TTL_SECONDS = 6 * 60 * 60
DEFAULT_RESPONSE_CACHE_TTL_MS = 45_000


# ============================================================
# TUNABLES
# ============================================================

@dataclass(frozen=True)
class SignalTunables:
    """Empirical constants of the scoring and aggregation math."""

    decay_floor: float = 0.7
    """Weight retained by the oldest item still inside the window."""

    magnitude_min: float = 0.5
    magnitude_max: float = 2.0
    """Clamp applied to |score| before it is added to a class total."""

    recommendation_hysteresis: float = 1.05
    """One side must exceed the other by this factor to leave NEUTRAL."""

    model_min_confidence: float = 0.4
    model_min_margin: float = 0.05
    model_magnitude_scale: float = 5.0
    model_magnitude_floor: float = 0.5


# ============================================================
# SERVICE CONFIGURATION
# ============================================================

@dataclass(frozen=True)
class SignalConfig:
    """Configuration for the sentiment signal service."""

    include_sec: bool = False
    cryptopanic_token: Optional[str] = None
    enable_transformers: bool = False

    finbert_model_candidates: Tuple[str, ...] = DEFAULT_FINBERT_MODELS
    xlmr_model_candidates: Tuple[str, ...] = DEFAULT_XLMR_MODELS

    response_cache_ttl_ms: int = DEFAULT_RESPONSE_CACHE_TTL_MS
    sentiment_cache_ttl_seconds: int = SENTIMENT_CACHE_TTL_SECONDS
    sentiment_cache_max_entries: int = 10_000

    timezone_offset_minutes: int = 0
    """Minutes east of UTC; local midnight at this offset starts the window."""

    extra_feed_urls: Tuple[str, ...] = ()
    feed_timeout_seconds: float = 10.0

    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    tunables: SignalTunables = field(default_factory=SignalTunables)

    @classmethod
    def from_env(cls) -> "SignalConfig":
        """Load configuration from environment variables."""
        offset_raw = os.getenv("TIMEZONE_OFFSET_MINUTES") or os.getenv(
            "TZ_OFFSET_MINUTES", "0"
        )
        return cls(
            include_sec=_env_flag("INCLUDE_SEC"),
            cryptopanic_token=os.getenv("CRYPTOPANIC_TOKEN") or None,
            enable_transformers=_env_flag("ENABLE_TRANSFORMERS"),
            finbert_model_candidates=_candidates(
                os.getenv("FINBERT_MODEL_ID"), DEFAULT_FINBERT_MODELS
            ),
            xlmr_model_candidates=_candidates(
                os.getenv("XLMR_MODEL_ID"), DEFAULT_XLMR_MODELS
            ),
            response_cache_ttl_ms=max(
                0,
                _env_int("SIGNAL_CACHE_TTL_MS", DEFAULT_RESPONSE_CACHE_TTL_MS),
            ),
            sentiment_cache_max_entries=_env_int("SENTIMENT_CACHE_MAX_ENTRIES", 10_000),
            timezone_offset_minutes=parse_offset_minutes(offset_raw),
            extra_feed_urls=tuple(
                url.strip()
                for url in os.getenv("EXTRA_FEED_URLS", "").split(",")
                if url.strip()
            ),
            feed_timeout_seconds=_env_float("FEED_TIMEOUT_SECONDS", 10.0),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            api_host=os.getenv("SIGNAL_API_HOST", "0.0.0.0"),
            api_port=_env_int("SIGNAL_API_PORT", _env_int("PORT", 8000)),
        )

    @property
    def response_cache_ttl_seconds(self) -> float:
        return self.response_cache_ttl_ms / 1000.0

    def validate(self) -> List[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.feed_timeout_seconds <= 0:
            errors.append("feed_timeout_seconds must be positive")

        if self.sentiment_cache_max_entries < 1:
            errors.append("sentiment_cache_max_entries must be at least 1")

        if abs(self.timezone_offset_minutes) > 14 * 60:
            errors.append("timezone_offset_minutes must be within +/-840")

        if self.enable_transformers and not (
            self.finbert_model_candidates or self.xlmr_model_candidates
        ):
            errors.append("enable_transformers requires at least one model candidate")

        t = self.tunables
        if not 0.0 <= t.decay_floor <= 1.0:
            errors.append("tunables.decay_floor must be within [0, 1]")
        if t.magnitude_min > t.magnitude_max:
            errors.append("tunables.magnitude_min must not exceed magnitude_max")
        if t.recommendation_hysteresis < 1.0:
            errors.append("tunables.recommendation_hysteresis must be >= 1.0")

        return errors


# ============================================================
# HELPERS
# ============================================================

def parse_offset_minutes(value: Optional[str]) -> int:
    """Parse a minute offset; anything non-finite or unparsable means 0."""
    if value is None:
        return 0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(parsed):
        return 0
    return int(parsed)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def _candidates(override: Optional[str], defaults: Tuple[str, ...]) -> Tuple[str, ...]:
    ordered = [override.strip()] if override and override.strip() else []
    ordered.extend(model for model in defaults if model not in ordered)
    return tuple(ordered)
