"""
Data Ingestion Package.

This package handles news acquisition and link identity.
No scoring - only data acquisition.

Modules:
- feeds: Feed endpoint list and the default RSS client
- cryptopanic: Token-gated secondary JSON source
- links: Link normalization
- ingestion_service: Concurrent fetch with per-feed outcomes, dedup
"""

from data_ingestion.cryptopanic import CryptoPanicClient
from data_ingestion.feeds import (
    CRYPTO_FEEDS,
    SEARCH_QUERIES,
    SEC_PRESS_RELEASES_FEED,
    BaseFeedClient,
    RssFeedClient,
    build_feed_urls,
    google_news_url,
)
from data_ingestion.ingestion_service import IngestionService, LinkDeduplicator
from data_ingestion.links import link_hostname, normalize_link
from data_ingestion.types import (
    FeedBatch,
    FeedOutcome,
    FeedStatus,
    RawNewsItem,
    strip_html,
)


__all__ = [
    # Service
    "IngestionService",
    "LinkDeduplicator",
    # Clients
    "BaseFeedClient",
    "RssFeedClient",
    "CryptoPanicClient",
    # Feed list
    "CRYPTO_FEEDS",
    "SEARCH_QUERIES",
    "SEC_PRESS_RELEASES_FEED",
    "build_feed_urls",
    "google_news_url",
    # Links
    "normalize_link",
    "link_hostname",
    # Types
    "RawNewsItem",
    "FeedOutcome",
    "FeedBatch",
    "FeedStatus",
    "strip_html",
]
