"""
Data Ingestion - RSS Feed Client.

============================================================
RESPONSIBILITY
============================================================
Knows which feeds make up the signal and how to turn one feed URL
into a list of RawNewsItem.

- Native crypto RSS feeds (no API keys)
- Localized Google News search queries (English, Korean)
- Optional SEC press releases and operator-supplied extra feeds

============================================================
DESIGN PRINCIPLES
============================================================
- One attempt per feed per request, no retries
- Raise FeedFetchError / FeedParseError on fault; the ingestion
  service decides what a failure means
- aiohttp for transport, feedparser for RSS/Atom parsing

============================================================
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import quote

import aiohttp
import feedparser

from core.config import SignalConfig
from core.exceptions import FeedFetchError, FeedParseError

from .types import RawNewsItem


logger = logging.getLogger(__name__)


GOOGLE_NEWS_BASE = "https://news.google.com/rss/search?"
GOOGLE_PARAMS = "&hl=en-US&gl=US&ceid=US:en"

SEARCH_QUERIES: List[str] = [
    "cryptocurrency OR crypto OR bitcoin OR ethereum OR altcoin",
    "비트코인 OR 이더리움 OR 코인 OR 암호화폐",
]

CRYPTO_FEEDS: List[str] = [
    "https://www.coindesk.com/arc/outboundfeeds/rss/",
    "https://cointelegraph.com/rss",
    "https://news.bitcoin.com/feed",
    "https://blockworks.co/feed",
    "https://crypto.news/feed/",
    "https://cryptoslate.com/feed/",
    "https://bitcoinmagazine.com/.rss/full/",
    "https://www.theblock.co/rss.xml",
    "https://decrypt.co/feed",
]

SEC_PRESS_RELEASES_FEED = "https://www.sec.gov/news/pressreleases.rss"

USER_AGENT = "Mozilla/5.0 (compatible; sentiment-signal/1.0)"


def google_news_url(query: str) -> str:
    return f"{GOOGLE_NEWS_BASE}q={quote(query, safe='')}{GOOGLE_PARAMS}"


def build_feed_urls(config: SignalConfig) -> List[str]:
    """All feed URLs for one computation, in dedup priority order."""
    urls = list(CRYPTO_FEEDS)
    urls.extend(google_news_url(query) for query in SEARCH_QUERIES)
    if config.include_sec:
        urls.append(SEC_PRESS_RELEASES_FEED)
    urls.extend(url for url in config.extra_feed_urls if url not in urls)
    return urls


# ============================================================
# CLIENTS
# ============================================================

class BaseFeedClient(ABC):
    """
    Abstract feed fetch/parse client.

    fetch() returns the feed's items in document order, or raises.
    """

    @abstractmethod
    async def fetch(self, url: str) -> List[RawNewsItem]:
        pass

    async def close(self) -> None:
        """Cleanup resources. Override if needed."""
        pass


class RssFeedClient(BaseFeedClient):
    """RSS/Atom client over a shared aiohttp session."""

    DEFAULT_TIMEOUT = 10

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": USER_AGENT},
            )
            self._owns_session = True
        return self._session

    async def fetch(self, url: str) -> List[RawNewsItem]:
        session = await self._get_session()
        try:
            async with session.get(url) as response:
                if response.status != 200:
                    raise FeedFetchError(
                        f"HTTP {response.status}",
                        source=url,
                        status_code=response.status,
                    )
                body = await response.read()
        except aiohttp.ClientError as e:
            raise FeedFetchError(f"Network error: {e}", source=url, cause=e)
        except asyncio.TimeoutError as e:
            raise FeedFetchError("Request timeout", source=url, cause=e)

        parsed = feedparser.parse(body)
        if parsed.bozo and not parsed.entries:
            raise FeedParseError(
                f"Unparsable feed: {parsed.get('bozo_exception')}",
                source=url,
            )
        return [RawNewsItem.from_feed_entry(entry, url) for entry in parsed.entries]

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
