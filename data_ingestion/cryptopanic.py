"""
CryptoPanic News Source - Token-gated secondary source.

CryptoPanic provides:
- Aggregated crypto news from multiple publishers
- "hot" filter for the most discussed posts

Without a token the source is skipped entirely. The client raises on any
fault; the signal engine swallows the error and carries on without it.
"""

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp

from core.exceptions import FeedFetchError, FeedParseError

from .types import RawNewsItem


logger = logging.getLogger(__name__)


class CryptoPanicClient:
    """
    CryptoPanic posts API client.

    API endpoint: /posts/
    Params:
    - auth_token: API token (required here)
    - kind: news
    - filter: hot
    """

    BASE_URL = "https://cryptopanic.com/api/v1"
    DEFAULT_TIMEOUT = 10
    SOURCE_NAME = "cryptopanic"

    def __init__(
        self,
        api_token: Optional[str],
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.api_token = api_token
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._session = session
        self._owns_session = session is None

    @property
    def enabled(self) -> bool:
        return bool(self.api_token)

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def fetch_posts(self) -> List[RawNewsItem]:
        """Fetch hot news posts; empty when no token is configured."""
        if not self.enabled:
            return []

        session = await self._get_session()
        url = f"{self.BASE_URL}/posts/"
        params = {
            "auth_token": self.api_token,
            "kind": "news",
            "filter": "hot",
        }

        try:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    raise FeedFetchError(
                        f"CryptoPanic API error: {response.status}",
                        source=self.SOURCE_NAME,
                        status_code=response.status,
                    )
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise FeedParseError(
                        "CryptoPanic returned invalid JSON",
                        source=self.SOURCE_NAME,
                        cause=e,
                    )
        except aiohttp.ClientError as e:
            raise FeedFetchError(f"Network error: {e}", source=self.SOURCE_NAME, cause=e)
        except asyncio.TimeoutError as e:
            raise FeedFetchError("Request timeout", source=self.SOURCE_NAME, cause=e)

        results = data.get("results") if isinstance(data, dict) else None
        return [self._normalize(post) for post in results or [] if isinstance(post, dict)]

    @staticmethod
    def _normalize(post: dict[str, Any]) -> RawNewsItem:
        """
        Normalize a CryptoPanic post to RawNewsItem.

        The publishing domain doubles as the source name and as the link
        of last resort.
        """
        domain = post.get("domain") or ""
        return RawNewsItem(
            title=post.get("title") or "",
            link=post.get("url") or domain,
            pub_date=post.get("published_at"),
            snippet=post.get("description") or "",
            source=domain or "CryptoPanic",
            feed_url=CryptoPanicClient.BASE_URL,
        )

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
