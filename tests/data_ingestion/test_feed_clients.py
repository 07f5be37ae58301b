"""
Tests for the RSS client, the CryptoPanic client and the ingestion service.

HTTP is replaced by an in-memory session; nothing touches the network.
"""

from typing import List

import aiohttp
import pytest

from core.exceptions import FeedFetchError, FeedParseError
from data_ingestion.cryptopanic import CryptoPanicClient
from data_ingestion.feeds import BaseFeedClient, RssFeedClient
from data_ingestion.ingestion_service import IngestionService, LinkDeduplicator
from data_ingestion.types import FeedStatus, RawNewsItem


RSS_BODY = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Test feed</title>
    <item>
      <title>Bitcoin ETF approved</title>
      <link>https://www.example.com/etf?utm_source=rss</link>
      <pubDate>Mon, 01 Jan 2024 05:00:00 GMT</pubDate>
      <dc:creator>Jane Doe</dc:creator>
      <description>&lt;p&gt;Price &lt;b&gt;surges&lt;/b&gt;&lt;/p&gt;</description>
    </item>
    <item>
      <title>Exchange hack</title>
      <link>https://www.example.com/hack</link>
      <pubDate>Mon, 01 Jan 2024 04:00:00 GMT</pubDate>
      <source url="https://www.reuters.com">Reuters</source>
    </item>
  </channel>
</rss>
"""


class FakeResponse:
    def __init__(self, status=200, body=b"", payload=None):
        self.status = status
        self._body = body
        self._payload = payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def read(self):
        return self._body

    async def json(self, content_type=None):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    closed = False

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None):
        self.calls.append((url, params))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


# =============================================================
# RSS CLIENT
# =============================================================

class TestRssFeedClient:
    """Test feed fetch/parse."""

    @pytest.mark.asyncio
    async def test_parses_items_in_document_order(self):
        session = FakeSession(FakeResponse(body=RSS_BODY))
        client = RssFeedClient(session=session)

        items = await client.fetch("https://feed.example/rss")

        assert [i.title for i in items] == ["Bitcoin ETF approved", "Exchange hack"]
        first, second = items
        assert first.link == "https://www.example.com/etf?utm_source=rss"
        assert first.pub_date == "Mon, 01 Jan 2024 05:00:00 GMT"
        assert first.creator == "Jane Doe"
        assert first.snippet == "Price surges"
        assert first.feed_url == "https://feed.example/rss"
        assert second.source["title"] == "Reuters"

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        client = RssFeedClient(session=FakeSession(FakeResponse(status=503)))

        with pytest.raises(FeedFetchError) as exc_info:
            await client.fetch("https://feed.example/rss")

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        client = RssFeedClient(session=FakeSession(error=aiohttp.ClientError("refused")))

        with pytest.raises(FeedFetchError):
            await client.fetch("https://feed.example/rss")

    @pytest.mark.asyncio
    async def test_unparsable_body_raises(self):
        client = RssFeedClient(session=FakeSession(FakeResponse(body=b"<<< not a feed")))

        with pytest.raises(FeedParseError):
            await client.fetch("https://feed.example/rss")

    @pytest.mark.asyncio
    async def test_injected_session_not_closed(self):
        session = FakeSession(FakeResponse(body=RSS_BODY))
        client = RssFeedClient(session=session)

        await client.close()

        assert session.closed is False


# =============================================================
# CRYPTOPANIC
# =============================================================

class TestCryptoPanicClient:
    """Test token gating and post normalization."""

    @pytest.mark.asyncio
    async def test_no_token_skips(self):
        session = FakeSession(FakeResponse(payload={"results": []}))
        client = CryptoPanicClient(api_token=None, session=session)

        assert client.enabled is False
        assert await client.fetch_posts() == []
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_fetches_hot_news(self):
        payload = {"results": [
            {
                "title": "SEC approves spot ETF",
                "url": "https://www.coindesk.com/etf",
                "published_at": "2024-01-01T05:00:00Z",
                "domain": "coindesk.com",
                "description": "Big day",
            },
            {
                "title": "No url post",
                "published_at": "2024-01-01T04:00:00Z",
                "domain": "theblock.co",
            },
            "not-a-post",
        ]}
        session = FakeSession(FakeResponse(payload=payload))
        client = CryptoPanicClient(api_token="token", session=session)

        items = await client.fetch_posts()

        url, params = session.calls[0]
        assert url == "https://cryptopanic.com/api/v1/posts/"
        assert params == {"auth_token": "token", "kind": "news", "filter": "hot"}
        assert len(items) == 2
        assert items[0].link == "https://www.coindesk.com/etf"
        assert items[0].source == "coindesk.com"
        assert items[0].snippet == "Big day"
        assert items[1].link == "theblock.co"

    @pytest.mark.asyncio
    async def test_missing_domain_uses_cryptopanic(self):
        session = FakeSession(FakeResponse(payload={"results": [{"title": "x", "url": "https://a.io/x"}]}))
        client = CryptoPanicClient(api_token="token", session=session)

        items = await client.fetch_posts()

        assert items[0].source == "CryptoPanic"

    @pytest.mark.asyncio
    async def test_http_error(self):
        client = CryptoPanicClient(api_token="token", session=FakeSession(FakeResponse(status=401)))

        with pytest.raises(FeedFetchError):
            await client.fetch_posts()

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        response = FakeResponse(payload=ValueError("bad json"))
        client = CryptoPanicClient(api_token="token", session=FakeSession(response))

        with pytest.raises(FeedParseError):
            await client.fetch_posts()


# =============================================================
# INGESTION SERVICE
# =============================================================

class FakeFeedClient(BaseFeedClient):
    def __init__(self, feeds):
        self.feeds = feeds
        self.closed = False

    async def fetch(self, url: str) -> List[RawNewsItem]:
        result = self.feeds[url]
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


class TestIngestionService:
    """Test concurrent fetch with failure isolation."""

    @pytest.mark.asyncio
    async def test_failed_feed_contributes_nothing(self):
        client = FakeFeedClient({
            "a": [RawNewsItem(title="a1"), RawNewsItem(title="a2")],
            "b": FeedFetchError("HTTP 500", source="b", status_code=500),
            "c": [RawNewsItem(title="c1")],
        })
        service = IngestionService(client)

        batch = await service.fetch_all(["a", "b", "c"])

        assert [i.title for i in batch.iter_items()] == ["a1", "a2", "c1"]
        assert [o.status for o in batch.outcomes] == [
            FeedStatus.SUCCESS, FeedStatus.FAILED, FeedStatus.SUCCESS
        ]
        assert batch.outcomes[1].error == "HTTP 500"
        assert service.last_batch is batch

    @pytest.mark.asyncio
    async def test_all_feeds_failing(self):
        client = FakeFeedClient({"a": RuntimeError("boom"), "b": TimeoutError()})
        service = IngestionService(client)

        batch = await service.fetch_all(["a", "b"])

        assert list(batch.iter_items()) == []
        assert batch.outcomes[1].error == "TimeoutError"

    @pytest.mark.asyncio
    async def test_close_delegates(self):
        client = FakeFeedClient({})
        await IngestionService(client).close()
        assert client.closed is True


class TestLinkDeduplicator:

    def test_mark_and_check(self):
        dedup = LinkDeduplicator()

        assert not dedup.is_seen("https://x.com/a")
        dedup.mark_seen("https://x.com/a")
        dedup.mark_seen("https://x.com/a")

        assert dedup.is_seen("https://x.com/a")
        assert len(dedup) == 1
