"""
Tests for link normalization and raw item mapping.
"""

import pytest

from core.config import SignalConfig
from data_ingestion.feeds import (
    CRYPTO_FEEDS,
    SEC_PRESS_RELEASES_FEED,
    build_feed_urls,
    google_news_url,
)
from data_ingestion.links import link_hostname, normalize_link
from data_ingestion.types import FeedBatch, FeedOutcome, FeedStatus, RawNewsItem, strip_html


# =============================================================
# LINKS
# =============================================================

class TestNormalizeLink:
    """Test canonical link derivation."""

    def test_strips_utm_and_fragment(self):
        url = "https://www.coindesk.com/a?utm_source=x&id=1&UTM_Medium=y#top"
        assert normalize_link(url) == "https://www.coindesk.com/a?id=1"

    def test_only_utm_params(self):
        assert normalize_link("https://x.com/a?utm_source=rss") == "https://x.com/a"

    def test_keeps_other_params_in_order(self):
        url = "https://x.com/a?b=2&a=1&utm_campaign=z&c=%20"
        assert normalize_link(url) == "https://x.com/a?b=2&a=1&c=%20"

    def test_idempotent(self):
        url = "https://x.com/path/?q=btc&utm_term=t#frag"
        once = normalize_link(url)
        assert normalize_link(once) == once

    @pytest.mark.parametrize("url", [
        "not a url",
        "/relative/path?utm_source=x",
        "coindesk.com",
    ])
    def test_malformed_passes_through(self, url):
        assert normalize_link(url) == url

    def test_empty(self):
        assert normalize_link("") == ""
        assert normalize_link(None) == ""


class TestLinkHostname:

    def test_strips_www(self):
        assert link_hostname("https://www.example.com/a") == "example.com"

    def test_keeps_subdomain(self):
        assert link_hostname("https://news.example.com/a") == "news.example.com"

    def test_invalid(self):
        assert link_hostname("not a url") is None


# =============================================================
# FEED LIST
# =============================================================

class TestBuildFeedUrls:

    def test_default_feeds(self):
        urls = build_feed_urls(SignalConfig())

        assert urls[:len(CRYPTO_FEEDS)] == CRYPTO_FEEDS
        assert SEC_PRESS_RELEASES_FEED not in urls
        assert len(urls) == len(CRYPTO_FEEDS) + 2

    def test_sec_and_extra(self):
        config = SignalConfig(
            include_sec=True,
            extra_feed_urls=("https://extra.example/rss", CRYPTO_FEEDS[0]),
        )

        urls = build_feed_urls(config)

        assert SEC_PRESS_RELEASES_FEED in urls
        assert urls[-1] == "https://extra.example/rss"
        assert urls.count(CRYPTO_FEEDS[0]) == 1

    def test_google_news_query_encoded(self):
        url = google_news_url("bitcoin OR ether")

        assert url.startswith("https://news.google.com/rss/search?q=bitcoin%20OR%20ether")
        assert url.endswith("&hl=en-US&gl=US&ceid=US:en")


# =============================================================
# RAW ITEMS
# =============================================================

class TestRawNewsItem:

    def test_from_feed_entry_prefers_published(self):
        item = RawNewsItem.from_feed_entry({
            "title": "Bitcoin rally",
            "link": "https://x.com/a",
            "published": "Mon, 01 Jan 2024 05:00:00 GMT",
            "updated": "2024-01-01T04:00:00Z",
            "summary": "snippet",
            "author": "Jane Doe",
            "source": {"title": "Reuters", "href": "https://www.reuters.com"},
        }, feed_url="https://feed.example/rss")

        assert item.pub_date == "Mon, 01 Jan 2024 05:00:00 GMT"
        assert item.snippet == "snippet"
        assert item.creator == "Jane Doe"
        assert item.source["title"] == "Reuters"
        assert item.feed_url == "https://feed.example/rss"

    def test_from_feed_entry_fallbacks(self):
        item = RawNewsItem.from_feed_entry({
            "updated": "2024-01-01T04:00:00Z",
            "content": [{"value": "<p>Price <b>surges</b></p>"}],
        })

        assert item.title == ""
        assert item.pub_date == "2024-01-01T04:00:00Z"
        assert item.snippet == "Price surges"
        assert item.source is None

    def test_strip_html(self):
        assert strip_html("<p>A &amp; B</p>\n<p>C</p>") == "A & B C"
        assert strip_html("") == ""


class TestFeedBatch:

    def test_iter_items_skips_failed_feeds(self):
        a = RawNewsItem(title="a")
        b = RawNewsItem(title="b")
        batch = FeedBatch(outcomes=[
            FeedOutcome(url="one", items=[a]),
            FeedOutcome(url="two", status=FeedStatus.FAILED, error="HTTP 500"),
            FeedOutcome(url="three", items=[b]),
        ])

        assert [item.title for item in batch.iter_items()] == ["a", "b"]
        assert batch.summary() == {"feeds": 3, "succeeded": 2, "failed": 1, "items": 2}
        assert batch.failed[0].to_dict()["error"] == "HTTP 500"
