import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from phoenixapi.config import settings
from phoenixapi.core.exceptions import UpstreamError
from phoenixapi.providers.news.google_news import GoogleNewsClient, parse_rss
from phoenixapi.schemas.community import PostCreate
from phoenixapi.schemas.market import Article
from phoenixapi.services.community_service import CommunityService
from phoenixapi.services.news_service import NewsService, merge_articles

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel>
  <item>
    <title>Stocks rally on rate hopes</title>
    <link>https://news.example.com/rally</link>
    <pubDate>Mon, 15 Jan 2024 14:30:00 GMT</pubDate>
    <source url="https://wire.example.com">Example Wire</source>
  </item>
  <item>
    <title></title>
    <link>https://news.example.com/untitled</link>
  </item>
  <item>
    <title>No date given</title>
    <link>https://news.example.com/undated</link>
  </item>
</channel></rss>
"""

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def _article(url, hours_ago, symbol=None):
    return Article(
        title=url,
        url=url,
        published_at=NOW - timedelta(hours=hours_ago),
        symbol=symbol,
    )


class TestParseRss:
    def test_parses_items_and_skips_incomplete(self):
        articles = parse_rss(RSS, symbol="AAPL")

        assert [a.url for a in articles] == [
            "https://news.example.com/rally",
            "https://news.example.com/undated",
        ]
        first = articles[0]
        assert first.source == "Example Wire"
        assert first.symbol == "AAPL"
        assert first.published_at == datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)
        assert articles[1].source == "Google News"

    def test_malformed_xml_raises_upstream_error(self):
        with pytest.raises(UpstreamError):
            parse_rss("<rss><channel><item>")


class TestMergeArticles:
    def test_dedupes_by_url_and_sorts_newest_first(self):
        merged = merge_articles(
            [
                _article("a", 5),
                _article("b", 1),
                _article("a", 0, symbol="AAPL"),
                _article("c", 3),
            ],
            limit=10,
        )

        assert [a.url for a in merged] == ["b", "c", "a"]
        # First occurrence wins
        assert merged[-1].symbol is None

    def test_caps_result(self):
        merged = merge_articles([_article(str(i), i) for i in range(10)], limit=3)

        assert [a.url for a in merged] == ["0", "1", "2"]


def test_symbol_feed_url_quotes_query():
    client = GoogleNewsClient(settings)

    assert "BRK.B+stock" in client.symbol_feed_url("BRK.B")


class FakeNewsClient:
    def __init__(self, general=None, by_symbol=None, general_error=False, failing=()):
        self.general = general or []
        self.by_symbol = by_symbol or {}
        self.general_error = general_error
        self.failing = set(failing)

    async def general_headlines(self):
        if self.general_error:
            raise UpstreamError("News feed unavailable")
        return self.general

    async def symbol_headlines(self, symbol):
        if symbol in self.failing:
            raise UpstreamError("News feed timeout")
        return self.by_symbol.get(symbol, [])


@pytest.fixture
def discussed(db, alice):
    community = CommunityService(db)
    for symbol in ("TSLA", "TSLA", "AAPL"):
        community.create_post(
            alice.id, PostCreate(symbol=symbol, title=f"{symbol} thoughts", content="...")
        )


def test_fetch_headlines_merges_general_and_symbol_news(db, discussed):
    client = FakeNewsClient(
        general=[_article("g1", 2), _article("shared", 4)],
        by_symbol={
            "TSLA": [_article("t1", 1, "TSLA"), _article("shared", 0, "TSLA")],
            "AAPL": [_article("a1", 3, "AAPL")],
        },
    )

    feed = asyncio.run(NewsService(db, settings, client).fetch_headlines())

    assert [a.url for a in feed.articles] == ["t1", "g1", "a1", "shared"]
    assert feed.count == 4
    assert feed.failed_symbols == []


def test_symbol_failure_is_skipped(db, discussed):
    client = FakeNewsClient(
        general=[_article("g1", 2)],
        by_symbol={"AAPL": [_article("a1", 1, "AAPL")]},
        failing={"TSLA"},
    )

    feed = asyncio.run(NewsService(db, settings, client).fetch_headlines())

    assert [a.url for a in feed.articles] == ["a1", "g1"]
    assert feed.failed_symbols == ["TSLA"]


def test_general_feed_failure_propagates(db, discussed):
    client = FakeNewsClient(general_error=True)

    with pytest.raises(UpstreamError):
        asyncio.run(NewsService(db, settings, client).fetch_headlines())
