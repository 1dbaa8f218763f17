"""Tests for the provider adapters and newsfeed.source_base."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx

from newsfeed.source_base import BaseSource, parse_date
from sources.google_news import GoogleNewsSource, strip_html
from sources.newsapi import NewsAPISource
from sources.newsdata import NewsDataSource
from sources.worldnews import WorldNewsSource


def _json_client(payload) -> MagicMock:
    client = MagicMock()
    client.fetch_json = AsyncMock(return_value=payload)
    return client


GOOGLE_NEWS_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Top stories - Google News</title>
    <item>
      <title>Budget passes in Lok Sabha - The Hindu</title>
      <link>https://news.google.com/rss/articles/abc</link>
      <pubDate>Fri, 01 Mar 2024 08:00:00 GMT</pubDate>
      <description><![CDATA[<a href="https://news.google.com/rss/articles/abc">Budget passes in Lok Sabha</a>&nbsp;&nbsp;<font color="#6f6f6f">The Hindu</font>]]></description>
      <source url="https://www.thehindu.com">The Hindu</source>
      <media:thumbnail url="https://img.example.com/budget.jpg" />
    </item>
    <item>
      <title>Monsoon arrives in Kerala</title>
      <link>https://news.google.com/rss/articles/def</link>
      <description></description>
    </item>
    <item>
      <title></title>
      <link>https://news.google.com/rss/articles/ghi</link>
    </item>
  </channel>
</rss>
"""


class TestParseDate:
    def test_iso_with_z(self) -> None:
        assert parse_date("2024-03-01T08:00:00Z") == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_iso_with_offset_converted_to_utc(self) -> None:
        assert parse_date("2024-03-01T13:30:00+05:30") == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_naive_space_separated(self) -> None:
        assert parse_date("2024-03-01 08:00:00") == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_rfc822(self) -> None:
        assert parse_date("Fri, 01 Mar 2024 08:00:00 GMT") == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)

    def test_garbage_returns_none(self) -> None:
        assert parse_date("yesterday-ish") is None

    def test_empty_returns_none(self) -> None:
        assert parse_date("") is None
        assert parse_date(None) is None


class TestBaseSource:
    def test_fetch_turns_errors_into_empty_list(self) -> None:
        class Broken(BaseSource):
            async def fetch_articles(self, bypass_cache=False):
                raise httpx.ConnectError("connection refused")

        assert asyncio.run(Broken(MagicMock()).fetch()) == []

    def test_fetch_times_out_to_empty_list(self) -> None:
        class Slow(BaseSource):
            async def fetch_articles(self, bypass_cache=False):
                await asyncio.sleep(5)
                return ["never"]

        assert asyncio.run(Slow(MagicMock(), timeout=0.01).fetch()) == []

    def test_published_or_now(self) -> None:
        source = NewsAPISource(MagicMock(), api_key=None)
        before = datetime.now(timezone.utc)

        assert source.published_or_now(None) >= before
        assert source.published_or_now("not a date") is None
        assert source.published_or_now("2024-03-01T08:00:00Z") == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)


class TestNewsAPISource:
    def test_maps_articles(self) -> None:
        client = _json_client({"articles": [
            {
                "title": "Budget passes in Lok Sabha - The Hindu",
                "description": "The Union Budget was passed.",
                "url": "https://thehindu.com/budget",
                "urlToImage": "https://img.example.com/1.jpg",
                "publishedAt": "2024-03-01T08:00:00Z",
                "source": {"id": None, "name": "The Hindu"},
            },
            {
                "title": "[Removed]",
                "description": None,
                "url": "https://removed.com",
                "urlToImage": None,
                "publishedAt": "2024-03-01T08:00:00Z",
                "source": {"name": "[Removed]"},
            },
        ]})
        articles = asyncio.run(NewsAPISource(client, api_key="key").fetch_articles())

        assert len(articles) == 1
        article = articles[0]
        assert article.source_name == "The Hindu"
        assert article.image_url == "https://img.example.com/1.jpg"
        assert article.published_at == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
        params = client.fetch_json.call_args.kwargs["params"]
        assert params["country"] == "in"
        assert params["apiKey"] == "key"

    def test_no_key_skips_request(self) -> None:
        client = _json_client({})
        assert asyncio.run(NewsAPISource(client, api_key=None).fetch()) == []
        client.fetch_json.assert_not_called()

    def test_request_failure_gives_empty_list(self) -> None:
        client = MagicMock()
        client.fetch_json = AsyncMock(side_effect=httpx.ConnectError("boom"))
        assert asyncio.run(NewsAPISource(client, api_key="key").fetch()) == []

    def test_fetch_forwards_bypass_cache(self) -> None:
        client = _json_client({"articles": []})
        source = NewsAPISource(client, api_key="key")

        asyncio.run(source.fetch())
        asyncio.run(source.fetch(bypass_cache=True))

        assert [c.kwargs["bypass_cache"] for c in client.fetch_json.call_args_list] == [False, True]


class TestNewsDataSource:
    def test_maps_results(self) -> None:
        client = _json_client({"results": [
            {
                "title": "Monsoon arrives in Kerala",
                "description": None,
                "link": "https://ndtv.com/monsoon",
                "image_url": None,
                "pubDate": "2024-06-01 05:30:00",
                "source_id": "ndtv",
                "category": ["top", "environment"],
            },
            {"title": "", "link": "https://ndtv.com/empty"},
        ]})
        articles = asyncio.run(NewsDataSource(client, api_key="key").fetch_articles())

        assert len(articles) == 1
        article = articles[0]
        assert article.description == ""
        assert article.image_url is None
        assert article.source_name == "ndtv"
        assert article.category == "top"
        assert article.published_at == datetime(2024, 6, 1, 5, 30, tzinfo=timezone.utc)

    def test_missing_date_defaults_to_fetch_time(self) -> None:
        client = _json_client({"results": [{"title": "Monsoon arrives", "link": "https://ndtv.com/m"}]})
        before = datetime.now(timezone.utc)
        articles = asyncio.run(NewsDataSource(client, api_key="key").fetch_articles())

        assert articles[0].published_at >= before
        assert articles[0].category is None

    def test_null_results(self) -> None:
        client = _json_client({"status": "success", "results": None})
        assert asyncio.run(NewsDataSource(client, api_key="key").fetch_articles()) == []


class TestWorldNewsSource:
    def test_maps_news(self) -> None:
        client = _json_client({"news": [
            {
                "title": "ISRO launches weather satellite",
                "text": "x" * 1000,
                "url": "https://example.in/isro",
                "image": "https://img.example.com/isro.jpg",
                "publish_date": "2024-02-17 12:05:00",
                "source_country": "in",
            },
        ]})
        articles = asyncio.run(WorldNewsSource(client, api_key="key").fetch_articles())

        assert len(articles) == 1
        assert len(articles[0].description) == 300
        assert articles[0].source_name == "WorldNews"
        params = client.fetch_json.call_args.kwargs["params"]
        assert params["source-countries"] == "in"
        assert params["api-key"] == "key"


class TestGoogleNewsSource:
    def _client(self, body: str) -> MagicMock:
        client = MagicMock()
        client.fetch = AsyncMock(return_value=body)
        return client

    def test_parses_rss_items(self) -> None:
        articles = asyncio.run(GoogleNewsSource(self._client(GOOGLE_NEWS_RSS)).fetch_articles())

        assert len(articles) == 2
        first = articles[0]
        assert first.title == "Budget passes in Lok Sabha - The Hindu"
        assert first.url == "https://www.thehindu.com"
        assert first.source_name == "The Hindu"
        assert first.image_url == "https://img.example.com/budget.jpg"
        assert first.published_at == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
        assert "Budget passes in Lok Sabha" in first.description
        assert "<a" not in first.description

    def test_defaults_for_sparse_items(self) -> None:
        articles = asyncio.run(GoogleNewsSource(self._client(GOOGLE_NEWS_RSS)).fetch_articles())

        second = articles[1]
        assert second.url == "https://news.google.com/rss/articles/def"
        assert second.source_name == "Google News"
        assert second.description == "Read more"
        assert second.image_url is None

    def test_respects_max_items(self) -> None:
        source = GoogleNewsSource(self._client(GOOGLE_NEWS_RSS), max_items=1)
        assert len(asyncio.run(source.fetch_articles())) == 1

    def test_empty_body(self) -> None:
        assert asyncio.run(GoogleNewsSource(self._client("")).fetch_articles()) == []

    def test_bypass_cache_is_forwarded(self) -> None:
        client = self._client(GOOGLE_NEWS_RSS)
        asyncio.run(GoogleNewsSource(client).fetch(bypass_cache=True))
        assert client.fetch.call_args.kwargs["bypass_cache"] is True


class TestStripHtml:
    def test_removes_tags(self) -> None:
        assert strip_html("<p>Hello <b>world</b></p>") == "Hello world"

    def test_empty(self) -> None:
        assert strip_html("") == ""
