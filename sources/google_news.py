from typing import List, Optional
import feedparser
import logging
from bs4 import BeautifulSoup
from newsfeed.http_client import HTTPClient
from newsfeed.models import RawArticle
from newsfeed.source_base import BaseSource

logger = logging.getLogger(__name__)


def strip_html(html: str) -> str:
    if not html:
        return ""
    return BeautifulSoup(html, "lxml").get_text(separator=" ", strip=True)


def _image_url(entry) -> Optional[str]:
    for key in ("media_thumbnail", "media_content"):
        for media in entry.get(key) or []:
            if media.get("url"):
                return media["url"]
    for enclosure in entry.get("enclosures") or []:
        if enclosure.get("href"):
            return enclosure["href"]
    return None


class GoogleNewsSource(BaseSource):
    # India edition (English)
    RSS_URL = "https://news.google.com/rss?hl=en-IN&gl=IN&ceid=IN:en"
    DEFAULT_SOURCE_NAME = "Google News"
    SUMMARY_LENGTH = 220

    def __init__(self, http_client: HTTPClient, rss_url: Optional[str] = None, max_items: int = 15,
                 timeout: Optional[float] = None):
        super().__init__(http_client, timeout)
        self.rss_url = rss_url or self.RSS_URL
        self.max_items = max_items

    async def fetch_articles(self, bypass_cache: bool = False) -> List[RawArticle]:
        content = await self.http_client.fetch(self.rss_url, bypass_cache=bypass_cache)
        if not content:
            return []

        feed = feedparser.parse(content)
        if feed.bozo and not feed.entries:
            raise ValueError(f"Unreadable RSS feed: {feed.get('bozo_exception')}")

        articles = []
        for entry in feed.entries:
            try:
                article = self._parse_entry(entry)
            except Exception as e:
                logger.error(f"Error parsing entry: {e}")
                continue
            if article:
                articles.append(article)
            if len(articles) >= self.max_items:
                break

        return articles

    def _parse_entry(self, entry) -> Optional[RawArticle]:
        title = (entry.get("title") or "").strip()
        source = entry.get("source") or {}
        # Google News links are redirects; the <source url> points at the publisher
        url = source.get("href") or (entry.get("link") or "").strip()
        if not title or not url:
            return None

        summary = strip_html(entry.get("description") or "")
        if len(summary) > self.SUMMARY_LENGTH:
            summary = f"{summary[:self.SUMMARY_LENGTH]}…"

        return RawArticle(
            title=title,
            description=summary or "Read more",
            url=url,
            image_url=_image_url(entry),
            published_at=self.published_or_now(entry.get("published")),
            source_name=(source.get("title") or "").strip() or self.DEFAULT_SOURCE_NAME,
        )
