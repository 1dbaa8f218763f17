from typing import List, Optional
import logging
from newsfeed.http_client import HTTPClient
from newsfeed.models import RawArticle
from newsfeed.source_base import BaseSource

logger = logging.getLogger(__name__)


class NewsDataSource(BaseSource):
    API_URL = "https://newsdata.io/api/1/news"

    def __init__(self, http_client: HTTPClient, api_key: Optional[str], country: str = "in",
                 language: str = "en", timeout: Optional[float] = None):
        super().__init__(http_client, timeout)
        self.api_key = api_key
        self.country = country
        self.language = language

    async def fetch_articles(self, bypass_cache: bool = False) -> List[RawArticle]:
        if not self.api_key:
            logger.debug("NEWSDATA_API_KEY not set, skipping NewsData.io")
            return []

        data = await self.http_client.fetch_json(self.API_URL, params={
            "country": self.country,
            "language": self.language,
            "apikey": self.api_key,
        }, bypass_cache=bypass_cache)

        articles = []
        for item in data.get("results") or []:
            if not (item.get("title") and item.get("link")):
                continue
            categories = item.get("category") or []
            articles.append(RawArticle(
                title=item["title"],
                description=item.get("description") or "",
                url=item["link"],
                image_url=item.get("image_url") or None,
                published_at=self.published_or_now(item.get("pubDate")),
                source_name=item.get("source_id") or "NewsData",
                category=categories[0] if categories else None,
            ))
        return articles
