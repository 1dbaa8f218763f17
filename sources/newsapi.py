from typing import List, Optional
import logging
from newsfeed.http_client import HTTPClient
from newsfeed.models import RawArticle
from newsfeed.source_base import BaseSource

logger = logging.getLogger(__name__)


class NewsAPISource(BaseSource):
    API_URL = "https://newsapi.org/v2/top-headlines"

    def __init__(self, http_client: HTTPClient, api_key: Optional[str], country: str = "in",
                 page_size: int = 20, timeout: Optional[float] = None):
        super().__init__(http_client, timeout)
        self.api_key = api_key
        self.country = country
        self.page_size = page_size

    async def fetch_articles(self, bypass_cache: bool = False) -> List[RawArticle]:
        if not self.api_key:
            logger.debug("NEWS_API_KEY not set, skipping NewsAPI")
            return []

        data = await self.http_client.fetch_json(self.API_URL, params={
            "country": self.country,
            "pageSize": str(self.page_size),
            "apiKey": self.api_key,
        }, bypass_cache=bypass_cache)

        articles = []
        for item in data.get("articles") or []:
            # NewsAPI returns placeholders for removed stories; they lack a description
            if not (item.get("title") and item.get("description") and item.get("url")):
                continue
            articles.append(RawArticle(
                title=item["title"],
                description=item["description"],
                url=item["url"],
                image_url=item.get("urlToImage") or None,
                published_at=self.published_or_now(item.get("publishedAt")),
                source_name=(item.get("source") or {}).get("name") or "NewsAPI",
            ))
        return articles
