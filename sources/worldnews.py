from typing import List, Optional
import logging
from newsfeed.http_client import HTTPClient
from newsfeed.models import RawArticle
from newsfeed.source_base import BaseSource

logger = logging.getLogger(__name__)


class WorldNewsSource(BaseSource):
    API_URL = "https://api.worldnewsapi.com/search-news"
    SOURCE_NAME = "WorldNews"

    def __init__(self, http_client: HTTPClient, api_key: Optional[str], country: str = "in",
                 language: str = "en", number: int = 20, timeout: Optional[float] = None):
        super().__init__(http_client, timeout)
        self.api_key = api_key
        self.country = country
        self.language = language
        self.number = number

    async def fetch_articles(self, bypass_cache: bool = False) -> List[RawArticle]:
        if not self.api_key:
            logger.debug("WORLDNEWS_API_KEY not set, skipping WorldNewsAPI")
            return []

        data = await self.http_client.fetch_json(self.API_URL, params={
            "source-countries": self.country,
            "language": self.language,
            "number": str(self.number),
            "api-key": self.api_key,
        }, bypass_cache=bypass_cache)

        articles = []
        for item in data.get("news") or []:
            if not (item.get("title") and item.get("url")):
                continue
            articles.append(RawArticle(
                title=item["title"],
                # Full article text; only the lead is useful as a description
                description=(item.get("text") or "")[:300],
                url=item["url"],
                image_url=item.get("image") or None,
                published_at=self.published_or_now(item.get("publish_date")),
                source_name=self.SOURCE_NAME,
            ))
        return articles
