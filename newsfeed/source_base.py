import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional
from newsfeed.http_client import HTTPClient
from newsfeed.models import RawArticle

logger = logging.getLogger(__name__)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parses ISO-8601 ("2024-03-01T08:00:00Z", "2024-03-01 08:00:00") and RFC-822
    ("Fri, 01 Mar 2024 08:00:00 GMT") dates into UTC-aware datetimes.
    Returns None if the value can't be parsed.
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    parsed = None
    try:
        iso = value[:-1] + "+00:00" if value.endswith("Z") else value
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            logger.warning(f"Could not parse date: {value}")
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class BaseSource(ABC):
    def __init__(self, http_client: HTTPClient, timeout: Optional[float] = None):
        self.http_client = http_client
        self.timeout = timeout
        self.name = self.__class__.__name__

    @abstractmethod
    async def fetch_articles(self, bypass_cache: bool = False) -> List[RawArticle]:
        """
        Fetches the provider's articles, already normalized to RawArticle.
        bypass_cache skips the HTTP client's response cache.
        May raise; use fetch() to get the never-failing variant.
        """
        pass

    async def fetch(self, bypass_cache: bool = False) -> List[RawArticle]:
        """
        Main entry point for the feed assembler.
        A failing or timed-out provider yields an empty list.
        """
        try:
            if self.timeout:
                articles = await asyncio.wait_for(self.fetch_articles(bypass_cache), timeout=self.timeout)
            else:
                articles = await self.fetch_articles(bypass_cache)
        except asyncio.TimeoutError:
            logger.error(f"Source {self.name} timed out after {self.timeout}s")
            return []
        except Exception as e:
            logger.error(f"Source {self.name} failed: {e}")
            return []

        logger.info(f"Found {len(articles)} articles from {self.name}")
        return articles

    def published_or_now(self, value: Optional[str]) -> Optional[datetime]:
        """A missing date means "just fetched"; a present but unparseable one stays unknown (None)."""
        if not value or not value.strip():
            return datetime.now(timezone.utc)
        return parse_date(value)
