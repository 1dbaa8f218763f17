import asyncio
import logging
import time
from typing import Callable, List, Optional, Sequence
from newsfeed.cache import FeedCache
from newsfeed.cluster import ArticleClusterer
from newsfeed.config import Settings
from newsfeed.fusion import as_utc, fuse_clusters
from newsfeed.models import FeedCacheEntry, FusedNewsEntity, RawArticle
from newsfeed.source_base import BaseSource

logger = logging.getLogger(__name__)

DEFAULT_CACHE_KEY = "india_news"
DEFAULT_LIMIT = 12


def _newest_first(article: RawArticle):
    # Undated articles sort after dated ones
    if article.published_at is None:
        return (1, 0.0)
    return (0, -as_utc(article.published_at).timestamp())


class FeedAssembler:
    def __init__(self, sources: Sequence[BaseSource], cache: FeedCache,
                 settings: Optional[Settings] = None,
                 cache_key: str = DEFAULT_CACHE_KEY,
                 priority: Optional[Callable[[FusedNewsEntity], int]] = None,
                 clock: Callable[[], float] = time.time):
        """
        Builds the fused news feed and keeps the last result in the feed cache.

        Args:
            sources: Adapters in priority order. Their results are combined in this
                     order whatever order they finish in, so clustering stays deterministic.
            cache: Feed cache holding one entry under cache_key
            settings: Clustering, TTL and category priority settings
            priority: Optional rank function (lower first); defaults to the category rank
            clock: Returns the current time in epoch seconds
        """
        self.sources = list(sources)
        self.cache = cache
        self.settings = settings or Settings()
        self.cache_key = cache_key
        self.priority = priority or (lambda entity: self.settings.priority_for(entity.category))
        self.clock = clock
        self.clusterer = ArticleClusterer(self.settings.similarity_threshold, self.settings.min_token_length)

    async def get_feed(self, limit: int = DEFAULT_LIMIT, bypass_cache: bool = False) -> List[FusedNewsEntity]:
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        if not bypass_cache:
            cached = self._cached_articles()
            if cached:
                logger.info(f"Serving {min(limit, len(cached))} cached articles for {self.cache_key}")
                return cached[:limit]

        articles = await self.fetch_all(bypass_cache)
        if not articles:
            logger.warning("No articles from any source")
            return []

        feed = self.build_feed(articles)
        self.cache.set(self.cache_key, FeedCacheEntry(articles=feed, timestamp=self.clock()))
        return feed[:limit]

    async def fetch_all(self, bypass_cache: bool = False) -> List[RawArticle]:
        """Runs every source concurrently and concatenates the results in source order."""
        results = await asyncio.gather(*(source.fetch(bypass_cache) for source in self.sources))

        counts = ", ".join(f"{source.name}={len(result)}" for source, result in zip(self.sources, results))
        logger.info(f"Fetched: {counts}")

        all_articles: List[RawArticle] = []
        for result in results:
            all_articles.extend(result)
        return all_articles

    def build_feed(self, articles: List[RawArticle]) -> List[FusedNewsEntity]:
        """Sorts, clusters and fuses articles into the ranked feed."""
        articles = sorted(articles, key=_newest_first)
        clusters = self.clusterer.cluster(articles)
        fused = fuse_clusters(clusters)

        logger.info(f"Fused {len(articles)} articles into {len(fused)} stories")
        return sorted(fused, key=lambda e: (self.priority(e), -e.published_at.timestamp()))

    def clear_cache(self):
        self.cache.clear(self.cache_key)

    def _cached_articles(self) -> Optional[List[FusedNewsEntity]]:
        entry = self.cache.get(self.cache_key)
        if entry is None:
            return None
        if not entry.is_fresh(self.settings.cache_ttl_seconds, self.clock()):
            logger.info(f"Cached feed {self.cache_key} is stale, refreshing")
            return None
        return entry.articles
