import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from newsfeed.models import ArticleCluster, FusedNewsEntity, Source
from newsfeed.text import clean_title, clean_description, slugify

logger = logging.getLogger(__name__)

MERGED_TAG = "merged"


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are assumed to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _unique_sources(cluster: ArticleCluster) -> Tuple[Source, ...]:
    sources = []
    seen = set()
    for article in cluster.articles:
        if article.source_name in seen:
            continue
        seen.add(article.source_name)
        sources.append(Source(name=article.source_name, url=article.url))
    return tuple(sources)


def _first_image(cluster: ArticleCluster) -> Optional[str]:
    for article in cluster.articles:
        if article.image_url:
            return article.image_url
    return None


def _earliest_date(cluster: ArticleCluster, now: datetime) -> datetime:
    dates = [as_utc(a.published_at) for a in cluster.articles if a.published_at is not None]
    if not dates:
        return now
    return min(dates)


def fuse_cluster(cluster: ArticleCluster, now: Optional[datetime] = None) -> FusedNewsEntity:
    """
    Reduces a cluster to a single news entity.

    The first article in the cluster is the primary one: it provides the title,
    description, link and category. Sources are collected from every member
    (one per source name), the image is the first one any member has, and the
    publish date is the earliest known one, falling back to now.
    """
    primary = cluster.articles[0]
    if now is None:
        now = datetime.now(timezone.utc)

    entity = FusedNewsEntity(
        id=slugify(primary.title, MERGED_TAG),
        title=clean_title(primary.title),
        description=clean_description(primary.description),
        url=primary.url,
        image_url=_first_image(cluster),
        published_at=_earliest_date(cluster, as_utc(now)),
        category=primary.category,
        sources=_unique_sources(cluster),
    )

    if len(cluster) > 1:
        logger.debug(f"Fused {len(cluster)} articles from {len(entity.sources)} sources: {entity.title[:60]}")
    return entity


def fuse_clusters(clusters: List[ArticleCluster], now: Optional[datetime] = None) -> List[FusedNewsEntity]:
    if now is None:
        now = datetime.now(timezone.utc)
    return [fuse_cluster(cluster, now) for cluster in clusters]
