import argparse
import asyncio
import logging
from dotenv import load_dotenv

from newsfeed.assembler import FeedAssembler
from newsfeed.cache import FeedCache
from newsfeed.config import Settings
from newsfeed.http_client import HTTPClient

# Adapters, in priority order
from sources.newsapi import NewsAPISource
from sources.newsdata import NewsDataSource
from sources.worldnews import WorldNewsSource
from sources.google_news import GoogleNewsSource


# Load env
load_dotenv()

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_sources(http: HTTPClient, settings: Settings):
    timeout = settings.source_timeout
    return [
        NewsAPISource(http, settings.newsapi_key, country=settings.country, timeout=timeout),
        NewsDataSource(http, settings.newsdata_key, country=settings.country, timeout=timeout),
        WorldNewsSource(http, settings.worldnews_key, country=settings.country, timeout=timeout),
        GoogleNewsSource(http, timeout=timeout),
    ]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Fetch a deduplicated regional news feed")
    parser.add_argument("--limit", type=int, default=12, help="Number of stories to show (default: 12)")
    parser.add_argument("--refresh", action="store_true", help="Ignore the cached feed and fetch again")
    parser.add_argument("--no-cache-db", action="store_true", help="Keep the feed cache in memory only")
    args = parser.parse_args(argv)
    if args.limit < 1:
        parser.error("--limit must be at least 1")
    return args


async def main(argv=None):
    args = parse_args(argv)
    settings = Settings.from_env()
    logger.info("Starting news feed...")

    http = HTTPClient(cache_minutes=settings.http_cache_minutes)
    cache = FeedCache(settings.cache_db_path, enabled=settings.cache_db_enabled and not args.no_cache_db)
    assembler = FeedAssembler(build_sources(http, settings), cache, settings)

    try:
        feed = await assembler.get_feed(limit=args.limit, bypass_cache=args.refresh)
    finally:
        await http.close()

    if not feed:
        print("No news available right now.")
        return

    for idx, entity in enumerate(feed, 1):
        sources = ", ".join(source.name for source in entity.sources)
        print(f"{idx:>2}. {entity.title}")
        print(f"    {entity.published_at:%Y-%m-%d %H:%M} UTC | {sources}")
        print(f"    {entity.url}")


if __name__ == "__main__":
    asyncio.run(main())
