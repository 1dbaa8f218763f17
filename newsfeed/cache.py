import json
import logging
from typing import Dict, Optional
import sqlite_utils
from sqlite_utils.db import NotFoundError
from newsfeed.models import FeedCacheEntry, FusedNewsEntity

logger = logging.getLogger(__name__)

TABLE = "feed_cache"


class FeedCache:
    def __init__(self, db_path: str = "news_cache.db", enabled: bool = True):
        """
        Store for assembled feeds, one entry per feed key.

        Args:
            db_path: Path to SQLite database file
            enabled: If False, entries only live in memory for this process

        Every operation is best-effort: storage errors are logged and swallowed,
        and a failed read behaves like a cache miss.
        """
        self.enabled = enabled
        self.db_path = db_path
        self.db = None
        self._memory: Dict[str, FeedCacheEntry] = {}

        if self.enabled:
            try:
                self.db = sqlite_utils.Database(db_path)
                self.init_db()
                logger.info(f"Feed cache database enabled: {db_path}")
            except Exception as e:
                logger.error(f"Could not open feed cache database {db_path}: {e}. Using in-memory cache")
                self.db = None
        else:
            logger.info("Feed cache database disabled - entries are kept in memory for this run only")

    def init_db(self):
        """Initialize cache schema (only when enabled)"""
        if self.db is None:
            return

        self.db[TABLE].create({
            "key": str,
            "articles": str,  # JSON list of fused entities
            "timestamp": float,
        }, pk="key", if_not_exists=True)

    def get(self, key: str) -> Optional[FeedCacheEntry]:
        if self.db is None:
            return self._memory.get(key)

        try:
            row = self.db[TABLE].get(key)
        except NotFoundError:
            return None
        except Exception as e:
            logger.warning(f"Feed cache read failed for {key}: {e}")
            return None

        try:
            articles = [FusedNewsEntity.from_dict(item) for item in json.loads(row["articles"])]
            return FeedCacheEntry(articles=articles, timestamp=float(row["timestamp"]))
        except Exception as e:
            logger.warning(f"Discarding unreadable feed cache entry {key}: {e}")
            return None

    def set(self, key: str, entry: FeedCacheEntry):
        """Replaces the whole entry for key."""
        if self.db is None:
            self._memory[key] = entry
            return

        try:
            self.db[TABLE].upsert({
                "key": key,
                "articles": json.dumps([a.to_dict() for a in entry.articles], ensure_ascii=False),
                "timestamp": entry.timestamp,
            }, pk="key")
        except Exception as e:
            logger.warning(f"Feed cache write failed for {key}: {e}")

    def clear(self, key: Optional[str] = None):
        if self.db is None:
            if key is None:
                self._memory.clear()
            else:
                self._memory.pop(key, None)
            return

        try:
            if key is None:
                self.db[TABLE].delete_where()
            else:
                self.db[TABLE].delete_where("[key] = ?", [key])
        except Exception as e:
            logger.warning(f"Feed cache clear failed: {e}")
