import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

logger = logging.getLogger(__name__)

PRIORITY_RANKS = {"high": 0, "medium": 1, "low": 2}

DEFAULT_CATEGORY_PRIORITY = {
    "breaking": "high",
    "top": "high",
    "politics": "high",
    "sports": "low",
    "entertainment": "low",
    "lifestyle": "low",
}


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {value!r}. Using default {default}")
        return default


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {value!r}. Using default {default}")
        return default


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


@dataclass
class Settings:
    newsapi_key: Optional[str] = None
    newsdata_key: Optional[str] = None
    worldnews_key: Optional[str] = None
    country: str = "in"

    similarity_threshold: float = 0.5
    min_token_length: int = 3

    cache_ttl_minutes: float = 30
    cache_db_path: str = "news_cache.db"
    cache_db_enabled: bool = True

    source_timeout: float = 20.0
    http_cache_minutes: float = 10

    category_priority: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_PRIORITY))

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_minutes * 60

    def priority_for(self, category: Optional[str]) -> int:
        """Rank of a category: 0 (high) first, unknown categories are medium."""
        label = self.category_priority.get((category or "").lower(), "medium")
        return PRIORITY_RANKS.get(label, PRIORITY_RANKS["medium"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Reads settings from environment variables (call load_dotenv() first to pick up .env)."""
        return cls(
            newsapi_key=os.getenv("NEWS_API_KEY") or None,
            newsdata_key=os.getenv("NEWSDATA_API_KEY") or None,
            worldnews_key=os.getenv("WORLDNEWS_API_KEY") or None,
            country=os.getenv("NEWS_COUNTRY", "in"),
            similarity_threshold=_get_float("SIMILARITY_THRESHOLD", 0.5),
            min_token_length=_get_int("MIN_TOKEN_LENGTH", 3),
            cache_ttl_minutes=_get_float("FEED_CACHE_TTL_MINUTES", 30),
            cache_db_path=os.getenv("FEED_CACHE_DB", "news_cache.db"),
            cache_db_enabled=_get_bool("ENABLE_CACHE_DB", True),
            source_timeout=_get_float("SOURCE_TIMEOUT_SECONDS", 20.0),
            http_cache_minutes=_get_float("HTTP_CACHE_MINUTES", 10),
        )
