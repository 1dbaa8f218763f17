import logging
import time
import httpx
from typing import Any, Dict, Optional, Tuple
from fake_useragent import UserAgent
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

logger = logging.getLogger(__name__)


class HTTPClient:
    def __init__(self, cache_minutes: float = 10, timeout: float = 15.0):
        self.ua = UserAgent()
        self.client = httpx.AsyncClient(http2=False, follow_redirects=True)
        self.cache_seconds = cache_minutes * 60
        self.timeout = timeout
        # url -> (expires_at, body)
        self._cache: Dict[str, Tuple[float, Any]] = {}

    def _get_headers(self, accept: str):
        return {
            "User-Agent": self.ua.random,
            "Accept": accept,
            "Accept-Language": "en-US,en;q=0.5",
            "DNT": "1",
            "Connection": "keep-alive",
            "Cache-Control": "max-age=0",
        }

    def _cache_key(self, url: str, params: Optional[Dict[str, str]]) -> str:
        return str(httpx.URL(url, params=params))

    def _cached(self, key: str, bypass_cache: bool):
        if bypass_cache:
            return None
        hit = self._cache.get(key)
        if hit and hit[0] > time.time():
            logger.debug(f"HTTP cache hit: {key}")
            return hit[1]
        return None

    def _store(self, key: str, body: Any):
        if self.cache_seconds > 0:
            self._cache[key] = (time.time() + self.cache_seconds, body)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.RequestError, httpx.TimeoutException)),
        reraise=True,
    )
    async def _get(self, url: str, params: Optional[Dict[str, str]], accept: str) -> httpx.Response:
        response = await self.client.get(url, params=params, headers=self._get_headers(accept),
                                         timeout=self.timeout)
        response.raise_for_status()
        return response

    async def fetch(self, url: str, params: Optional[Dict[str, str]] = None,
                    bypass_cache: bool = False) -> str:
        """
        Fetches a URL as text with retries and header rotation.
        Successful responses are cached in memory for cache_minutes.
        """
        key = self._cache_key(url, params)
        cached = self._cached(key, bypass_cache)
        if cached is not None:
            return cached

        try:
            response = await self._get(url, params, "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8")
        except Exception as e:
            logger.error(f"Failed to fetch {url}: {e}")
            raise

        logger.info(f"Successfully fetched {url}")
        self._store(key, response.text)
        return response.text

    async def fetch_json(self, url: str, params: Optional[Dict[str, str]] = None,
                         bypass_cache: bool = False) -> Any:
        """Same as fetch() but decodes the body as JSON."""
        key = self._cache_key(url, params)
        cached = self._cached(key, bypass_cache)
        if cached is not None:
            return cached

        try:
            response = await self._get(url, params, "application/json")
            data = response.json()
        except Exception as e:
            logger.error(f"Failed to fetch JSON from {url}: {e}")
            raise

        logger.info(f"Successfully fetched {url}")
        self._store(key, data)
        return data

    def clear_cache(self, url: Optional[str] = None):
        if url is None:
            self._cache.clear()
        else:
            self._cache = {k: v for k, v in self._cache.items() if not k.startswith(url)}

    async def close(self):
        await self.client.aclose()
