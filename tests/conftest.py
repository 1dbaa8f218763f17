"""Shared fixtures for the news feed tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Callable, List, Optional
from unittest.mock import MagicMock

import pytest

from newsfeed.models import RawArticle
from newsfeed.source_base import BaseSource


class StaticSource(BaseSource):
    """Source returning a fixed list of articles, optionally after a delay or with an error."""

    def __init__(self, name: str, articles: List[RawArticle], delay: float = 0.0,
                 error: Optional[Exception] = None) -> None:
        super().__init__(MagicMock())
        self.name = name
        self.articles = articles
        self.delay = delay
        self.error = error
        self.calls = 0
        self.bypassed: List[bool] = []

    async def fetch_articles(self, bypass_cache: bool = False) -> List[RawArticle]:
        self.calls += 1
        self.bypassed.append(bypass_cache)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.articles)


@pytest.fixture
def make_article() -> Callable[..., RawArticle]:
    def _make(
        title: str,
        source: str = "Source A",
        published_at: Optional[datetime] = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc),
        url: Optional[str] = None,
        description: str = "Description",
        image_url: Optional[str] = None,
        category: Optional[str] = None,
    ) -> RawArticle:
        slug = title.lower().replace(" ", "-")
        return RawArticle(
            title=title,
            description=description,
            url=url or f"https://{source.lower().replace(' ', '')}.example.com/{slug}",
            source_name=source,
            published_at=published_at,
            image_url=image_url,
            category=category,
        )

    return _make


@pytest.fixture
def static_source() -> Callable[..., StaticSource]:
    return StaticSource
