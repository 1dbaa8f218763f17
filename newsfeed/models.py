from dataclasses import dataclass, field
from typing import Optional, List, Set, Dict, Any, Tuple
from datetime import datetime

TokenSet = Set[str]


@dataclass(frozen=True)
class RawArticle:
    title: str
    description: str
    url: str  # Unique per source only
    source_name: str
    published_at: Optional[datetime]  # None when the provider date could not be parsed
    image_url: Optional[str] = None
    category: Optional[str] = None


@dataclass
class ArticleCluster:
    articles: List[RawArticle] = field(default_factory=list)
    title_tokens: TokenSet = field(default_factory=set)

    def add(self, article: RawArticle, tokens: TokenSet):
        self.articles.append(article)
        self.title_tokens |= tokens

    def __len__(self):
        return len(self.articles)


@dataclass(frozen=True)
class Source:
    name: str
    url: str


@dataclass(frozen=True)
class FusedNewsEntity:
    id: str
    title: str
    description: str
    url: str  # Primary article, used for deep-linking
    published_at: datetime
    sources: Tuple[Source, ...]
    image_url: Optional[str] = None
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "image_url": self.image_url,
            "published_at": self.published_at.isoformat(),
            "category": self.category,
            "sources": [{"name": s.name, "url": s.url} for s in self.sources],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FusedNewsEntity":
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description", ""),
            url=data["url"],
            image_url=data.get("image_url"),
            published_at=datetime.fromisoformat(data["published_at"]),
            category=data.get("category"),
            sources=tuple(Source(name=s["name"], url=s["url"]) for s in data.get("sources", [])),
        )


@dataclass
class FeedCacheEntry:
    articles: List[FusedNewsEntity]
    timestamp: float  # Epoch seconds at creation

    def is_fresh(self, ttl_seconds: float, now: float) -> bool:
        return now - self.timestamp < ttl_seconds
