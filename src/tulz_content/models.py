"""Data models for Tulz blog content and the search index."""

from dataclasses import dataclass, field
import datetime
from enum import Enum
from typing import Any

DEFAULT_AUTHOR = "Tulz Team"
DEFAULT_AUTHOR_AVATAR = "https://api.dicebear.com/7.x/avataaars/svg?seed=tulz"
DEFAULT_TOOL_CATEGORY = "Tools"


@dataclass(frozen=True)
class FrontMatter:
    """Validated front-matter block of a blog post."""

    title: str
    description: str
    date: datetime.date
    author: str = DEFAULT_AUTHOR
    author_avatar: str = DEFAULT_AUTHOR_AVATAR
    category: str | None = None
    cover_image: str = ""
    featured: bool = False
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentDocument:
    """A parsed blog post, identified by ``(category, slug)``."""

    slug: str
    category: str
    title: str
    description: str
    date: datetime.date
    content: str
    read_time: str
    excerpt: str
    author: str = DEFAULT_AUTHOR
    author_avatar: str = DEFAULT_AUTHOR_AVATAR
    cover_image: str = ""
    featured: bool = False
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class ToolEntry:
    """A tool catalog entry."""

    name: str
    description: str
    href: str
    category: str = DEFAULT_TOOL_CATEGORY
    popular: bool = False
    features: tuple[str, ...] = ()


class RecordKind(str, Enum):
    """Kinds of record stored in the search index."""

    CONTENT = "content"
    TOOL = "tool"


@dataclass
class IndexRecord:
    """Represents one entry of the search index."""

    id: str
    kind: RecordKind
    title: str
    description: str
    category: str
    url: str
    content_excerpt: str
    tags: list[str] = field(default_factory=list)
    author: str | None = None
    date: datetime.date | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape consumed by the site search.

        Returns:
            Mapping with camelCase keys; ``author`` and ``date`` are only
            present on content records.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "url": self.url,
            "contentExcerpt": self.content_excerpt,
        }
        if self.kind is RecordKind.CONTENT:
            data["author"] = self.author
            data["date"] = self.date.isoformat() if self.date else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IndexRecord":
        """Rebuild a record from its JSON shape.

        Args:
            data: Mapping as produced by ``to_dict``.

        Returns:
            IndexRecord instance.
        """
        raw_date = data.get("date")
        return cls(
            id=data["id"],
            kind=RecordKind(data["kind"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            category=data.get("category") or "",
            url=data.get("url") or "",
            content_excerpt=data.get("contentExcerpt") or "",
            tags=[str(tag) for tag in data.get("tags") or [] if tag is not None],
            author=data.get("author"),
            date=datetime.date.fromisoformat(raw_date) if raw_date else None,
        )
