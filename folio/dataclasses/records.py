#!/usr/bin/env python3
"""
records.py
----------
Plain dataclass records returned by the Folio services.

Records are detached snapshots: they hold no session and are safe to
serialize with ``to_dict()`` (datetimes become ISO-8601 strings, statuses
their string value).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class CategoryRecord:
    """
    Category snapshot.

    Attributes:
        article_count: Published articles in the category, when computed
    """

    id: int
    name: str
    slug: str
    description: Optional[str]
    created_at: datetime
    updated_at: datetime
    article_count: Optional[int] = None

    @classmethod
    def from_database(cls, category: Any, article_count: Optional[int] = None) -> "CategoryRecord":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            created_at=category.created_at,
            updated_at=category.updated_at,
            article_count=article_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        if self.article_count is not None:
            data["article_count"] = self.article_count
        return data


@dataclass
class TagRecord:
    """Tag snapshot, including its live usage count."""

    id: int
    name: str
    slug: str
    usage_count: int
    created_at: datetime

    @classmethod
    def from_database(cls, tag: Any) -> "TagRecord":
        return cls(
            id=tag.id,
            name=tag.name,
            slug=tag.slug,
            usage_count=tag.usage_count,
            created_at=tag.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "usage_count": self.usage_count,
            "created_at": _iso(self.created_at),
        }


@dataclass
class ArticleRecord:
    """
    Article snapshot with its association ids.

    Attributes:
        status: Status value ('draft', 'published', 'archived')
        category_ids, tag_ids: Sorted ids of linked categories and tags
        version: Optimistic-concurrency counter to pass back on writes
    """

    id: int
    title: str
    content: str
    excerpt: Optional[str]
    author_id: str
    status: str
    created_at: datetime
    updated_at: datetime
    published_at: Optional[datetime]
    version: int
    category_ids: List[int] = field(default_factory=list)
    tag_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_database(
        cls,
        article: Any,
        category_ids: Optional[List[int]] = None,
        tag_ids: Optional[List[int]] = None,
    ) -> "ArticleRecord":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            excerpt=article.excerpt,
            author_id=article.author_id,
            status=getattr(article.status, "value", article.status),
            created_at=article.created_at,
            updated_at=article.updated_at,
            published_at=article.published_at,
            version=article.version,
            category_ids=sorted(category_ids or []),
            tag_ids=sorted(tag_ids or []),
        )

    @property
    def is_published(self) -> bool:
        return self.status == "published"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "author_id": self.author_id,
            "status": self.status,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "published_at": _iso(self.published_at),
            "version": self.version,
            "category_ids": list(self.category_ids),
            "tag_ids": list(self.tag_ids),
        }


@dataclass
class SearchResult:
    """
    One ranked search hit.

    Attributes:
        article: The matching article
        score: Relevance (higher is better; 0.0 for unranked matches)
        matched_fields: Which of title/content/excerpt matched the query
    """

    article: ArticleRecord
    score: float
    matched_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "article": self.article.to_dict(),
            "score": self.score,
            "matched_fields": list(self.matched_fields),
        }


@dataclass
class RelatedArticle:
    """A related article and the number of categories and tags it shares."""

    article: ArticleRecord
    match_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"article": self.article.to_dict(), "match_score": self.match_score}
