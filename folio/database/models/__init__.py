"""
Database Models Package
------------------------

SQLAlchemy ORM models for the Folio content database.

- base: Base class, timestamp mixin, utc_now
- enums: ArticleStatus
- associations: article_categories, article_tags link tables
- content: Article
- taxonomy: Category, Tag

Usage:
    from folio.database.models import Article, Category, Tag
"""
from .base import Base, TimestampMixin, utc_now
from .enums import ArticleStatus
from .associations import article_categories, article_tags
from .content import CONTENT_MAX_LENGTH, TITLE_MAX_LENGTH, Article
from .taxonomy import CATEGORY_NAME_MAX_LENGTH, TAG_NAME_MAX_LENGTH, Category, Tag

__all__ = [
    "Base",
    "TimestampMixin",
    "utc_now",
    "ArticleStatus",
    "article_categories",
    "article_tags",
    "Article",
    "Category",
    "Tag",
    "TITLE_MAX_LENGTH",
    "CONTENT_MAX_LENGTH",
    "CATEGORY_NAME_MAX_LENGTH",
    "TAG_NAME_MAX_LENGTH",
]
