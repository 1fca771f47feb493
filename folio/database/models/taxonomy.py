"""
Taxonomy Models
---------------

Categories and tags used to classify articles.

Models:
    - Category: Editorial section with a unique name and derived slug
    - Tag: Free-form keyword with a unique name, slug and usage counter

``Tag.usage_count`` is maintained by SQLite triggers on ``article_tags``
(see folio.database.triggers), never by application code.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .associations import article_categories, article_tags
from .base import Base, TimestampMixin, utc_now

if TYPE_CHECKING:
    from .content import Article

CATEGORY_NAME_MAX_LENGTH = 100
TAG_NAME_MAX_LENGTH = 50


class Category(TimestampMixin, Base):
    """
    Editorial category.

    Attributes:
        id: Primary key
        name: Display name (unique, at most 100 characters)
        slug: URL-safe identifier derived from name (unique)
        description: Optional free text

    Relationships:
        articles: Many-to-many with Article (read-only view)
    """

    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint("name != ''", name="ck_category_non_empty_name"),
        CheckConstraint("slug != ''", name="ck_category_non_empty_slug"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(CATEGORY_NAME_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    slug: Mapped[str] = mapped_column(
        String(CATEGORY_NAME_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    articles: Mapped[List["Article"]] = relationship(
        "Article", secondary=article_categories, viewonly=True
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name!r})>"


class Tag(Base):
    """
    Keyword tag for articles.

    Attributes:
        id: Primary key
        name: Tag text (unique, at most 50 characters)
        slug: URL-safe identifier derived from name (unique)
        usage_count: Number of live article-tag links (never negative)
        created_at: Row creation time

    Relationships:
        articles: Many-to-many with Article (read-only view)
    """

    __tablename__ = "tags"
    __table_args__ = (
        CheckConstraint("name != ''", name="ck_tag_non_empty_name"),
        CheckConstraint("slug != ''", name="ck_tag_non_empty_slug"),
        CheckConstraint("usage_count >= 0", name="ck_tag_usage_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(TAG_NAME_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    slug: Mapped[str] = mapped_column(
        String(TAG_NAME_MAX_LENGTH), unique=True, nullable=False, index=True
    )
    usage_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now
    )

    articles: Mapped[List["Article"]] = relationship(
        "Article", secondary=article_tags, viewonly=True
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r}, usage={self.usage_count})>"
