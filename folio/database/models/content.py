"""
Content Models
--------------

The Article model: the unit of content moving through the lifecycle.

Models:
    - Article: Title, body, optional excerpt, author and lifecycle state

Article rows carry a ``version`` column registered as SQLAlchemy's
``version_id_col``: every ORM UPDATE/DELETE includes ``WHERE version = ?``
and bumps the counter, so a concurrent writer that lost the race fails
with StaleDataError instead of silently overwriting.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import DateTime, Enum as SQLEnum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .associations import article_categories, article_tags
from .base import Base, TimestampMixin
from .enums import ArticleStatus

if TYPE_CHECKING:
    from .taxonomy import Category, Tag

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 100_000


class Article(TimestampMixin, Base):
    """
    A piece of authored content.

    Attributes:
        id: Primary key
        title: Headline (at most 255 characters)
        content: Body text (at most 100,000 characters)
        excerpt: Optional teaser
        author_id: Opaque identifier of the owning user
        status: ArticleStatus (draft, published, archived)
        published_at: Set the first time the article is published
        version: Optimistic-concurrency counter

    Relationships:
        categories: Many-to-many with Category (read-only view)
        tags: Many-to-many with Tag (read-only view)
    """

    __tablename__ = "articles"
    __table_args__ = (
        Index("ix_articles_status_published_at", "status", "published_at"),
    )

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    author_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # ---- Lifecycle ----
    status: Mapped[ArticleStatus] = mapped_column(
        SQLEnum(
            ArticleStatus,
            name="articlestatus",
            values_callable=lambda x: [e.value for e in x],
            create_constraint=True,
        ),
        nullable=False,
        default=ArticleStatus.DRAFT,
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    # ---- Relationships ----
    categories: Mapped[List["Category"]] = relationship(
        "Category",
        secondary=article_categories,
        viewonly=True,
        order_by="Category.name",
    )
    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=article_tags,
        viewonly=True,
        order_by="Tag.name",
    )

    @property
    def is_published(self) -> bool:
        return self.status == ArticleStatus.PUBLISHED

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, title={self.title!r}, status={self.status.value})>"
