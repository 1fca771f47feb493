"""
Association Tables
-------------------

Many-to-many link tables between articles and their taxonomy.

- article_categories: Article <-> Category
- article_tags: Article <-> Tag (drives the tag usage-count triggers)

Both use a composite primary key and cascade on either parent's deletion.
Rows are written with Core insert/delete statements by the
AssociationManager, never through ORM collections.
"""
# --- Third party imports ---
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Table, func

# --- Local imports ---
from .base import Base

article_categories = Table(
    "article_categories",
    Base.metadata,
    Column(
        "article_id",
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)

article_tags = Table(
    "article_tags",
    Base.metadata,
    Column(
        "article_id",
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp()),
)
