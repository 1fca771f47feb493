#!/usr/bin/env python3
"""
category_manager.py
--------------------
Manages Category rows and their links to articles.

Key Features:
    - CRUD with unique name / slug enforcement
    - Slug regeneration on rename
    - Deletion removes article links before the category row
    - Published-article counts per category

Usage:
    cat_mgr = CategoryManager(session, logger)

    news = cat_mgr.create({"name": "News", "description": "Daily updates"})
    cat_mgr.update(news.id, {"name": "World News"})
    cat_mgr.list_with_counts()
"""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select

from folio.core.logging_manager import safe_logger
from folio.core.validators import DataValidator
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import (
    CATEGORY_NAME_MAX_LENGTH,
    Article,
    ArticleStatus,
    Category,
    article_categories,
)
from .base_manager import BaseManager


class CategoryManager(BaseManager):
    """
    Manages Category table operations.

    Categories are editorial sections. Each has a unique display name and
    a unique slug derived from it.
    """

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get(self, category_id: Any) -> Optional[Category]:
        """Retrieve a category by ID, or None."""
        return self._get_by_id(Category, category_id)

    @handle_db_errors
    def require(self, category_id: Any) -> Category:
        """Retrieve a category by ID or raise NotFoundError."""
        return self._require(Category, category_id)

    @handle_db_errors
    def get_by_slug(self, slug: str) -> Optional[Category]:
        """Retrieve a category by slug, or None."""
        return self._get_by_field(Category, "slug", slug)

    @handle_db_errors
    def get_by_name(self, name: str) -> Optional[Category]:
        """Retrieve a category by exact (trimmed) name, or None."""
        return self._get_by_field(Category, "name", name)

    @handle_db_errors
    @log_database_operation("list_categories")
    def list_all(self) -> List[Category]:
        """All categories ordered by name."""
        return list(
            self.session.execute(select(Category).order_by(Category.name)).scalars()
        )

    @handle_db_errors
    @log_database_operation("list_categories_with_counts")
    def list_with_counts(self) -> List[Tuple[Category, int]]:
        """
        All categories with the number of published articles in each.

        Returns:
            List of (Category, published_count) tuples ordered by name
        """
        published = (
            select(
                article_categories.c.category_id,
                func.count(Article.id).label("article_count"),
            )
            .join(Article, Article.id == article_categories.c.article_id)
            .where(Article.status == ArticleStatus.PUBLISHED)
            .group_by(article_categories.c.category_id)
            .subquery()
        )
        rows = self.session.execute(
            select(Category, func.coalesce(published.c.article_count, 0))
            .outerjoin(published, published.c.category_id == Category.id)
            .order_by(Category.name)
        ).all()
        return [(category, int(count)) for category, count in rows]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("create_category")
    @validate_metadata(["name"])
    def create(self, metadata: Dict[str, Any]) -> Category:
        """
        Create a new category.

        Args:
            metadata: Dictionary with keys:
                - name: Display name (required)
                - description: Optional free text

        Returns:
            Created Category object

        Raises:
            ValidationError: If the name is blank, too long, or slugs to nothing
            ConflictError: If the name or slug is already taken
        """
        name, slug = self._name_and_slug(
            metadata["name"], CATEGORY_NAME_MAX_LENGTH, "category"
        )
        self._ensure_name_available(Category, name, slug)

        category = Category(
            name=name,
            slug=slug,
            description=DataValidator.normalize_string(metadata.get("description")),
        )
        self.session.add(category)
        self.session.flush()

        safe_logger(self.logger).log_debug(
            f"Created category: {name}", {"category_id": category.id, "slug": slug}
        )
        return category

    @handle_db_errors
    @log_database_operation("update_category")
    def update(self, category_id: Any, metadata: Dict[str, Any]) -> Category:
        """
        Patch a category. A new name regenerates the slug.

        Args:
            category_id: Category to update
            metadata: Optional keys ``name`` and ``description``
                (an explicit None/blank description clears it)

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: On an invalid name
            ConflictError: If the new name collides with another category
        """
        category = self._require(Category, category_id)

        if "name" in metadata:
            name, slug = self._name_and_slug(
                metadata["name"], CATEGORY_NAME_MAX_LENGTH, "category"
            )
            if name != category.name:
                self._ensure_name_available(Category, name, slug, exclude_id=category.id)
                category.name = name
                category.slug = slug

        self._update_scalar_fields(
            category,
            metadata,
            [("description", DataValidator.normalize_string, True)],
        )
        self.session.flush()
        return category

    @handle_db_errors
    @log_database_operation("delete_category")
    def delete(self, category_id: Any) -> None:
        """
        Delete a category and every article link referencing it.

        Raises:
            NotFoundError: If the category does not exist
        """
        category = self._require(Category, category_id)
        removed = self.session.execute(
            delete(article_categories).where(
                article_categories.c.category_id == category.id
            )
        ).rowcount
        self.session.delete(category)
        self.session.flush()

        safe_logger(self.logger).log_debug(
            f"Deleted category: {category.name}",
            {"category_id": category.id, "links_removed": removed},
        )
