#!/usr/bin/env python3
"""
taxonomy.py
-----------
Category and tag operations returning plain records.

Each call runs in its own session scope. Writes return the committed
state, read back in a fresh scope so tag usage counts reflect the
triggers that ran during the transaction.

Usage:
    taxonomy = TaxonomyService(db)
    news = taxonomy.create_category("News")
    python = taxonomy.find_or_create_tag("python")
    taxonomy.popular_tags(limit=5)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, Dict, List, Optional

# --- Local imports ---
from folio.core.logging_manager import FolioLogger
from folio.database.decorators import handle_db_errors, log_database_operation
from folio.database.manager import FolioDB
from folio.database.managers.tag_manager import DEFAULT_TAG_LIMIT
from folio.dataclasses.records import CategoryRecord, TagRecord


class TaxonomyService:
    """
    Categories and tags over a FolioDB.

    Attributes:
        db: Database manager providing session scopes and managers
        logger: Logger for operation tracking (defaults to the db's)
    """

    def __init__(self, db: FolioDB, logger: Optional[FolioLogger] = None) -> None:
        self.db = db
        self.logger = logger if logger is not None else db.logger

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("category_create")
    def create_category(self, name: str, description: Optional[str] = None) -> CategoryRecord:
        """
        Create a category.

        Raises:
            ValidationError: On a blank, oversized or slug-less name
            ConflictError: If the name or slug is taken
        """
        with self.db.session_scope():
            category = self.db.categories.create(
                {"name": name, "description": description}
            )
            return CategoryRecord.from_database(category)

    @handle_db_errors
    @log_database_operation("category_update")
    def update_category(self, category_id: Any, patch: Dict[str, Any]) -> CategoryRecord:
        """
        Rename and/or re-describe a category.

        Raises:
            NotFoundError, ValidationError, ConflictError
        """
        with self.db.session_scope():
            category = self.db.categories.update(category_id, patch)
            return CategoryRecord.from_database(category)

    @handle_db_errors
    @log_database_operation("category_delete")
    def delete_category(self, category_id: Any) -> None:
        """Delete a category and its article links (NotFoundError if absent)."""
        with self.db.session_scope():
            self.db.categories.delete(category_id)

    @handle_db_errors
    def get_category(self, category_id: Any) -> Optional[CategoryRecord]:
        with self.db.session_scope():
            category = self.db.categories.get(category_id)
            return CategoryRecord.from_database(category) if category else None

    @handle_db_errors
    def get_category_by_slug(self, slug: str) -> Optional[CategoryRecord]:
        with self.db.session_scope():
            category = self.db.categories.get_by_slug(slug)
            return CategoryRecord.from_database(category) if category else None

    @handle_db_errors
    def list_categories(self) -> List[CategoryRecord]:
        """All categories ordered by name."""
        with self.db.session_scope():
            return [
                CategoryRecord.from_database(c) for c in self.db.categories.list_all()
            ]

    @handle_db_errors
    def list_categories_with_counts(self) -> List[CategoryRecord]:
        """All categories with their published-article counts."""
        with self.db.session_scope():
            return [
                CategoryRecord.from_database(category, article_count=count)
                for category, count in self.db.categories.list_with_counts()
            ]

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def _read_tag(self, tag_id: int) -> TagRecord:
        with self.db.session_scope():
            return TagRecord.from_database(self.db.tags.require(tag_id))

    @handle_db_errors
    @log_database_operation("tag_create")
    def create_tag(self, name: str) -> TagRecord:
        """
        Create a tag.

        Raises:
            ValidationError: On a blank, oversized or slug-less name
            ConflictError: If the name or slug is taken
        """
        with self.db.session_scope():
            tag_id = self.db.tags.create({"name": name}).id
        return self._read_tag(tag_id)

    @handle_db_errors
    @log_database_operation("tag_find_or_create")
    def find_or_create_tag(self, name: str) -> TagRecord:
        """Return the tag with this name, creating it if needed."""
        with self.db.session_scope():
            tag_id = self.db.tags.find_or_create(name).id
        return self._read_tag(tag_id)

    @handle_db_errors
    @log_database_operation("tag_update")
    def update_tag(self, tag_id: Any, patch: Dict[str, Any]) -> TagRecord:
        """Rename a tag (NotFoundError / ConflictError / ValidationError)."""
        with self.db.session_scope():
            tag_id = self.db.tags.update(tag_id, patch).id
        return self._read_tag(tag_id)

    @handle_db_errors
    @log_database_operation("tag_delete")
    def delete_tag(self, tag_id: Any) -> None:
        """Delete a tag and its article links (NotFoundError if absent)."""
        with self.db.session_scope():
            self.db.tags.delete(tag_id)

    @handle_db_errors
    def get_tag(self, tag_id: Any) -> Optional[TagRecord]:
        with self.db.session_scope():
            tag = self.db.tags.get(tag_id)
            return TagRecord.from_database(tag) if tag else None

    @handle_db_errors
    def get_tag_by_slug(self, slug: str) -> Optional[TagRecord]:
        with self.db.session_scope():
            tag = self.db.tags.get_by_slug(slug)
            return TagRecord.from_database(tag) if tag else None

    @handle_db_errors
    def list_tags(self) -> List[TagRecord]:
        """All tags, most used first, then by name."""
        with self.db.session_scope():
            return [TagRecord.from_database(t) for t in self.db.tags.list_all()]

    @handle_db_errors
    def search_tags_by_name(self, term: str, limit: int = DEFAULT_TAG_LIMIT) -> List[TagRecord]:
        """Case-insensitive substring search on tag names."""
        with self.db.session_scope():
            return [
                TagRecord.from_database(t) for t in self.db.tags.search_by_name(term, limit)
            ]

    @handle_db_errors
    def popular_tags(self, limit: int = DEFAULT_TAG_LIMIT) -> List[TagRecord]:
        """Tags in use, most used first."""
        with self.db.session_scope():
            return [TagRecord.from_database(t) for t in self.db.tags.popular(limit)]

    @handle_db_errors
    def increment_usage(self, tag_id: Any) -> int:
        """Add one to a tag's counter; returns the new value."""
        with self.db.session_scope():
            return self.db.tags.increment_usage(tag_id)

    @handle_db_errors
    def decrement_usage(self, tag_id: Any) -> int:
        """Subtract one from a tag's counter, never below zero."""
        with self.db.session_scope():
            return self.db.tags.decrement_usage(tag_id)

    @handle_db_errors
    @log_database_operation("tag_recount")
    def recount_usage(self) -> int:
        """Repair every usage counter; returns how many were wrong."""
        with self.db.session_scope():
            return self.db.tags.recount_usage()

    @handle_db_errors
    @log_database_operation("tag_cleanup")
    def cleanup_unused_tags(self) -> int:
        """Delete tags with no article links; returns how many."""
        with self.db.session_scope():
            return self.db.tags.cleanup_unused()
