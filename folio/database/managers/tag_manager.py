#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag rows and their usage counters.

``usage_count`` is maintained by SQLite triggers on article_tags (see
folio.database.triggers). This manager exposes the same counter
primitives for explicit use, plus a repair path that recomputes every
counter from the live links.

Key Features:
    - CRUD with unique name / slug enforcement
    - Idempotent find-or-create that survives concurrent inserts
    - Usage counter primitives clamped at zero
    - Recount, cleanup, popular and name-search queries

Usage:
    tag_mgr = TagManager(session, logger)

    tag = tag_mgr.find_or_create("python")
    tag_mgr.popular(limit=5)
    tag_mgr.cleanup_unused()
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update

from folio.core.logging_manager import safe_logger
from folio.core.validators import DataValidator
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import TAG_NAME_MAX_LENGTH, Tag, article_tags
from .base_manager import BaseManager

DEFAULT_TAG_LIMIT = 10


class TagManager(BaseManager):
    """
    Manages Tag table operations.

    Tags are keyword labels. Each is a unique name with a derived slug and
    a counter of the articles currently linked to it.
    """

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get(self, tag_id: Any) -> Optional[Tag]:
        """Retrieve a tag by ID, or None."""
        return self._get_by_id(Tag, tag_id)

    @handle_db_errors
    def require(self, tag_id: Any) -> Tag:
        """Retrieve a tag by ID or raise NotFoundError."""
        return self._require(Tag, tag_id)

    @handle_db_errors
    def get_by_slug(self, slug: str) -> Optional[Tag]:
        """Retrieve a tag by slug, or None."""
        return self._get_by_field(Tag, "slug", slug)

    @handle_db_errors
    def get_by_name(self, name: str) -> Optional[Tag]:
        """Retrieve a tag by exact (trimmed) name, or None."""
        return self._get_by_field(Tag, "name", name)

    @handle_db_errors
    @log_database_operation("list_tags")
    def list_all(self) -> List[Tag]:
        """All tags, most used first, then by name."""
        return list(
            self.session.execute(
                select(Tag).order_by(Tag.usage_count.desc(), Tag.name.asc())
            ).scalars()
        )

    @handle_db_errors
    @log_database_operation("popular_tags")
    def popular(self, limit: int = DEFAULT_TAG_LIMIT) -> List[Tag]:
        """Tags in use, most used first, capped at ``limit``."""
        return list(
            self.session.execute(
                select(Tag)
                .where(Tag.usage_count > 0)
                .order_by(Tag.usage_count.desc(), Tag.name.asc())
                .limit(max(int(limit), 0))
            ).scalars()
        )

    @handle_db_errors
    @log_database_operation("search_tags")
    def search_by_name(self, term: str, limit: int = DEFAULT_TAG_LIMIT) -> List[Tag]:
        """
        Case-insensitive substring search on tag names.

        Args:
            term: Fragment to look for; blank returns []
            limit: Maximum number of tags

        Returns:
            Matching tags, most used first, then by name
        """
        needle = DataValidator.normalize_string(term)
        if not needle:
            return []
        return list(
            self.session.execute(
                select(Tag)
                .where(func.lower(Tag.name).contains(needle.lower(), autoescape=True))
                .order_by(Tag.usage_count.desc(), Tag.name.asc())
                .limit(max(int(limit), 0))
            ).scalars()
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("create_tag")
    @validate_metadata(["name"])
    def create(self, metadata: Dict[str, Any]) -> Tag:
        """
        Create a new tag.

        Args:
            metadata: Dictionary with required key:
                - name: The tag text

        Returns:
            Created Tag object

        Raises:
            ValidationError: If the name is blank, too long, or slugs to nothing
            ConflictError: If the name or slug is already taken

        Notes:
            Usually prefer find_or_create() when a duplicate is acceptable.
        """
        name, slug = self._name_and_slug(metadata["name"], TAG_NAME_MAX_LENGTH, "tag")
        self._ensure_name_available(Tag, name, slug)

        tag = Tag(name=name, slug=slug, usage_count=0)
        self.session.add(tag)
        self.session.flush()

        safe_logger(self.logger).log_debug(f"Created tag: {name}", {"tag_id": tag.id})
        return tag

    @handle_db_errors
    @log_database_operation("find_or_create_tag")
    def find_or_create(self, name: str) -> Tag:
        """
        Get the tag with this name, creating it if needed.

        Lookup is by trimmed name first, then by slug, so "Python " and
        "python" resolve to the same row when their slugs agree.

        Raises:
            ValidationError: If the name is blank, too long, or slugs to nothing
        """
        name, slug = self._name_and_slug(name, TAG_NAME_MAX_LENGTH, "tag")
        existing = self._get_by_field(Tag, "name", name) or self._get_by_field(
            Tag, "slug", slug
        )
        if existing is not None:
            return existing
        return self._get_or_create(Tag, {"slug": slug}, {"name": name, "usage_count": 0})

    @handle_db_errors
    @log_database_operation("update_tag")
    def update(self, tag_id: Any, metadata: Dict[str, Any]) -> Tag:
        """
        Rename a tag, regenerating its slug.

        Raises:
            NotFoundError: If the tag does not exist
            ConflictError: If the new name collides with another tag
        """
        tag = self._require(Tag, tag_id)
        if "name" in metadata:
            name, slug = self._name_and_slug(metadata["name"], TAG_NAME_MAX_LENGTH, "tag")
            if name != tag.name:
                self._ensure_name_available(Tag, name, slug, exclude_id=tag.id)
                tag.name = name
                tag.slug = slug
                self.session.flush()
        return tag

    @handle_db_errors
    @log_database_operation("delete_tag")
    def delete(self, tag_id: Any) -> None:
        """
        Delete a tag and every article link referencing it.

        Raises:
            NotFoundError: If the tag does not exist
        """
        tag = self._require(Tag, tag_id)
        self.session.execute(delete(article_tags).where(article_tags.c.tag_id == tag.id))
        self.session.delete(tag)
        self.session.flush()

    # -------------------------------------------------------------------------
    # Usage counters
    # -------------------------------------------------------------------------

    @handle_db_errors
    def increment_usage(self, tag_id: Any) -> int:
        """Add one to the tag's counter and return the new value."""
        tag = self._require(Tag, tag_id)
        self.session.execute(
            update(Tag).where(Tag.id == tag.id).values(usage_count=Tag.usage_count + 1)
        )
        self.session.refresh(tag)
        return tag.usage_count

    @handle_db_errors
    def decrement_usage(self, tag_id: Any) -> int:
        """Subtract one from the tag's counter (never below zero)."""
        tag = self._require(Tag, tag_id)
        self.session.execute(
            update(Tag)
            .where(Tag.id == tag.id)
            .values(usage_count=func.max(Tag.usage_count - 1, 0))
        )
        self.session.refresh(tag)
        return tag.usage_count

    @handle_db_errors
    @log_database_operation("recount_tag_usage")
    def recount_usage(self) -> int:
        """
        Recompute every usage counter from the live article links.

        Returns:
            Number of tags whose stored counter was wrong
        """
        live = (
            select(article_tags.c.tag_id, func.count().label("n"))
            .group_by(article_tags.c.tag_id)
            .subquery()
        )
        rows = self.session.execute(
            select(Tag.id, Tag.usage_count, func.coalesce(live.c.n, 0)).outerjoin(
                live, live.c.tag_id == Tag.id
            )
        ).all()

        changed = 0
        for tag_id, stored, actual in rows:
            if stored != actual:
                self.session.execute(
                    update(Tag).where(Tag.id == tag_id).values(usage_count=actual)
                )
                changed += 1

        if changed:
            safe_logger(self.logger).log_warning(
                "Repaired tag usage counters", {"tags_changed": changed}
            )
        return changed

    @handle_db_errors
    @log_database_operation("cleanup_unused_tags")
    def cleanup_unused(self) -> int:
        """
        Delete every tag with no article links.

        Returns:
            Number of tags deleted
        """
        unused = list(
            self.session.execute(select(Tag.id).where(Tag.usage_count == 0)).scalars()
        )
        if unused:
            self.session.execute(delete(Tag).where(Tag.id.in_(unused)))
        safe_logger(self.logger).log_debug(
            "Removed unused tags", {"deleted": len(unused)}
        )
        return len(unused)
