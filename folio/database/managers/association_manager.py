#!/usr/bin/env python3
"""
association_manager.py
----------------------
Replace-semantics maintenance of article <-> category and article <-> tag
links, inside the caller's transaction.

Every ``set_*`` call deletes all existing links of that kind for the
article and inserts the new set. It never diffs, so replaying it within the
same transaction is harmless. Tag links fire the usage-count triggers once
per removed and once per added row.

Usage:
    assoc = AssociationManager(session, logger)
    assoc.set_categories(article.id, [1, 3])
    assoc.set_tags(article.id, [])          # clears all tags
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import Table, delete, insert, select

from folio.core.exceptions import NotFoundError
from folio.core.logging_manager import safe_logger
from folio.core.validators import DataValidator
from folio.database.decorators import handle_db_errors, log_database_operation
from folio.database.models import Category, Tag, article_categories, article_tags
from .base_manager import BaseManager


class AssociationManager(BaseManager):
    """Maintains the article_categories and article_tags link tables."""

    def _replace(
        self,
        table: Table,
        column: str,
        model_class: type,
        article_id: int,
        ids: Optional[Iterable[Any]],
    ) -> List[int]:
        wanted = DataValidator.normalize_id_list(ids, f"{model_class.__name__.lower()}_ids")
        missing = self._missing_ids(model_class, wanted)
        if missing:
            name = model_class.__name__
            raise NotFoundError(
                f"{name} id(s) not found: {', '.join(map(str, missing))}",
                entity=name.lower(),
                ids=missing,
            )

        self.session.execute(delete(table).where(table.c.article_id == article_id))
        if wanted:
            self.session.execute(
                insert(table),
                [{"article_id": article_id, column: value} for value in wanted],
            )

        safe_logger(self.logger).log_debug(
            f"Replaced {table.name} links",
            {"article_id": article_id, column: wanted},
        )
        return wanted

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("set_article_categories")
    def set_categories(self, article_id: int, category_ids: Optional[Iterable[Any]]) -> List[int]:
        """
        Replace the article's categories with ``category_ids``.

        Args:
            article_id: Article whose links are replaced
            category_ids: New set (None or empty clears)

        Returns:
            The sorted, de-duplicated ids now linked

        Raises:
            NotFoundError: If any id has no category (nothing is written)
        """
        return self._replace(
            article_categories, "category_id", Category, article_id, category_ids
        )

    @handle_db_errors
    @log_database_operation("set_article_tags")
    def set_tags(self, article_id: int, tag_ids: Optional[Iterable[Any]]) -> List[int]:
        """
        Replace the article's tags with ``tag_ids``.

        Raises:
            NotFoundError: If any id has no tag (nothing is written)
        """
        return self._replace(article_tags, "tag_id", Tag, article_id, tag_ids)

    @handle_db_errors
    def clear(self, article_id: int) -> None:
        """Remove every category and tag link of the article."""
        self.session.execute(
            delete(article_categories).where(article_categories.c.article_id == article_id)
        )
        self.session.execute(
            delete(article_tags).where(article_tags.c.article_id == article_id)
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get_category_ids(self, article_id: int) -> List[int]:
        """Sorted ids of the article's categories."""
        return list(
            self.session.execute(
                select(article_categories.c.category_id)
                .where(article_categories.c.article_id == article_id)
                .order_by(article_categories.c.category_id)
            ).scalars()
        )

    @handle_db_errors
    def get_tag_ids(self, article_id: int) -> List[int]:
        """Sorted ids of the article's tags."""
        return list(
            self.session.execute(
                select(article_tags.c.tag_id)
                .where(article_tags.c.article_id == article_id)
                .order_by(article_tags.c.tag_id)
            ).scalars()
        )

    @handle_db_errors
    def get_links(
        self, article_ids: Iterable[int]
    ) -> Tuple[Dict[int, List[int]], Dict[int, List[int]]]:
        """
        Batch-load category and tag ids for many articles.

        Returns:
            (category ids by article id, tag ids by article id); every
            requested article has an entry, possibly an empty list
        """
        ids = list(article_ids)
        categories: Dict[int, List[int]] = {article_id: [] for article_id in ids}
        tags: Dict[int, List[int]] = {article_id: [] for article_id in ids}
        if not ids:
            return categories, tags

        for article_id, category_id in self.session.execute(
            select(article_categories.c.article_id, article_categories.c.category_id)
            .where(article_categories.c.article_id.in_(ids))
            .order_by(article_categories.c.category_id)
        ):
            categories[article_id].append(category_id)
        for article_id, tag_id in self.session.execute(
            select(article_tags.c.article_id, article_tags.c.tag_id)
            .where(article_tags.c.article_id.in_(ids))
            .order_by(article_tags.c.tag_id)
        ):
            tags[article_id].append(tag_id)
        return categories, tags
