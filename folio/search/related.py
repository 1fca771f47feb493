#!/usr/bin/env python3
"""
related.py
----------
Related-content discovery by taxonomy overlap.

Two published articles are related when they share categories or tags.
The match score is the number of shared categories plus the number of
shared tags; an article with no categories and no tags falls back to the
most recently published other articles.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Any, List, Optional, Tuple

# --- Third party imports ---
from sqlalchemy import Select, func, literal, select

# --- Local imports ---
from folio.core.exceptions import ValidationError
from folio.core.logging_manager import FolioLogger
from folio.core.validators import DataValidator
from folio.database.decorators import handle_db_errors, log_database_operation
from folio.database.manager import FolioDB
from folio.database.models import Article, ArticleStatus, article_categories, article_tags
from folio.dataclasses.records import ArticleRecord, RelatedArticle

DEFAULT_RELATED_LIMIT = 5


def _shared_count(link_table, link_column, ids: List[int]):
    """Correlated count of an article's links into ``ids``."""
    if not ids:
        return literal(0)
    return (
        select(func.count())
        .select_from(link_table)
        .where(
            link_table.c.article_id == Article.id,
            link_table.c[link_column].in_(ids),
        )
        .scalar_subquery()
    )


class RelatedContentMatcher:
    """
    Find published articles related to a given one.

    Attributes:
        db: Database manager
        logger: Logger for operation tracking (defaults to the db's)
    """

    def __init__(self, db: FolioDB, logger: Optional[FolioLogger] = None) -> None:
        self.db = db
        self.logger = logger if logger is not None else db.logger

    def find_related(self, article_id: Any, limit: int = DEFAULT_RELATED_LIMIT) -> List[ArticleRecord]:
        """
        Published articles sharing taxonomy with ``article_id``.

        Args:
            article_id: Source article
            limit: Maximum number of results

        Returns:
            Related ArticleRecords, best match first; [] when the source
            article is not published

        Raises:
            NotFoundError: If the source article does not exist
            ValidationError: If limit is less than 1
        """
        return [related.article for related in self.find_related_scored(article_id, limit)]

    @handle_db_errors
    @log_database_operation("find_related")
    def find_related_scored(
        self, article_id: Any, limit: int = DEFAULT_RELATED_LIMIT
    ) -> List[RelatedArticle]:
        """
        Like find_related(), with each article's match score.

        Fallback results (source without categories or tags) score 0.
        """
        article_id = DataValidator.normalize_id(article_id, "article_id")
        if limit < 1:
            raise ValidationError("Limit must be at least 1", field="limit")

        with self.db.session_scope() as session:
            source = self.db.articles.require(article_id)
            if source.status != ArticleStatus.PUBLISHED:
                return []

            category_ids = self.db.associations.get_category_ids(article_id)
            tag_ids = self.db.associations.get_tag_ids(article_id)
            stmt = self._candidates(article_id, category_ids, tag_ids).limit(limit)

            rows: List[Tuple[Article, int]] = [
                (row[0], int(row[1])) for row in session.execute(stmt)
            ]
            categories, tags = self.db.associations.get_links(a.id for a, _ in rows)
            return [
                RelatedArticle(
                    article=ArticleRecord.from_database(a, categories[a.id], tags[a.id]),
                    match_score=score,
                )
                for a, score in rows
            ]

    @staticmethod
    def _candidates(article_id: int, category_ids: List[int], tag_ids: List[int]) -> Select:
        """SELECT (Article, match score) over the other published articles."""
        base = (
            Article.status == ArticleStatus.PUBLISHED,
            Article.id != article_id,
        )
        if not category_ids and not tag_ids:
            return (
                select(Article, literal(0))
                .where(*base)
                .order_by(Article.published_at.desc(), Article.id.desc())
            )

        shared = (
            _shared_count(article_categories, "category_id", category_ids)
            + _shared_count(article_tags, "tag_id", tag_ids)
        )
        score = shared.label("match_score")
        return (
            select(Article, score)
            .where(*base)
            .where(shared > 0)
            .order_by(score.desc(), Article.published_at.desc(), Article.id.desc())
        )
