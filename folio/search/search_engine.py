#!/usr/bin/env python3
"""
search_engine.py
----------------
Ranked full-text search over published articles with metadata filtering.

Combines the SQLite FTS5 index (bm25 ranking, title > content > excerpt)
with SQL filters for status, author, publish window, categories and tags.

Usage:
    engine = RelevanceEngine(db)

    results = engine.search("python tips", SearchFilters(tag_ids=[3]))
    for result in results:
        print(result.article.title, result.score, result.matched_fields)

    engine.suggest("pyth")  # ['python', 'pythonic']
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Dict, List, Optional, Set, Union

# --- Third party imports ---
from sqlalchemy import Select, column, literal_column, select, table, text

# --- Local imports ---
from folio.core.exceptions import ValidationError
from folio.core.logging_manager import FolioLogger
from folio.database.decorators import handle_db_errors, log_database_operation
from folio.database.manager import FolioDB
from folio.database.models import Article, article_categories, article_tags
from folio.dataclasses.records import ArticleRecord, SearchResult
from .query import (
    SEARCH_FIELDS,
    EmptyQueryPolicy,
    MatchExpression,
    SearchFilters,
    normalize_query,
)
from .search_index import FTS_TABLE, SUGGESTION_LIMIT, SearchIndexManager, bm25_expression

DEFAULT_SEARCH_LIMIT = 50

_fts = table(FTS_TABLE, column("article_id"))


def apply_filters(stmt: Select, filters: SearchFilters) -> Select:
    """
    Add the filter predicates to a SELECT over Article.

    Predicates are conjunctive and added in a fixed order: status,
    author, date from, date to, categories, tags.
    """
    stmt = stmt.where(Article.status == filters.effective_status)
    if filters.author_id is not None:
        stmt = stmt.where(Article.author_id == filters.author_id)
    if filters.date_from is not None:
        stmt = stmt.where(Article.published_at >= filters.date_from)
    if filters.date_to is not None:
        stmt = stmt.where(Article.published_at <= filters.date_to)
    if filters.category_ids:
        stmt = stmt.where(
            Article.id.in_(
                select(article_categories.c.article_id).where(
                    article_categories.c.category_id.in_(filters.category_ids)
                )
            )
        )
    if filters.tag_ids:
        stmt = stmt.where(
            Article.id.in_(
                select(article_tags.c.article_id).where(
                    article_tags.c.tag_id.in_(filters.tag_ids)
                )
            )
        )
    return stmt


class RelevanceEngine:
    """
    Execute ranked searches and title suggestions against a FolioDB.

    Attributes:
        db: Database manager
        empty_query: What a query with no searchable terms returns
        logger: Logger for operation tracking (defaults to the db's)
    """

    def __init__(
        self,
        db: FolioDB,
        empty_query: Union[EmptyQueryPolicy, str] = EmptyQueryPolicy.MATCH_NONE,
        logger: Optional[FolioLogger] = None,
    ) -> None:
        self.db = db
        try:
            self.empty_query = EmptyQueryPolicy(empty_query)
        except ValueError as e:
            raise ValidationError(
                f"Invalid empty query policy: {empty_query}. "
                f"Must be one of: {', '.join(EmptyQueryPolicy.choices())}",
                field="empty_query",
            ) from e
        self.logger = logger if logger is not None else db.logger
        self.index = SearchIndexManager(db.engine, self.logger)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("search")
    def search(
        self,
        query: Union[str, MatchExpression, None],
        filters: Optional[SearchFilters] = None,
        limit: Optional[int] = DEFAULT_SEARCH_LIMIT,
    ) -> List[SearchResult]:
        """
        Rank articles matching ``query`` and passing ``filters``.

        Args:
            query: Raw query text or an already normalized expression
            filters: Optional filters (published articles only when unset)
            limit: Maximum number of results; None for all

        Returns:
            SearchResults ordered by score (desc), then newest publish
            time, then id

        Raises:
            ValidationError: If limit is less than 1
        """
        if limit is not None and limit < 1:
            raise ValidationError("Limit must be at least 1", field="limit")
        expr = query if isinstance(query, MatchExpression) else normalize_query(query)
        filters = filters or SearchFilters()

        if expr.is_empty:
            if self.empty_query is EmptyQueryPolicy.MATCH_NONE:
                return []
            return self._browse(filters, limit)

        fts_query = expr.to_fts5()
        score = literal_column(bm25_expression()).label("score")
        stmt = (
            select(Article, score)
            .join(_fts, _fts.c.article_id == Article.id)
            .where(text(f"{FTS_TABLE} MATCH :fts_query").bindparams(fts_query=fts_query))
        )
        stmt = apply_filters(stmt, filters).order_by(
            score.desc(), Article.published_at.desc(), Article.id.desc()
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        with self.db.session_scope() as session:
            rows = session.execute(stmt).all()
            articles = [row[0] for row in rows]
            records = self._records(articles)
            matched = self._matched_fields(session, expr, [a.id for a in articles])
            return [
                SearchResult(
                    article=record,
                    score=float(row[1]),
                    matched_fields=matched.get(record.id, []),
                )
                for record, row in zip(records, rows)
            ]

    def _browse(self, filters: SearchFilters, limit: Optional[int]) -> List[SearchResult]:
        """Unranked listing for an empty query under MATCH_ALL."""
        stmt = apply_filters(select(Article), filters).order_by(
            Article.published_at.desc(), Article.id.desc()
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.db.session_scope() as session:
            articles = list(session.execute(stmt).scalars())
            return [
                SearchResult(article=record, score=0.0, matched_fields=[])
                for record in self._records(articles)
            ]

    def _records(self, articles: List[Article]) -> List[ArticleRecord]:
        categories, tags = self.db.associations.get_links(a.id for a in articles)
        return [
            ArticleRecord.from_database(a, categories[a.id], tags[a.id])
            for a in articles
        ]

    def _matched_fields(
        self, session, expr: MatchExpression, article_ids: List[int]
    ) -> Dict[int, List[str]]:
        """Indexed fields of each article that contain at least one query term."""
        matched: Dict[int, List[str]] = {article_id: [] for article_id in article_ids}
        for field_name in SEARCH_FIELDS:
            hits: Set[int] = self.index.matching_ids(
                session, expr.to_fts5(column=field_name, match_any=True), article_ids
            )
            for article_id in hits:
                matched[article_id].append(field_name)
        return matched

    # -------------------------------------------------------------------------
    # Suggestions
    # -------------------------------------------------------------------------

    @handle_db_errors
    def suggest(self, partial: Optional[str], limit: int = SUGGESTION_LIMIT) -> List[str]:
        """
        Title vocabulary terms starting with ``partial``.

        Terms are the stemmed, lower-cased tokens of article titles, most
        referenced first.

        Args:
            partial: What the user has typed so far
            limit: Maximum number of suggestions

        Returns:
            Matching terms; [] for blank input (the store is not queried)

        Raises:
            ValidationError: If limit is less than 1
        """
        if limit < 1:
            raise ValidationError("Limit must be at least 1", field="limit")
        prefix = (partial or "").strip().lower()
        if not prefix:
            return []
        with self.db.session_scope() as session:
            return self.index.suggest(session, prefix, limit)
