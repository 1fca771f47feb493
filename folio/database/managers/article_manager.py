#!/usr/bin/env python3
"""
article_manager.py
--------------------
Row-level operations on articles and paginated article listings.

The manager validates and writes individual fields; lifecycle rules
(which transitions are allowed, when content must be non-empty) live in
folio.services.articles.ArticleLifecycle, which drives this manager
together with the AssociationManager inside one session scope.

Key Features:
    - Field validation (non-blank when required, length limits)
    - Status changes that stamp ``published_at`` once and keep it
    - Optimistic version checks
    - Filtered, sorted, paginated listings

Usage:
    art_mgr = ArticleManager(session, logger)

    article = art_mgr.create({"title": "Hello", "content": "...", "author_id": "u1"})
    art_mgr.set_status(article, ArticleStatus.PUBLISHED)
    page = art_mgr.paginate(PaginationOptions(page=2), status=ArticleStatus.PUBLISHED)
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Select, func, select

from folio.core.exceptions import StaleWriteError, ValidationError
from folio.core.logging_manager import safe_logger
from folio.core.pagination import PaginationOptions
from folio.core.validators import DataValidator
from folio.database.decorators import (
    handle_db_errors,
    log_database_operation,
    validate_metadata,
)
from folio.database.models import (
    CONTENT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Article,
    ArticleStatus,
    article_categories,
    article_tags,
    utc_now,
)
from .base_manager import BaseManager

SORT_COLUMNS = {
    "created_at": Article.created_at,
    "updated_at": Article.updated_at,
    "published_at": Article.published_at,
    "title": Article.title,
}


def parse_status(value: Any) -> ArticleStatus:
    """
    Convert a status name (or ArticleStatus) to ArticleStatus.

    Raises:
        ValidationError: If the value is not a known status
    """
    if isinstance(value, ArticleStatus):
        return value
    try:
        return ArticleStatus(str(value).strip().lower())
    except ValueError as e:
        raise ValidationError(
            f"Invalid status: {value!r}. Must be one of {ArticleStatus.choices()}",
            field="status",
        ) from e


class ArticleManager(BaseManager):
    """Manages Article rows."""

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get(self, article_id: Any) -> Optional[Article]:
        """Retrieve an article by ID, or None."""
        return self._get_by_id(Article, article_id)

    @handle_db_errors
    def require(self, article_id: Any) -> Article:
        """Retrieve an article by ID or raise NotFoundError."""
        return self._require(Article, article_id)

    # -------------------------------------------------------------------------
    # Field helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _text_field(
        value: Any, field: str, max_length: int, required: bool
    ) -> str:
        if required:
            text = DataValidator.require_non_blank(value, field)
        else:
            text = "" if value is None else str(value).strip()
        DataValidator.validate_max_length(text, max_length, field)
        return text

    def apply_fields(
        self, article: Article, patch: Dict[str, Any], require_non_blank: bool = True
    ) -> List[str]:
        """
        Copy title / content / excerpt from ``patch`` onto the article.

        Only keys present in the patch are touched. A blank excerpt clears it.

        Args:
            article: Article to modify
            patch: Field values
            require_non_blank: Reject blank title/content (False for drafts)

        Returns:
            Names of the fields assigned
        """
        changed: List[str] = []
        if "title" in patch:
            article.title = self._text_field(
                patch["title"], "title", TITLE_MAX_LENGTH, require_non_blank
            )
            changed.append("title")
        if "content" in patch:
            article.content = self._text_field(
                patch["content"], "content", CONTENT_MAX_LENGTH, require_non_blank
            )
            changed.append("content")
        changed += self._update_scalar_fields(
            article, patch, [("excerpt", DataValidator.normalize_string, True)]
        )
        return changed

    @staticmethod
    def check_version(article: Article, expected_version: Optional[int]) -> None:
        """
        Compare the caller's version with the stored one.

        Raises:
            StaleWriteError: If ``expected_version`` is given and differs
        """
        if expected_version is not None and article.version != expected_version:
            raise StaleWriteError(
                f"Article {article.id} was modified (version {article.version}, "
                f"expected {expected_version})",
                id=article.id,
                expected=expected_version,
                actual=article.version,
            )

    @staticmethod
    def set_status(
        article: Article, status: ArticleStatus, clear_published_at: bool = False
    ) -> None:
        """
        Move the article to ``status``.

        Publishing stamps ``published_at`` only if it was never set. The
        timestamp is otherwise retained, unless ``clear_published_at`` is
        passed for a non-published target.
        """
        article.status = status
        if status == ArticleStatus.PUBLISHED:
            if article.published_at is None:
                article.published_at = utc_now()
        elif clear_published_at:
            article.published_at = None

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("create_article")
    @validate_metadata(["author_id"])
    def create(self, metadata: Dict[str, Any]) -> Article:
        """
        Insert a new article.

        Args:
            metadata: Dictionary with keys:
                - title, content: Required non-blank text
                - excerpt: Optional teaser
                - author_id: Owner (required)
                - status: 'draft' (default) or 'published'

        Returns:
            Created Article (flushed, id assigned)

        Raises:
            ValidationError: On invalid fields, or a status of 'archived'
        """
        status = parse_status(metadata.get("status") or ArticleStatus.DRAFT)
        if status == ArticleStatus.ARCHIVED:
            raise ValidationError(
                "Articles cannot be created archived", field="status"
            )

        article = Article(
            author_id=DataValidator.require_non_blank(metadata["author_id"], "author_id"),
            title="",
            content="",
        )
        self.apply_fields(
            article,
            {
                "title": metadata.get("title"),
                "content": metadata.get("content"),
                "excerpt": metadata.get("excerpt"),
            },
            require_non_blank=True,
        )
        self.set_status(article, status)

        self.session.add(article)
        self.session.flush()

        safe_logger(self.logger).log_debug(
            f"Created article: {article.title}",
            {"article_id": article.id, "status": status.value},
        )
        return article

    @handle_db_errors
    @log_database_operation("delete_article")
    def delete(self, article: Article) -> None:
        """Delete the article row (links must already be cleared)."""
        self.session.delete(article)
        self.session.flush()

    @handle_db_errors
    def touch(self, article: Article) -> None:
        """Flush pending changes, bumping updated_at and version."""
        article.updated_at = utc_now()
        self.session.flush()

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    @staticmethod
    def filtered(
        author_id: Optional[str] = None,
        status: Optional[ArticleStatus] = None,
        category_id: Optional[int] = None,
        tag_id: Optional[int] = None,
        published_from: Optional[datetime] = None,
        published_to: Optional[datetime] = None,
    ) -> Select:
        """Build the filtered SELECT shared by every listing."""
        stmt = select(Article)
        if status is not None:
            stmt = stmt.where(Article.status == status)
        if author_id is not None:
            stmt = stmt.where(Article.author_id == author_id)
        if published_from is not None:
            stmt = stmt.where(Article.published_at >= published_from)
        if published_to is not None:
            stmt = stmt.where(Article.published_at <= published_to)
        if category_id is not None:
            stmt = stmt.where(
                Article.id.in_(
                    select(article_categories.c.article_id).where(
                        article_categories.c.category_id == category_id
                    )
                )
            )
        if tag_id is not None:
            stmt = stmt.where(
                Article.id.in_(
                    select(article_tags.c.article_id).where(
                        article_tags.c.tag_id == tag_id
                    )
                )
            )
        return stmt

    @handle_db_errors
    @log_database_operation("paginate_articles")
    def paginate(
        self,
        options: PaginationOptions,
        default_sort: str = "created_at",
        **filters: Any,
    ) -> Tuple[List[Article], int]:
        """
        One page of articles matching ``filters``.

        Args:
            options: Validated pagination options
            default_sort: Column used when ``options.sort_by`` is unset or
                names no article column ('relevance')
            **filters: Keyword filters accepted by filtered()

        Returns:
            (articles on the page, total matching rows)
        """
        options.validate()
        stmt = self.filtered(**filters)

        total = self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        column = SORT_COLUMNS.get(options.sort_by or "", SORT_COLUMNS[default_sort])
        if options.sort_order == "asc":
            order = (column.asc(), Article.id.asc())
        else:
            order = (column.desc(), Article.id.desc())

        articles = list(
            self.session.execute(
                stmt.order_by(*order).limit(options.limit).offset(options.offset)
            ).scalars()
        )
        return articles, total
