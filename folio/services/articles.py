#!/usr/bin/env python3
"""
articles.py
-----------
The article lifecycle state machine.

States are draft, published and archived. Every mutation runs in one
session scope (row write, association replacement, commit) and the full
record, with its category and tag ids, is then read back in a fresh scope.

Transitions:
    create      -> draft (default) or published; never archived
    publish     draft/archived -> published; title and content non-blank
    unpublish   published -> draft
    archive     draft/published -> archived
    save_draft  any -> draft; blank title/content allowed
    update      patches supplied fields; status only when named
    delete      removes links, then the row

``published_at`` is stamped the first time an article is published and
kept through later unpublish/archive/draft transitions unless the caller
passes ``clear_published_at=True``.

Usage:
    lifecycle = ArticleLifecycle(db)
    record = lifecycle.create({"title": "Hi", "content": "..."}, identity)
    record = lifecycle.publish(record.id, expected_version=record.version)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

# --- Local imports ---
from folio.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from folio.core.identity import Identity
from folio.core.logging_manager import FolioLogger
from folio.core.pagination import PaginatedResult, PaginationOptions
from folio.core.validators import DataValidator
from folio.database.decorators import handle_db_errors, log_database_operation
from folio.database.manager import FolioDB
from folio.database.managers.article_manager import parse_status
from folio.database.models import Article, ArticleStatus, Category, Tag
from folio.dataclasses.records import ArticleRecord


class ArticleLifecycle:
    """
    Article state machine over a FolioDB.

    Attributes:
        db: Database manager providing session scopes and managers
        logger: Logger for operation tracking (defaults to the db's)
    """

    def __init__(self, db: FolioDB, logger: Optional[FolioLogger] = None) -> None:
        self.db = db
        self.logger = logger if logger is not None else db.logger

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _record(self, article: Article) -> ArticleRecord:
        """Snapshot an article inside the current scope."""
        assoc = self.db.associations
        return ArticleRecord.from_database(
            article,
            category_ids=assoc.get_category_ids(article.id),
            tag_ids=assoc.get_tag_ids(article.id),
        )

    def _records(self, articles: List[Article]) -> List[ArticleRecord]:
        categories, tags = self.db.associations.get_links(a.id for a in articles)
        return [
            ArticleRecord.from_database(a, categories[a.id], tags[a.id])
            for a in articles
        ]

    def _read_back(self, article_id: int) -> ArticleRecord:
        """Load the committed state of an article in a fresh scope."""
        with self.db.session_scope():
            return self._record(self.db.articles.require(article_id))

    def _apply_links(self, article_id: int, data: Dict[str, Any]) -> None:
        """Replace association sets named in ``data`` (absent keys are untouched)."""
        if "category_ids" in data:
            self.db.associations.set_categories(article_id, data["category_ids"])
        if "tag_ids" in data:
            self.db.associations.set_tags(article_id, data["tag_ids"])

    def _mutate(
        self,
        article_id: Any,
        expected_version: Optional[int],
        change: Callable[[Article], None],
    ) -> ArticleRecord:
        """
        Run ``change`` against the article in one transaction, then read back.

        Raises:
            NotFoundError: If the article does not exist
            StaleWriteError: If ``expected_version`` does not match
        """
        article_id = DataValidator.normalize_id(article_id, "article_id")
        with self.db.session_scope():
            article = self.db.articles.require(article_id)
            self.db.articles.check_version(article, expected_version)
            change(article)
            self.db.articles.touch(article)
        return self._read_back(article_id)

    @staticmethod
    def _require_publishable(article: Article) -> None:
        for field in ("title", "content"):
            if not (getattr(article, field) or "").strip():
                raise ValidationError(
                    f"Cannot publish: {field} is empty", field=field
                )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("article_create")
    def create(self, data: Dict[str, Any], identity: Identity) -> ArticleRecord:
        """
        Create an article owned by ``identity``.

        Args:
            data: title, content (required, non-blank), excerpt, status
                ('draft' or 'published'), category_ids, tag_ids
            identity: Authenticated caller; its user_id becomes author_id

        Returns:
            The committed ArticleRecord

        Raises:
            ValidationError: On blank/oversized fields or an invalid status
            NotFoundError: If a category or tag id does not exist
        """
        with self.db.session_scope():
            article = self.db.articles.create({**data, "author_id": identity.user_id})
            self._apply_links(article.id, data)
            article_id = article.id
        return self._read_back(article_id)

    @handle_db_errors
    @log_database_operation("article_update")
    def update(
        self,
        article_id: Any,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None,
        clear_published_at: bool = False,
    ) -> ArticleRecord:
        """
        Patch supplied fields; change status only when the patch names one.

        Args:
            article_id: Article to update
            patch: Any of title, content, excerpt, status, category_ids, tag_ids
            expected_version: Version the caller last read (optional)
            clear_published_at: Drop published_at when the resulting status
                is not published

        Raises:
            NotFoundError, ValidationError, StaleWriteError
        """

        def change(article: Article) -> None:
            self.db.articles.apply_fields(article, patch, require_non_blank=True)
            if patch.get("status") is not None:
                status = parse_status(patch["status"])
                if status == ArticleStatus.PUBLISHED:
                    self._require_publishable(article)
                self.db.articles.set_status(article, status, clear_published_at)
            elif clear_published_at and article.status != ArticleStatus.PUBLISHED:
                article.published_at = None
            self._apply_links(article.id, patch)

        return self._mutate(article_id, expected_version, change)

    @handle_db_errors
    @log_database_operation("article_delete")
    def delete(self, article_id: Any, expected_version: Optional[int] = None) -> None:
        """
        Delete an article and its links in one transaction.

        Raises:
            NotFoundError: If the article does not exist
            StaleWriteError: If ``expected_version`` does not match
        """
        article_id = DataValidator.normalize_id(article_id, "article_id")
        with self.db.session_scope():
            article = self.db.articles.require(article_id)
            self.db.articles.check_version(article, expected_version)
            self.db.associations.clear(article.id)
            self.db.articles.delete(article)

    @handle_db_errors
    @log_database_operation("article_publish")
    def publish(self, article_id: Any, expected_version: Optional[int] = None) -> ArticleRecord:
        """
        Publish a draft or archived article.

        Raises:
            InvalidTransitionError: If already published
            ValidationError: If title or content is blank
        """

        def change(article: Article) -> None:
            if article.status == ArticleStatus.PUBLISHED:
                raise InvalidTransitionError(
                    f"Article {article.id} is already published",
                    current=article.status.value,
                    operation="publish",
                )
            self._require_publishable(article)
            self.db.articles.set_status(article, ArticleStatus.PUBLISHED)

        return self._mutate(article_id, expected_version, change)

    @handle_db_errors
    @log_database_operation("article_unpublish")
    def unpublish(
        self,
        article_id: Any,
        expected_version: Optional[int] = None,
        clear_published_at: bool = False,
    ) -> ArticleRecord:
        """
        Return a published article to draft.

        Raises:
            InvalidTransitionError: If the article is not published
        """

        def change(article: Article) -> None:
            if article.status != ArticleStatus.PUBLISHED:
                raise InvalidTransitionError(
                    f"Article {article.id} is not published",
                    current=article.status.value,
                    operation="unpublish",
                )
            self.db.articles.set_status(article, ArticleStatus.DRAFT, clear_published_at)

        return self._mutate(article_id, expected_version, change)

    @handle_db_errors
    @log_database_operation("article_archive")
    def archive(
        self,
        article_id: Any,
        expected_version: Optional[int] = None,
        clear_published_at: bool = False,
    ) -> ArticleRecord:
        """
        Archive a draft or published article.

        Raises:
            InvalidTransitionError: If already archived
        """

        def change(article: Article) -> None:
            if article.status == ArticleStatus.ARCHIVED:
                raise InvalidTransitionError(
                    f"Article {article.id} is already archived",
                    current=article.status.value,
                    operation="archive",
                )
            self.db.articles.set_status(article, ArticleStatus.ARCHIVED, clear_published_at)

        return self._mutate(article_id, expected_version, change)

    @handle_db_errors
    @log_database_operation("article_save_draft")
    def save_draft(
        self,
        article_id: Any,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None,
        clear_published_at: bool = False,
    ) -> ArticleRecord:
        """
        Patch fields and force the article to draft.

        Any status in the patch is ignored. Title and content may be blank;
        length limits still apply.
        """

        def change(article: Article) -> None:
            self.db.articles.apply_fields(article, patch, require_non_blank=False)
            self.db.articles.set_status(article, ArticleStatus.DRAFT, clear_published_at)
            self._apply_links(article.id, patch)

        return self._mutate(article_id, expected_version, change)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get_by_id(self, article_id: Any) -> Optional[ArticleRecord]:
        """Any article by id, or None."""
        with self.db.session_scope():
            article = self.db.articles.get(article_id)
            return self._record(article) if article is not None else None

    @handle_db_errors
    def get_published_by_id(self, article_id: Any) -> Optional[ArticleRecord]:
        """A published article by id; None if absent or not published."""
        with self.db.session_scope():
            article = self.db.articles.get(article_id)
            if article is None or article.status != ArticleStatus.PUBLISHED:
                return None
            return self._record(article)

    def _page(
        self,
        pagination: Optional[PaginationOptions],
        default_sort: str = "created_at",
        **filters: Any,
    ) -> PaginatedResult[ArticleRecord]:
        options = pagination or PaginationOptions()
        with self.db.session_scope():
            articles, total = self.db.articles.paginate(options, default_sort, **filters)
            return PaginatedResult(
                data=self._records(articles),
                page=options.page,
                limit=options.limit,
                total=total,
            )

    @handle_db_errors
    @log_database_operation("articles_by_author")
    def get_by_author(
        self, author_id: str, pagination: Optional[PaginationOptions] = None
    ) -> PaginatedResult[ArticleRecord]:
        """All of an author's articles, any status."""
        return self._page(pagination, author_id=author_id)

    @handle_db_errors
    @log_database_operation("articles_by_author_published")
    def get_by_author_published(
        self, author_id: str, pagination: Optional[PaginationOptions] = None
    ) -> PaginatedResult[ArticleRecord]:
        """An author's published articles."""
        return self._page(
            pagination, author_id=author_id, status=ArticleStatus.PUBLISHED
        )

    @handle_db_errors
    @log_database_operation("articles_published")
    def get_published(
        self,
        pagination: Optional[PaginationOptions] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> PaginatedResult[ArticleRecord]:
        """
        Published articles, newest publication first by default.

        Args:
            pagination: Page options
            start_date, end_date: Inclusive bounds on published_at
        """
        return self._page(
            pagination,
            default_sort="published_at",
            status=ArticleStatus.PUBLISHED,
            published_from=DataValidator.normalize_datetime(start_date, "start_date"),
            published_to=DataValidator.normalize_datetime(end_date, "end_date"),
        )

    @handle_db_errors
    @log_database_operation("articles_all")
    def get_all(
        self, pagination: Optional[PaginationOptions] = None
    ) -> PaginatedResult[ArticleRecord]:
        """Every article regardless of status."""
        return self._page(pagination)

    @handle_db_errors
    @log_database_operation("articles_by_status")
    def get_by_status(
        self, status: Any, pagination: Optional[PaginationOptions] = None
    ) -> PaginatedResult[ArticleRecord]:
        """Articles in one status."""
        return self._page(pagination, status=parse_status(status))

    @handle_db_errors
    @log_database_operation("articles_by_category")
    def get_by_category(
        self, category_id: Any, pagination: Optional[PaginationOptions] = None
    ) -> PaginatedResult[ArticleRecord]:
        """
        Published articles in a category.

        Raises:
            NotFoundError: If the category does not exist
        """
        category_id = self._require_exists(Category, category_id, "category_id")
        return self._page(
            pagination, status=ArticleStatus.PUBLISHED, category_id=category_id
        )

    @handle_db_errors
    @log_database_operation("articles_by_tag")
    def get_by_tag(
        self, tag_id: Any, pagination: Optional[PaginationOptions] = None
    ) -> PaginatedResult[ArticleRecord]:
        """
        Published articles carrying a tag.

        Raises:
            NotFoundError: If the tag does not exist
        """
        tag_id = self._require_exists(Tag, tag_id, "tag_id")
        return self._page(pagination, status=ArticleStatus.PUBLISHED, tag_id=tag_id)

    def _require_exists(self, model_class: type, entity_id: Any, field: str) -> int:
        entity_id = DataValidator.normalize_id(entity_id, field)
        with self.db.session_scope() as session:
            if session.get(model_class, entity_id) is None:
                name = model_class.__name__
                raise NotFoundError(
                    f"{name} {entity_id} not found", entity=name.lower(), id=entity_id
                )
        return entity_id
