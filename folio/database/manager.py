#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the Folio content store.

Provides the FolioDB class: the SQLite engine, the session factory, the
transactional ``session_scope()`` and access to the session-bound entity
managers.

Key Features:
    - Transaction management with rollback on any exception, including
      BaseException cancellations, and guaranteed session release
    - Foreign keys enforced on every connection
    - SAVEPOINT support for get-or-create races
    - Writers serialize on the SQLite busy timeout (BEGIN IMMEDIATE)
    - Schema creation with tag usage triggers and the FTS5 search index
    - Entity managers available as properties inside a session scope

Usage:
    db = FolioDB("~/data/folio.db", log_dir="~/logs")
    db.initialize_schema()

    with db.session_scope() as session:
        category = db.categories.create({"name": "News"})
        tag = db.tags.find_or_create("python")

Notes
==============
- Schema evolution is out of scope: initialize_schema() creates missing
  tables and (re)installs triggers, nothing more
- Datetimes are stored as naive UTC
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine, event, func, inspect, select
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from folio.core.exceptions import DatabaseError
from folio.core.logging_manager import FolioLogger, safe_logger
from .decorators import DatabaseOperation, handle_db_errors
from .managers import (
    ArticleManager,
    AssociationManager,
    CategoryManager,
    TagManager,
)
from .models import (
    Article,
    ArticleStatus,
    Base,
    Category,
    Tag,
    article_categories,
    article_tags,
)
from .triggers import install_usage_triggers


class _ScopeManagers:
    """Managers bound to one open session."""

    def __init__(self, session: Session, logger: Optional[FolioLogger]) -> None:
        self.session = session
        self.articles = ArticleManager(session, logger)
        self.categories = CategoryManager(session, logger)
        self.tags = TagManager(session, logger)
        self.associations = AssociationManager(session, logger)


# ----- Main Database Manager -----
class FolioDB:
    """
    Main database manager for the Folio content store.

    Attributes:
        db_path (Path): Filesystem path to the SQLite database file
        engine (Engine): SQLAlchemy engine instance
        SessionLocal (sessionmaker): SQLAlchemy session factory
        logger (FolioLogger | None): Component logger

    Manager properties (``articles``, ``categories``, ``tags``,
    ``associations``) resolve to the innermost scope opened by the current
    thread and raise DatabaseError outside any scope.
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Union[str, Path],
        log_dir: Optional[Union[str, Path]] = None,
        logger: Optional[FolioLogger] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path: Path to the SQLite file
            log_dir: Directory for log files (optional)
            logger: Existing logger to use instead of creating one
        """
        self.db_path = Path(db_path).expanduser().resolve()

        if logger is not None:
            self.logger: Optional[FolioLogger] = logger
        elif log_dir:
            self.log_dir = Path(log_dir).expanduser().resolve() / "system"
            self.logger = FolioLogger(self.log_dir, component_name="database")
        else:
            self.logger = None

        self._local = threading.local()
        self._setup_engine()

    def _setup_engine(self) -> None:
        """Initialize database engine and session factory."""
        try:
            safe_logger(self.logger).log_operation(
                "database_init_start", {"db_path": str(self.db_path)}
            )
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine: Engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                pool_pre_ping=True,
            )
            self._install_connection_hooks(self.engine)

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
            )
            safe_logger(self.logger).log_operation(
                "database_init_complete", {"success": True}
            )
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}") from e

    @staticmethod
    def _install_connection_hooks(engine: Engine) -> None:
        """
        Enable foreign keys and let SQLAlchemy own transaction boundaries.

        pysqlite's implicit BEGIN handling breaks SAVEPOINT; the driver is
        put in autocommit mode and BEGIN is emitted explicitly instead.

        Transactions start with BEGIN IMMEDIATE: the write lock is taken at
        BEGIN, where busy_timeout applies, never by a later read-to-write
        upgrade, which SQLite fails at once under contention.
        """

        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    # ---- Schema ----
    def initialize_schema(self) -> None:
        """
        Create tables, usage-count triggers and the search index.

        Safe to call on an existing database: tables are only created when
        missing, triggers are re-created, and the search index is built
        (and populated) only if it does not exist yet.
        """
        # Local import: folio.search depends on this module
        from folio.search.search_index import SearchIndexManager

        with DatabaseOperation(self.logger, "initialize_schema"):
            try:
                Base.metadata.create_all(bind=self.engine)
                install_usage_triggers(self.engine, self.logger)

                index = SearchIndexManager(self.engine, self.logger)
                if not index.index_exists():
                    index.create_index()
                    with self.session_scope() as session:
                        index.populate_index(session)
                index.setup_triggers()
            except DatabaseError:
                raise
            except Exception as e:
                raise DatabaseError(f"Could not initialize database: {e}") from e

    def is_initialized(self) -> bool:
        """True if every model table exists."""
        existing = set(inspect(self.engine).get_table_names())
        return set(Base.metadata.tables).issubset(existing)

    def reset(self) -> None:
        """Drop every table (and the search index) and recreate the schema."""
        from folio.search.search_index import SearchIndexManager

        with DatabaseOperation(self.logger, "reset_database"):
            SearchIndexManager(self.engine, self.logger).drop_index()
            Base.metadata.drop_all(bind=self.engine)
        self.initialize_schema()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    # ---- Session Management ----
    def _scope_stack(self) -> List[_ScopeManagers]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around a unit of work.

        Commits on normal exit. Any exception, BaseException included,
        rolls back before propagating. The session is always closed.

        Usage:
            with db.session_scope() as session:
                article = db.articles.require(4)
                db.associations.set_tags(article.id, [1, 2])
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        stack = self._scope_stack()
        stack.append(_ScopeManagers(session, self.logger))
        logger = safe_logger(self.logger)
        logger.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            logger.log_debug("session_commit", {"session_id": session_id})
        except BaseException as e:
            session.rollback()
            if isinstance(e, Exception):
                logger.log_error(
                    e, {"operation": "session_rollback", "session_id": session_id}
                )
            else:
                logger.log_warning(
                    "session_rollback", {"session_id": session_id, "reason": type(e).__name__}
                )
            raise
        finally:
            stack.pop()
            session.close()
            logger.log_debug("session_close", {"session_id": session_id})

    def get_session(self) -> Session:
        """Create and return a new SQLAlchemy session (caller closes it)."""
        return self.SessionLocal()

    # -------------------------------------------------------------------------
    # Entity Manager Properties
    # -------------------------------------------------------------------------

    def _current(self, name: str) -> _ScopeManagers:
        stack = self._scope_stack()
        if not stack:
            raise DatabaseError(
                f"{name} requires an active session. "
                f"Use within session_scope: with db.session_scope(): db.{name}..."
            )
        return stack[-1]

    @property
    def articles(self) -> ArticleManager:
        """ArticleManager bound to the current session scope."""
        return self._current("articles").articles

    @property
    def categories(self) -> CategoryManager:
        """CategoryManager bound to the current session scope."""
        return self._current("categories").categories

    @property
    def tags(self) -> TagManager:
        """TagManager bound to the current session scope."""
        return self._current("tags").tags

    @property
    def associations(self) -> AssociationManager:
        """AssociationManager bound to the current session scope."""
        return self._current("associations").associations

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @handle_db_errors
    def get_stats(self) -> Dict[str, int]:
        """
        Row counts for the main tables.

        Returns:
            Dict with total articles, one entry per status, categories,
            tags, and link rows
        """
        with self.session_scope() as session:
            stats: Dict[str, int] = {
                "articles": session.scalar(select(func.count()).select_from(Article)),
            }
            by_status = dict(
                session.execute(
                    select(Article.status, func.count()).group_by(Article.status)
                ).all()
            )
            for status in ArticleStatus:
                stats[status.value] = int(by_status.get(status, 0))
            stats["categories"] = session.scalar(select(func.count()).select_from(Category))
            stats["tags"] = session.scalar(select(func.count()).select_from(Tag))
            stats["category_links"] = session.scalar(
                select(func.count()).select_from(article_categories)
            )
            stats["tag_links"] = session.scalar(
                select(func.count()).select_from(article_tags)
            )
        return stats

    # ----- Context Manager Support -----
    def __enter__(self) -> "FolioDB":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
