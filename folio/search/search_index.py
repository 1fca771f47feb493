#!/usr/bin/env python3
"""
search_index.py
---------------
Manages the full-text search index for articles using SQLite FTS5.

Features:
- FTS5 virtual table over title, content and excerpt
- Triggers keep the index in sync with every article insert/update/delete
- Porter stemming and Unicode tokenization
- fts5vocab companion table for title-vocabulary suggestions

Usage:
    # Initialize index (done by FolioDB.initialize_schema)
    manager = SearchIndexManager(engine)
    manager.create_index()
    manager.setup_triggers()

    # Rebuild entire index
    manager.rebuild_index()
"""
# --- Standard library imports ---
from typing import List, Optional, Sequence, Set, Union

# --- Third party imports ---
from sqlalchemy import Connection, Engine, text
from sqlalchemy.orm import Session

# --- Local imports ---
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.database.decorators import handle_db_errors

FTS_TABLE = "articles_fts"
VOCAB_TABLE = "articles_fts_vocab"

# bm25 weights in index column order: article_id, title, content, excerpt
BM25_WEIGHTS = (0.0, 1.0, 0.4, 0.2)
SUGGESTION_LIMIT = 10


def bm25_expression() -> str:
    """SQL for the (negated, so higher is better) bm25 score."""
    weights = ", ".join(str(w) for w in BM25_WEIGHTS)
    return f"-bm25({FTS_TABLE}, {weights})"


class SearchIndexManager:
    """Manages the FTS5 full-text search index."""

    def __init__(self, engine: Engine, logger: Optional[FolioLogger] = None):
        self.engine = engine
        self.logger = logger

    def create_index(self) -> None:
        """
        Create the FTS5 virtual table and its vocabulary table.

        The table indexes:
        - article_id: Reference to articles.id (not indexed)
        - title, content, excerpt: Article text

        Uses Porter stemming and Unicode tokenization.
        """
        with self.engine.connect() as conn:
            conn.execute(text(f"DROP TABLE IF EXISTS {VOCAB_TABLE}"))
            conn.execute(text(f"DROP TABLE IF EXISTS {FTS_TABLE}"))

            conn.execute(text(f"""
                CREATE VIRTUAL TABLE {FTS_TABLE} USING fts5(
                    article_id UNINDEXED,
                    title,
                    content,
                    excerpt,
                    tokenize='porter unicode61'
                )
            """))
            conn.execute(text(
                f"CREATE VIRTUAL TABLE {VOCAB_TABLE} USING fts5vocab({FTS_TABLE}, 'col')"
            ))
            conn.commit()

        safe_logger(self.logger).log_info("Created FTS5 search index")

    def drop_index(self) -> None:
        """Drop the index, its vocabulary table and sync triggers."""
        with self.engine.connect() as conn:
            for trigger in ("articles_ai", "articles_au", "articles_ad"):
                conn.execute(text(f"DROP TRIGGER IF EXISTS {trigger}"))
            conn.execute(text(f"DROP TABLE IF EXISTS {VOCAB_TABLE}"))
            conn.execute(text(f"DROP TABLE IF EXISTS {FTS_TABLE}"))
            conn.commit()

    def populate_index(self, session: Union[Session, Connection]) -> int:
        """
        Populate the index from existing articles.

        Args:
            session: Database session or connection

        Returns:
            Number of articles indexed
        """
        session.execute(text(f"DELETE FROM {FTS_TABLE}"))
        session.execute(text(f"""
            INSERT INTO {FTS_TABLE} (article_id, title, content, excerpt)
            SELECT id, title, content, COALESCE(excerpt, '') FROM articles
        """))
        indexed_count = session.scalar(text(f"SELECT COUNT(*) FROM {FTS_TABLE}")) or 0

        safe_logger(self.logger).log_info(f"Indexed {indexed_count} articles")
        return indexed_count

    def setup_triggers(self) -> None:
        """
        Set up database triggers to keep the FTS index in sync.

        Triggers:
        - INSERT: Add new article to index
        - UPDATE: Replace article text in index
        - DELETE: Remove article from index
        """
        with self.engine.connect() as conn:
            conn.execute(text("DROP TRIGGER IF EXISTS articles_ai"))
            conn.execute(text("DROP TRIGGER IF EXISTS articles_au"))
            conn.execute(text("DROP TRIGGER IF EXISTS articles_ad"))

            conn.execute(text(f"""
                CREATE TRIGGER articles_ai AFTER INSERT ON articles BEGIN
                    INSERT INTO {FTS_TABLE}(article_id, title, content, excerpt)
                    VALUES (new.id, new.title, new.content, COALESCE(new.excerpt, ''));
                END
            """))

            conn.execute(text(f"""
                CREATE TRIGGER articles_au
                AFTER UPDATE OF title, content, excerpt ON articles BEGIN
                    UPDATE {FTS_TABLE}
                    SET
                        title = new.title,
                        content = new.content,
                        excerpt = COALESCE(new.excerpt, '')
                    WHERE article_id = new.id;
                END
            """))

            conn.execute(text(f"""
                CREATE TRIGGER articles_ad AFTER DELETE ON articles BEGIN
                    DELETE FROM {FTS_TABLE} WHERE article_id = old.id;
                END
            """))

            conn.commit()

        safe_logger(self.logger).log_info("Created FTS sync triggers")

    @handle_db_errors
    def rebuild_index(self) -> int:
        """
        Rebuild the entire search index from scratch.

        Call outside any open session scope: the index is dropped and
        refilled on a connection of its own.

        Returns:
            Number of articles indexed
        """
        safe_logger(self.logger).log_info("Rebuilding search index...")
        self.create_index()
        self.setup_triggers()
        with self.engine.begin() as conn:
            count = self.populate_index(conn)
        safe_logger(self.logger).log_info(f"Index rebuild complete: {count} articles")
        return count

    def matching_ids(
        self, session: Session, fts_query: str, article_ids: Sequence[int]
    ) -> Set[int]:
        """
        Subset of ``article_ids`` whose indexed text matches ``fts_query``.
        """
        if not fts_query or not article_ids:
            return set()
        placeholders = ", ".join(f":id{i}" for i in range(len(article_ids)))
        params = {f"id{i}": article_id for i, article_id in enumerate(article_ids)}
        params["query"] = fts_query
        rows = session.execute(
            text(f"""
                SELECT article_id FROM {FTS_TABLE}
                WHERE {FTS_TABLE} MATCH :query
                AND article_id IN ({placeholders})
            """),
            params,
        )
        return {int(row[0]) for row in rows}

    def suggest(
        self, session: Session, prefix: str, limit: int = SUGGESTION_LIMIT
    ) -> List[str]:
        """
        Title vocabulary terms starting with ``prefix``.

        Ordered by the number of articles whose title uses the term, then
        by total occurrences, then alphabetically.
        """
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        rows = session.execute(
            text(f"""
                SELECT term FROM {VOCAB_TABLE}
                WHERE col = 'title' AND term LIKE :pattern ESCAPE '\\'
                ORDER BY doc DESC, cnt DESC, term ASC
                LIMIT :limit
            """),
            {"pattern": f"{escaped}%", "limit": limit},
        )
        return [row[0] for row in rows]

    def index_exists(self) -> bool:
        """Check if the FTS index exists."""
        with self.engine.connect() as conn:
            result = conn.execute(
                text("""
                    SELECT name FROM sqlite_master
                    WHERE type='table' AND name=:name
                """),
                {"name": FTS_TABLE},
            )
            return result.fetchone() is not None
