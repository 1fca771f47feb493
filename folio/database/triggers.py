#!/usr/bin/env python3
"""
triggers.py
-----------
SQLite triggers that keep ``tags.usage_count`` equal to the number of live
``article_tags`` rows.

The counters move inside the same statement as the link insert/delete, so
they stay correct however the link rows are written (association
replacement, article deletion, ON DELETE CASCADE) and under concurrent
writers, which SQLite serializes.

Usage:
    from folio.database.triggers import install_usage_triggers

    install_usage_triggers(engine)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Optional

# --- Third party imports ---
from sqlalchemy import Engine, text

# --- Local imports ---
from folio.core.logging_manager import FolioLogger, safe_logger

INCREMENT_USAGE_SQL = "UPDATE tags SET usage_count = usage_count + 1 WHERE id = {tag_id}"
DECREMENT_USAGE_SQL = (
    "UPDATE tags SET usage_count = MAX(usage_count - 1, 0) WHERE id = {tag_id}"
)


def install_usage_triggers(engine: Engine, logger: Optional[FolioLogger] = None) -> None:
    """
    (Re)create the article_tags insert/delete triggers.

    Args:
        engine: Engine bound to an initialized Folio schema
        logger: Optional logger
    """
    with engine.connect() as conn:
        conn.execute(text("DROP TRIGGER IF EXISTS article_tags_ai"))
        conn.execute(text("DROP TRIGGER IF EXISTS article_tags_ad"))

        conn.execute(text(f"""
            CREATE TRIGGER article_tags_ai AFTER INSERT ON article_tags BEGIN
                {INCREMENT_USAGE_SQL.format(tag_id="new.tag_id")};
            END
        """))
        conn.execute(text(f"""
            CREATE TRIGGER article_tags_ad AFTER DELETE ON article_tags BEGIN
                {DECREMENT_USAGE_SQL.format(tag_id="old.tag_id")};
            END
        """))
        conn.commit()

    safe_logger(logger).log_info("Created tag usage-count triggers")
