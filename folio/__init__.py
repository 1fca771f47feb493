"""
Folio Content Package
=====================

Content-management core for authored articles.

Authenticated authors create, publish and categorize articles; visitors
search and discover content. The package keeps article rows, their
category/tag associations and the derived full-text index consistent inside
single SQLite transactions.

Main Components:
    - database: SQLAlchemy ORM, session-bound entity managers, CLI
    - services: Lifecycle and taxonomy services returning plain records
    - search: Query normalization, FTS5 ranking, suggestions, related content
    - core: Logging, validation, exceptions, paths, pagination, identity
    - dataclasses: Plain records handed to callers
    - utils: Slug generation

Primary Interfaces:
    - folio.database.manager.FolioDB: Engine and session scope
    - folio.services.ArticleLifecycle: Article state machine
    - folio.services.TaxonomyService: Categories and tags
    - folio.search.RelevanceEngine / RelatedContentMatcher: Discovery

Example Usage:
    >>> from folio import FolioDB
    >>> from folio.services import ArticleLifecycle
    >>> from folio.core.identity import Identity, Role
    >>> db = FolioDB(db_path="folio.db")
    >>> articles = ArticleLifecycle(db)
    >>> author = Identity(user_id="u-1", role=Role.AUTHOR)
    >>> article = articles.create({"title": "Hello", "content": "World"}, author)
"""

__version__ = "0.1.0"
__author__ = "Folio Project"

# Expose primary interfaces for convenience
from folio.database.manager import FolioDB
from folio.core.paths import DATA_DIR, DB_PATH, LOG_DIR

__all__ = [
    "FolioDB",
    "DATA_DIR",
    "DB_PATH",
    "LOG_DIR",
]
