"""
conftest.py
-----------
Shared pytest fixtures for Folio tests.

Provides fixtures for:
- Temporary SQLite databases initialized through FolioDB
- Session-bound managers for unit tests
- Services (lifecycle, taxonomy, search, related content)
- A seeded taxonomy and identities
"""
import pytest
from pathlib import Path
from unittest.mock import MagicMock

from folio.core.identity import Identity, Role
from folio.core.logging_manager import FolioLogger
from folio.database.manager import FolioDB
from folio.database.managers import (
    ArticleManager,
    AssociationManager,
    CategoryManager,
    TagManager,
)
from folio.search.related import RelatedContentMatcher
from folio.search.search_engine import RelevanceEngine
from folio.services.articles import ArticleLifecycle
from folio.services.taxonomy import TaxonomyService


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir(tmp_path):
    """Temporary directory for test file operations."""
    return Path(tmp_path)


@pytest.fixture
def test_db_path(tmp_dir):
    """Path to a fresh database file."""
    return tmp_dir / "test.db"


# ----- Logger Fixtures -----

@pytest.fixture
def mock_logger():
    """A MagicMock standing in for FolioLogger."""
    return MagicMock(spec=FolioLogger)


# ----- Database Fixtures -----

@pytest.fixture
def test_db(test_db_path):
    """Initialized FolioDB on a temporary file."""
    db = FolioDB(test_db_path)
    db.initialize_schema()
    yield db
    db.dispose()


@pytest.fixture
def db_session(test_db):
    """Raw session for manager-level tests (caller commits)."""
    session = test_db.get_session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def article_manager(db_session):
    return ArticleManager(db_session)


@pytest.fixture
def category_manager(db_session):
    return CategoryManager(db_session)


@pytest.fixture
def tag_manager(db_session):
    return TagManager(db_session)


@pytest.fixture
def association_manager(db_session):
    return AssociationManager(db_session)


# ----- Service Fixtures -----

@pytest.fixture
def lifecycle(test_db):
    return ArticleLifecycle(test_db)


@pytest.fixture
def taxonomy(test_db):
    return TaxonomyService(test_db)


@pytest.fixture
def relevance(test_db):
    return RelevanceEngine(test_db)


@pytest.fixture
def related(test_db):
    return RelatedContentMatcher(test_db)


# ----- Identity Fixtures -----

@pytest.fixture
def author():
    return Identity(user_id="alice", role=Role.AUTHOR)


@pytest.fixture
def other_author():
    return Identity(user_id="bob", role=Role.AUTHOR)


# ----- Data Fixtures -----

@pytest.fixture
def seeded_taxonomy(taxonomy):
    """
    Two categories and three tags.

    Returns:
        Dict of name -> id for categories ('tech', 'travel') and tags
        ('python', 'sql', 'hiking')
    """
    return {
        "tech": taxonomy.create_category("Tech", "Software and hardware").id,
        "travel": taxonomy.create_category("Travel").id,
        "python": taxonomy.create_tag("python").id,
        "sql": taxonomy.create_tag("sql").id,
        "hiking": taxonomy.create_tag("hiking").id,
    }


@pytest.fixture
def make_article(lifecycle, author):
    """Factory creating articles through the lifecycle service."""

    def _make(title="Untitled", content="Some content", identity=None, **fields):
        data = {"title": title, "content": content, **fields}
        return lifecycle.create(data, identity or author)

    return _make
