"""
test_tag_manager.py
-------------------
Unit tests for TagManager CRUD operations and usage counters.

Usage counts are maintained by database triggers on article_tags, so
these tests write link rows through the AssociationManager and re-read
the tags.
"""
import pytest

from folio.core.exceptions import ConflictError, NotFoundError, ValidationError
from folio.database.models import Article, Tag


@pytest.fixture
def article(db_session):
    """A flushed article to attach tags to."""
    article = Article(title="Tagged", content="Body", author_id="alice")
    db_session.add(article)
    db_session.flush()
    return article


def _usage(db_session, tag_id):
    db_session.expire_all()
    return db_session.get(Tag, tag_id).usage_count


class TestTagManagerCreate:

    def test_create_sets_slug_and_zero_usage(self, tag_manager):
        tag = tag_manager.create({"name": "Machine Learning"})
        assert tag.slug == "machine-learning"
        assert tag.usage_count == 0

    def test_duplicate_conflicts(self, tag_manager):
        tag_manager.create({"name": "python"})
        with pytest.raises(ConflictError):
            tag_manager.create({"name": "python"})

    def test_name_length_limit(self, tag_manager):
        tag_manager.create({"name": "x" * 50})
        with pytest.raises(ValidationError):
            tag_manager.create({"name": "y" * 51})


class TestTagManagerFindOrCreate:

    def test_creates_when_missing(self, tag_manager):
        tag = tag_manager.find_or_create("rust")
        assert tag.id is not None
        assert tag.name == "rust"

    def test_returns_existing_by_name(self, tag_manager):
        first = tag_manager.find_or_create("rust")
        assert tag_manager.find_or_create("  rust ") is first

    def test_returns_existing_by_slug(self, tag_manager):
        first = tag_manager.find_or_create("Web Dev")
        assert tag_manager.find_or_create("web-dev") is first

    def test_blank_rejected(self, tag_manager):
        with pytest.raises(ValidationError):
            tag_manager.find_or_create("   ")


class TestTagManagerQueries:

    def test_search_by_name_is_case_insensitive_substring(self, tag_manager):
        for name in ("Python", "python-tips", "rust"):
            tag_manager.create({"name": name})
        names = sorted(t.name for t in tag_manager.search_by_name("PYTH"))
        assert names == ["Python", "python-tips"]

    def test_search_by_name_escapes_wildcards(self, tag_manager):
        tag_manager.create({"name": "100%"})
        tag_manager.create({"name": "1000"})
        assert [t.name for t in tag_manager.search_by_name("0%")] == ["100%"]

    def test_search_by_name_blank_returns_empty(self, tag_manager):
        tag_manager.create({"name": "python"})
        assert tag_manager.search_by_name("  ") == []

    def test_popular_excludes_unused(self, tag_manager, association_manager, article, db_session):
        used = tag_manager.create({"name": "used"})
        tag_manager.create({"name": "unused"})
        association_manager.set_tags(article.id, [used.id])
        db_session.expire_all()

        assert [t.name for t in tag_manager.popular(10)] == ["used"]

    def test_list_all_orders_by_usage_then_name(self, tag_manager, association_manager, article, db_session):
        b = tag_manager.create({"name": "b"})
        tag_manager.create({"name": "a"})
        association_manager.set_tags(article.id, [b.id])
        db_session.expire_all()

        assert [t.name for t in tag_manager.list_all()] == ["b", "a"]


class TestTagUsageCounts:

    def test_link_insert_and_delete_move_counter(self, tag_manager, association_manager, article, db_session):
        tag = tag_manager.create({"name": "python"})

        association_manager.set_tags(article.id, [tag.id])
        assert _usage(db_session, tag.id) == 1

        association_manager.set_tags(article.id, [])
        assert _usage(db_session, tag.id) == 0

    def test_replacing_same_set_keeps_counter(self, tag_manager, association_manager, article, db_session):
        tag = tag_manager.create({"name": "python"})
        association_manager.set_tags(article.id, [tag.id])
        association_manager.set_tags(article.id, [tag.id])
        assert _usage(db_session, tag.id) == 1

    def test_increment_and_decrement(self, tag_manager):
        tag = tag_manager.create({"name": "manual"})
        assert tag_manager.increment_usage(tag.id) == 1
        assert tag_manager.increment_usage(tag.id) == 2
        assert tag_manager.decrement_usage(tag.id) == 1

    def test_decrement_never_goes_negative(self, tag_manager):
        tag = tag_manager.create({"name": "floor"})
        assert tag_manager.decrement_usage(tag.id) == 0

    def test_recount_repairs_drift(self, tag_manager, association_manager, article, db_session):
        tag = tag_manager.create({"name": "drifted"})
        association_manager.set_tags(article.id, [tag.id])
        tag_manager.increment_usage(tag.id)

        assert tag_manager.recount_usage() == 1
        assert _usage(db_session, tag.id) == 1
        assert tag_manager.recount_usage() == 0

    def test_cleanup_unused_deletes_zero_usage(self, tag_manager, association_manager, article, db_session):
        keep = tag_manager.create({"name": "keep"})
        drop = tag_manager.create({"name": "drop"})
        association_manager.set_tags(article.id, [keep.id])

        assert tag_manager.cleanup_unused() == 1
        db_session.expire_all()
        assert db_session.get(Tag, drop.id) is None
        assert db_session.get(Tag, keep.id) is not None


class TestTagManagerUpdateDelete:

    def test_rename_regenerates_slug(self, tag_manager):
        tag = tag_manager.create({"name": "old"})
        assert tag_manager.update(tag.id, {"name": "New Name"}).slug == "new-name"

    def test_delete_missing_raises(self, tag_manager):
        with pytest.raises(NotFoundError):
            tag_manager.delete(999)

    def test_delete_removes_links(self, tag_manager, association_manager, article):
        tag = tag_manager.create({"name": "gone"})
        association_manager.set_tags(article.id, [tag.id])
        tag_manager.delete(tag.id)
        assert association_manager.get_tag_ids(article.id) == []
