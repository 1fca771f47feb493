"""
test_related.py
---------------
Integration tests for taxonomy-overlap related content.
"""
import pytest
from datetime import datetime

from sqlalchemy import update

from folio.core.exceptions import NotFoundError, ValidationError
from folio.database.models import Article


def _set_published_at(test_db, article_id, when):
    with test_db.session_scope() as session:
        session.execute(
            update(Article).where(Article.id == article_id).values(published_at=when)
        )


@pytest.fixture
def abc(taxonomy, make_article):
    """A {x, y}/{c1}; B {x}/{c1}; C {z} with no category."""
    c1 = taxonomy.create_category("c1").id
    x, y, z = (taxonomy.create_tag(name).id for name in ("x", "y", "z"))
    return {
        "a": make_article("A", status="published", category_ids=[c1], tag_ids=[x, y]),
        "b": make_article("B", status="published", category_ids=[c1], tag_ids=[x]),
        "c": make_article("C", status="published", tag_ids=[z]),
        "c1": c1,
        "x": x,
        "y": y,
    }


class TestFindRelated:

    def test_shared_taxonomy_ranks_and_excludes_zero(self, related, abc):
        scored = related.find_related_scored(abc["a"].id)
        assert [(r.article.title, r.match_score) for r in scored] == [("B", 2)]

    def test_plain_records(self, related, abc):
        assert [r.title for r in related.find_related(abc["b"].id)] == ["A"]

    def test_never_returns_source(self, related, abc):
        ids = [r.id for r in related.find_related(abc["a"].id, limit=10)]
        assert abc["a"].id not in ids

    def test_orders_by_score_then_publish_time(self, related, make_article, abc, test_db):
        partial_old = make_article("Old", status="published", tag_ids=[abc["y"]])
        partial_new = make_article("New", status="published", tag_ids=[abc["x"]])
        _set_published_at(test_db, partial_old.id, datetime(2020, 1, 1))
        _set_published_at(test_db, partial_new.id, datetime(2021, 1, 1))

        titles = [r.title for r in related.find_related(abc["a"].id, limit=10)]
        assert titles == ["B", "New", "Old"]

    def test_limit_caps_results(self, related, make_article, abc):
        for n in range(4):
            make_article(f"Extra {n}", status="published", tag_ids=[abc["x"]])
        assert len(related.find_related(abc["a"].id, limit=3)) == 3
        with pytest.raises(ValidationError):
            related.find_related(abc["a"].id, limit=0)

    def test_excludes_unpublished_candidates(self, related, lifecycle, abc):
        lifecycle.unpublish(abc["b"].id)
        assert related.find_related(abc["a"].id) == []

    def test_unpublished_source_returns_empty(self, related, lifecycle, abc):
        lifecycle.archive(abc["a"].id)
        assert related.find_related(abc["a"].id) == []

    def test_missing_source(self, related):
        with pytest.raises(NotFoundError):
            related.find_related(999)

    def test_invalid_id(self, related):
        with pytest.raises(ValidationError):
            related.find_related("abc")


class TestFallback:

    def test_untagged_source_gets_recent_articles(self, related, make_article, test_db):
        lonely = make_article("Lonely", status="published")
        older = make_article("Older", status="published")
        newer = make_article("Newer", status="published")
        make_article("Unpublished")
        _set_published_at(test_db, older.id, datetime(2020, 1, 1))
        _set_published_at(test_db, newer.id, datetime(2021, 1, 1))

        scored = related.find_related_scored(lonely.id)
        assert [(r.article.title, r.match_score) for r in scored] == [
            ("Newer", 0),
            ("Older", 0),
        ]

    def test_fallback_respects_limit(self, related, make_article):
        lonely = make_article("Lonely", status="published")
        for n in range(3):
            make_article(f"Other {n}", status="published")
        assert len(related.find_related(lonely.id, limit=2)) == 2
