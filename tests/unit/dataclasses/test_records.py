"""Tests for the plain records handed across the service boundary."""
import json
from datetime import datetime
from types import SimpleNamespace

from folio.database.models import ArticleStatus
from folio.dataclasses import (
    ArticleRecord,
    CategoryRecord,
    RelatedArticle,
    SearchResult,
    TagRecord,
)

STAMP = datetime(2024, 5, 1, 12, 30)


def _article(**overrides):
    fields = dict(
        id=7,
        title="Hello",
        content="World",
        excerpt=None,
        author_id="alice",
        status=ArticleStatus.PUBLISHED,
        created_at=STAMP,
        updated_at=STAMP,
        published_at=STAMP,
        version=3,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestArticleRecord:

    def test_from_database_sorts_links_and_flattens_status(self):
        record = ArticleRecord.from_database(_article(), category_ids=[3, 1], tag_ids=[9, 2])
        assert record.status == "published"
        assert record.is_published
        assert record.category_ids == [1, 3]
        assert record.tag_ids == [2, 9]

    def test_to_dict_is_json_ready(self):
        record = ArticleRecord.from_database(_article(published_at=None, status=ArticleStatus.DRAFT))
        data = record.to_dict()
        assert data["created_at"] == "2024-05-01T12:30:00"
        assert data["published_at"] is None
        assert data["status"] == "draft"
        assert data["category_ids"] == []
        json.dumps(data)


class TestTaxonomyRecords:

    def test_category_count_only_when_computed(self):
        category = SimpleNamespace(
            id=1, name="Tech", slug="tech", description=None, created_at=STAMP, updated_at=STAMP
        )
        assert "article_count" not in CategoryRecord.from_database(category).to_dict()
        assert CategoryRecord.from_database(category, 4).to_dict()["article_count"] == 4

    def test_tag_to_dict(self):
        tag = SimpleNamespace(id=2, name="python", slug="python", usage_count=5, created_at=STAMP)
        assert TagRecord.from_database(tag).to_dict()["usage_count"] == 5


class TestResultRecords:

    def test_search_result(self):
        record = ArticleRecord.from_database(_article())
        data = SearchResult(record, 1.5, ["title"]).to_dict()
        assert data["article"]["id"] == 7
        assert data["score"] == 1.5
        assert data["matched_fields"] == ["title"]

    def test_related_article(self):
        record = ArticleRecord.from_database(_article())
        assert RelatedArticle(record, 2).to_dict()["match_score"] == 2
