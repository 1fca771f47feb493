"""
test_taxonomy_service.py
------------------------
Tests for TaxonomyService: committed records, counts and maintenance.
"""
import pytest

from folio.core.exceptions import ConflictError, NotFoundError, ValidationError
from folio.dataclasses.records import CategoryRecord, TagRecord


class TestCategories:

    def test_create_returns_record(self, taxonomy):
        record = taxonomy.create_category("Web Development", "All things web")
        assert isinstance(record, CategoryRecord)
        assert record.slug == "web-development"
        assert record.description == "All things web"
        assert record.created_at is not None

    def test_duplicate_slug_conflicts(self, taxonomy):
        taxonomy.create_category("Web Development")
        with pytest.raises(ConflictError):
            taxonomy.create_category("web development!")

    def test_blank_name_rejected(self, taxonomy):
        with pytest.raises(ValidationError):
            taxonomy.create_category("   ")

    def test_update_regenerates_slug(self, taxonomy):
        record = taxonomy.create_category("News")
        updated = taxonomy.update_category(record.id, {"name": "World News"})
        assert updated.slug == "world-news"
        assert taxonomy.get_category_by_slug("news") is None
        assert taxonomy.get_category_by_slug("world-news").id == record.id

    def test_update_missing(self, taxonomy):
        with pytest.raises(NotFoundError):
            taxonomy.update_category(42, {"name": "Nope"})

    def test_list_ordered_by_name(self, taxonomy):
        for name in ("Zebra", "Apple", "Mango"):
            taxonomy.create_category(name)
        assert [c.name for c in taxonomy.list_categories()] == ["Apple", "Mango", "Zebra"]

    def test_counts_include_only_published(self, taxonomy, make_article, seeded_taxonomy):
        tech = seeded_taxonomy["tech"]
        make_article(status="published", category_ids=[tech])
        make_article(status="published", category_ids=[tech])
        make_article(category_ids=[tech])

        counts = {c.name: c.article_count for c in taxonomy.list_categories_with_counts()}
        assert counts == {"Tech": 2, "Travel": 0}

    def test_delete_unlinks_articles(self, taxonomy, lifecycle, make_article, seeded_taxonomy):
        record = make_article(category_ids=[seeded_taxonomy["tech"], seeded_taxonomy["travel"]])
        taxonomy.delete_category(seeded_taxonomy["tech"])

        assert taxonomy.get_category(seeded_taxonomy["tech"]) is None
        assert lifecycle.get_by_id(record.id).category_ids == [seeded_taxonomy["travel"]]


class TestTags:

    def test_create_and_find_or_create(self, taxonomy):
        created = taxonomy.create_tag("Machine Learning")
        assert isinstance(created, TagRecord)
        assert created.usage_count == 0

        found = taxonomy.find_or_create_tag("machine learning")
        assert found.id == created.id
        assert len(taxonomy.list_tags()) == 1

    def test_create_duplicate_conflicts(self, taxonomy):
        taxonomy.create_tag("python")
        with pytest.raises(ConflictError):
            taxonomy.create_tag("python")

    def test_usage_follows_article_links(self, taxonomy, lifecycle, make_article, seeded_taxonomy):
        python = seeded_taxonomy["python"]
        first = make_article(tag_ids=[python])
        make_article(tag_ids=[python, seeded_taxonomy["sql"]])
        assert taxonomy.get_tag(python).usage_count == 2

        lifecycle.update(first.id, {"tag_ids": []})
        assert taxonomy.get_tag(python).usage_count == 1

    def test_popular_excludes_unused(self, taxonomy, make_article, seeded_taxonomy):
        make_article(tag_ids=[seeded_taxonomy["sql"]])
        make_article(tag_ids=[seeded_taxonomy["sql"], seeded_taxonomy["python"]])

        popular = taxonomy.popular_tags(limit=5)
        assert [t.name for t in popular] == ["sql", "python"]

    def test_search_by_name(self, taxonomy, seeded_taxonomy):
        assert [t.name for t in taxonomy.search_tags_by_name("PY")] == ["python"]
        assert taxonomy.search_tags_by_name("  ") == []

    def test_manual_counters(self, taxonomy, seeded_taxonomy):
        hiking = seeded_taxonomy["hiking"]
        assert taxonomy.increment_usage(hiking) == 1
        assert taxonomy.decrement_usage(hiking) == 0
        assert taxonomy.decrement_usage(hiking) == 0

    def test_recount_repairs_drift(self, taxonomy, make_article, seeded_taxonomy):
        make_article(tag_ids=[seeded_taxonomy["sql"]])
        taxonomy.increment_usage(seeded_taxonomy["sql"])
        taxonomy.increment_usage(seeded_taxonomy["hiking"])

        assert taxonomy.recount_usage() == 2
        assert taxonomy.get_tag(seeded_taxonomy["sql"]).usage_count == 1
        assert taxonomy.get_tag(seeded_taxonomy["hiking"]).usage_count == 0
        assert taxonomy.recount_usage() == 0

    def test_cleanup_unused(self, taxonomy, make_article, seeded_taxonomy):
        make_article(tag_ids=[seeded_taxonomy["python"]])
        assert taxonomy.cleanup_unused_tags() == 2
        assert [t.name for t in taxonomy.list_tags()] == ["python"]

    def test_delete_missing(self, taxonomy):
        with pytest.raises(NotFoundError):
            taxonomy.delete_tag(5)
