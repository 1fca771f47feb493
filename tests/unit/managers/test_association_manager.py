"""
test_association_manager.py
---------------------------
Unit tests for replace-semantics article links.
"""
import pytest

from folio.core.exceptions import NotFoundError, ValidationError
from folio.database.models import Article


@pytest.fixture
def articles(db_session):
    rows = [Article(title=f"A{i}", content="Body", author_id="alice") for i in range(2)]
    db_session.add_all(rows)
    db_session.flush()
    return rows


@pytest.fixture
def categories(category_manager):
    return [category_manager.create({"name": name}) for name in ("One", "Two", "Three")]


@pytest.fixture
def tags(tag_manager):
    return [tag_manager.create({"name": name}) for name in ("red", "green")]


class TestSetCategories:

    def test_replaces_previous_set(self, association_manager, articles, categories):
        article = articles[0]
        one, two, three = (c.id for c in categories)

        association_manager.set_categories(article.id, [one, two])
        association_manager.set_categories(article.id, [three])

        assert association_manager.get_category_ids(article.id) == [three]

    def test_returns_sorted_unique_ids(self, association_manager, articles, categories):
        one, two, _ = (c.id for c in categories)
        assert association_manager.set_categories(articles[0].id, [two, one, two]) == [one, two]

    def test_empty_list_clears(self, association_manager, articles, categories):
        association_manager.set_categories(articles[0].id, [categories[0].id])
        association_manager.set_categories(articles[0].id, [])
        assert association_manager.get_category_ids(articles[0].id) == []

    def test_missing_id_writes_nothing(self, association_manager, articles, categories):
        article = articles[0]
        association_manager.set_categories(article.id, [categories[0].id])

        with pytest.raises(NotFoundError) as exc_info:
            association_manager.set_categories(article.id, [categories[1].id, 999])

        assert exc_info.value.details["ids"] == [999]
        assert association_manager.get_category_ids(article.id) == [categories[0].id]

    def test_malformed_id_rejected(self, association_manager, articles):
        with pytest.raises(ValidationError):
            association_manager.set_categories(articles[0].id, ["abc"])

    def test_links_are_per_article(self, association_manager, articles, categories):
        first, second = articles
        association_manager.set_categories(first.id, [categories[0].id])
        association_manager.set_categories(second.id, [categories[1].id])
        assert association_manager.get_category_ids(first.id) == [categories[0].id]


class TestSetTags:

    def test_set_and_read(self, association_manager, articles, tags):
        ids = sorted(t.id for t in tags)
        association_manager.set_tags(articles[0].id, ids)
        assert association_manager.get_tag_ids(articles[0].id) == ids

    def test_missing_tag_raises(self, association_manager, articles):
        with pytest.raises(NotFoundError):
            association_manager.set_tags(articles[0].id, [42])


class TestLinksBatch:

    def test_get_links_covers_every_article(self, association_manager, articles, categories, tags):
        first, second = articles
        association_manager.set_categories(first.id, [categories[0].id])
        association_manager.set_tags(first.id, [tags[1].id])

        category_map, tag_map = association_manager.get_links([first.id, second.id])

        assert category_map == {first.id: [categories[0].id], second.id: []}
        assert tag_map == {first.id: [tags[1].id], second.id: []}

    def test_get_links_empty_input(self, association_manager):
        assert association_manager.get_links([]) == ({}, {})

    def test_clear(self, association_manager, articles, categories, tags):
        article = articles[0]
        association_manager.set_categories(article.id, [categories[0].id])
        association_manager.set_tags(article.id, [tags[0].id])

        association_manager.clear(article.id)

        assert association_manager.get_category_ids(article.id) == []
        assert association_manager.get_tag_ids(article.id) == []
