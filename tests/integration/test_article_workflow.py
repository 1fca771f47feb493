"""
test_article_workflow.py
------------------------
End-to-end: an article moving through its lifecycle stays consistent
across listings, search, related content and tag counters.
"""
import pytest

from folio.core.exceptions import StaleWriteError
from folio.search import SearchFilters


class TestArticleWorkflow:

    @pytest.fixture
    def background(self, make_article, seeded_taxonomy):
        """Published filler plus one neighbour sharing the 'python' tag."""
        for n in range(8):
            make_article(f"Background {n}", "Unrelated text", status="published")
        return make_article(
            "Neighbour",
            "Shares a tag",
            status="published",
            tag_ids=[seeded_taxonomy["python"]],
        )

    def test_full_lifecycle(self, lifecycle, taxonomy, relevance, related, make_article,
                            seeded_taxonomy, background):
        python = seeded_taxonomy["python"]

        draft = make_article(
            "Asyncio patterns",
            "Event loops and tasks",
            tag_ids=[python],
            category_ids=[seeded_taxonomy["tech"]],
        )
        assert relevance.search("asyncio") == []
        assert taxonomy.get_tag(python).usage_count == 2

        published = lifecycle.publish(draft.id, expected_version=draft.version)
        hits = relevance.search("asyncio")
        assert [h.article.id for h in hits] == [draft.id]
        assert hits[0].article.tag_ids == [python]

        assert [r.id for r in related.find_related(background.id)] == [draft.id]

        with pytest.raises(StaleWriteError):
            lifecycle.update(draft.id, {"title": "Lost write"}, expected_version=draft.version)

        renamed = lifecycle.update(
            draft.id,
            {"title": "Trio patterns", "tag_ids": [seeded_taxonomy["sql"]]},
            expected_version=published.version,
        )
        assert relevance.search("asyncio") == []
        assert [h.article.id for h in relevance.search("trio")] == [draft.id]
        assert related.find_related(background.id) == []
        assert taxonomy.get_tag(python).usage_count == 1
        assert taxonomy.get_tag(seeded_taxonomy["sql"]).usage_count == 1

        archived = lifecycle.archive(draft.id, expected_version=renamed.version)
        assert archived.published_at == published.published_at
        assert relevance.search("trio") == []
        archived_hits = relevance.search("trio", SearchFilters(status="archived"))
        assert [h.article.id for h in archived_hits] == [draft.id]

        lifecycle.delete(draft.id, expected_version=archived.version)
        assert relevance.search("trio", SearchFilters(status="archived")) == []
        assert taxonomy.get_tag(seeded_taxonomy["sql"]).usage_count == 0
        assert lifecycle.get_by_id(draft.id) is None

    def test_category_listing_tracks_status(self, lifecycle, taxonomy, make_article,
                                            seeded_taxonomy):
        tech = seeded_taxonomy["tech"]
        record = make_article(category_ids=[tech])
        assert lifecycle.get_by_category(tech).total == 0

        lifecycle.publish(record.id)
        assert lifecycle.get_by_category(tech).total == 1
        counts = {c.id: c.article_count for c in taxonomy.list_categories_with_counts()}
        assert counts[tech] == 1

        lifecycle.unpublish(record.id)
        assert lifecycle.get_by_category(tech).total == 0
