"""Tests for query normalization, text heuristics and search filters."""
import pytest
from datetime import datetime

from folio.core.exceptions import ValidationError
from folio.database.models import ArticleStatus
from folio.search.query import (
    EmptyQueryPolicy,
    MatchExpression,
    SearchFilters,
    extract_keywords,
    normalize_query,
    score_text_match,
)


class TestNormalizeQuery:

    def test_plain_terms(self):
        assert str(normalize_query("  python   tips ")) == "python:* & tips:*"

    def test_operator_characters_are_escaped(self):
        expr = normalize_query("hello & world (test)")
        assert str(expr) == r"hello:* & \&:* & world:* & \(test\):*"

    def test_every_operator_character(self):
        assert str(normalize_query("a|b!c:d*")) == r"a\|b\!c\:d\*:*"

    @pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
    def test_blank_is_empty(self, raw):
        expr = normalize_query(raw)
        assert not expr
        assert expr.is_empty
        assert str(expr) == ""

    def test_terms_preserve_order(self):
        assert normalize_query("b a c").terms == ("b", "a", "c")


class TestMatchExpression:

    def test_to_fts5_quotes_and_prefixes(self):
        expr = normalize_query("hello & world (test)")
        assert expr.to_fts5() == '"hello"* AND "world"* AND "(test)"*'

    def test_to_fts5_with_column(self):
        assert normalize_query("py").to_fts5(column="title") == 'title : "py"*'

    def test_to_fts5_match_any(self):
        expr = normalize_query("alpha beta")
        assert expr.to_fts5(column="content", match_any=True) == (
            'content : "alpha"* OR content : "beta"*'
        )

    def test_to_fts5_doubles_quotes(self):
        assert MatchExpression(('say"hi',)).to_fts5() == '"say""hi"*'

    def test_operator_only_query_is_empty(self):
        expr = normalize_query("& | !")
        assert bool(expr)
        assert expr.is_empty
        assert expr.to_fts5() == ""


class TestScoreTextMatch:

    def test_empty_inputs(self):
        assert score_text_match("", ["a"]) == 0.0
        assert score_text_match("text", []) == 0.0

    def test_exact_word_at_start_scores_high(self):
        assert score_text_match("python tips", ["python"]) == pytest.approx(1.0)

    def test_earlier_terms_score_higher(self):
        early = score_text_match("keyword at the start of a long sentence", ["keyword"])
        late = score_text_match("a long sentence ending with keyword", ["keyword"])
        assert early > late

    def test_word_boundary_bonus(self):
        whole = score_text_match("the cat sat", ["cat"])
        partial = score_text_match("the concatenation", ["cat"])
        assert whole > partial

    def test_missing_terms_lower_the_mean(self):
        assert score_text_match("python", ["python", "rust"]) == pytest.approx(0.5)

    def test_regex_characters_are_literal(self):
        assert score_text_match("c++ rocks", ["c++"]) > 0

    def test_score_is_bounded(self):
        score = score_text_match("This is a test about keyword extraction", ["test", "keyword", "extraction"])
        assert 0.0 <= score <= 1.0


class TestExtractKeywords:

    def test_filters_stop_words_and_short_words(self):
        assert extract_keywords("The Quick, brown fox!") == ["quick", "brown", "fox"]

    def test_blank(self):
        assert extract_keywords("   ") == []
        assert extract_keywords(None) == []

    def test_keeps_duplicates_in_order(self):
        assert extract_keywords("data and more data") == ["data", "more", "data"]


class TestSearchFilters:

    def test_defaults_to_published(self):
        assert SearchFilters().effective_status is ArticleStatus.PUBLISHED

    def test_status_string_is_parsed(self):
        assert SearchFilters(status="draft").status is ArticleStatus.DRAFT

    def test_invalid_status_rejected(self):
        with pytest.raises(ValidationError):
            SearchFilters(status="deleted")

    def test_normalizes_values(self):
        filters = SearchFilters(
            author_id="  alice ",
            date_from="2024-01-01",
            category_ids=["3", 1, 3],
        )
        assert filters.author_id == "alice"
        assert filters.date_from == datetime(2024, 1, 1)
        assert filters.category_ids == [1, 3]

    def test_from_mapping_accepts_camel_case(self):
        filters = SearchFilters.from_mapping({"authorId": "bob", "tagIds": [2]})
        assert filters.author_id == "bob"
        assert filters.tag_ids == [2]


class TestEmptyQueryPolicy:

    def test_choices(self):
        assert EmptyQueryPolicy.choices() == ["match_none", "match_all"]
