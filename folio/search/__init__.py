"""
Search package: full-text relevance ranking and related-content discovery.
"""
from .query import (
    EmptyQueryPolicy,
    MatchExpression,
    SearchFilters,
    extract_keywords,
    normalize_query,
    score_text_match,
)
from .related import RelatedContentMatcher
from .search_engine import RelevanceEngine
from .search_index import SearchIndexManager

__all__ = [
    "EmptyQueryPolicy",
    "MatchExpression",
    "SearchFilters",
    "extract_keywords",
    "normalize_query",
    "score_text_match",
    "RelatedContentMatcher",
    "RelevanceEngine",
    "SearchIndexManager",
]
