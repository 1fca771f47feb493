#!/usr/bin/env python3
"""
query.py
--------
Search query normalization, search filters and store-independent
relevance heuristics.

Functions:
    normalize_query: Raw text -> MatchExpression
    score_text_match: Heuristic relevance of a text for a list of terms
    extract_keywords: Stop-word-filtered keywords of a text

Usage:
    expr = normalize_query("hello & world (test)")
    str(expr)        # 'hello:* & \\&:* & world:* & \\(test\\):*'
    expr.to_fts5()   # '"hello"* AND "world"* AND "(test)"*'
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

# --- Local imports ---
from folio.core.validators import DataValidator
from folio.database.managers.article_manager import parse_status
from folio.database.models import ArticleStatus

# Operator characters escaped in the canonical expression
OPERATOR_CHARS = "&|!():*"
PREFIX_MARKER = ":*"
AND_JOINER = " & "

SEARCH_FIELDS = ("title", "content", "excerpt")

STOP_WORDS = frozenset(
    """
    a an the and or but in on at to for with by about as into like through
    after over between out of from up down is are was were be been have has
    had do does did will would shall should can could may might must this
    that these those
    """.split()
)

_OPERATOR_RE = re.compile(r"([&|!():*])")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_ALNUM_RE = re.compile(r"[^\W_]", re.UNICODE)


def _escape_term(term: str) -> str:
    """Prefix each operator character with a backslash."""
    return _OPERATOR_RE.sub(r"\\\1", term)


class EmptyQueryPolicy(str, Enum):
    """
    What a search does with a blank query.
    - MATCH_NONE: Return no results
    - MATCH_ALL: Return every article passing the filters, unranked
    """

    MATCH_NONE = "match_none"
    MATCH_ALL = "match_all"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available policy choices."""
        return [policy.value for policy in cls]


@dataclass(frozen=True)
class MatchExpression:
    """
    Normalized search query.

    Attributes:
        terms: Whitespace-separated terms of the raw query, in order

    ``str(expr)`` gives the canonical form: every operator character
    escaped with a backslash, each term suffixed with ``:*`` (prefix
    match), joined with `` & ``. ``to_fts5()`` renders the same terms as
    an SQLite FTS5 query.
    """

    terms: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.terms)

    def __str__(self) -> str:
        return AND_JOINER.join(_escape_term(term) + PREFIX_MARKER for term in self.terms)

    @property
    def fts_terms(self) -> Tuple[str, ...]:
        """Terms that contain at least one letter or digit."""
        return tuple(term for term in self.terms if _ALNUM_RE.search(term))

    @property
    def is_empty(self) -> bool:
        """True if nothing in the query can match indexed text."""
        return not self.fts_terms

    def to_fts5(self, column: Optional[str] = None, match_any: bool = False) -> str:
        """
        Render as an FTS5 MATCH expression.

        Each term becomes a quoted prefix phrase, so operator characters
        are inert. Terms are joined with AND, or with OR if ``match_any``.

        Args:
            column: Restrict every phrase to this indexed column
            match_any: Match rows containing any term rather than all

        Returns:
            FTS5 query text ('' when the expression is empty)
        """
        prefix = f"{column} : " if column else ""
        joiner = " OR " if match_any else " AND "
        return joiner.join(
            prefix + '"' + term.replace('"', '""') + '"*' for term in self.fts_terms
        )


def normalize_query(raw: Optional[str]) -> MatchExpression:
    """
    Split raw query text into a MatchExpression.

    Args:
        raw: User-entered text; None or blank gives an empty expression

    Examples:
        >>> str(normalize_query("  python   tips "))
        'python:* & tips:*'
        >>> bool(normalize_query("   "))
        False
    """
    if not raw or not raw.strip():
        return MatchExpression()
    return MatchExpression(tuple(raw.split()))


def score_text_match(text: Optional[str], terms: Iterable[str]) -> float:
    """
    Heuristic relevance of ``text`` for ``terms`` in [0, 1].

    For each term found as a case-insensitive substring: 0.5, plus up to
    0.3 the earlier it first appears, plus 0.2 if it also matches on word
    boundaries. The sum is divided by the number of terms and capped at 1.

    Returns:
        0.0 for empty text or no terms
    """
    terms = list(terms)
    if not text or not terms:
        return 0.0

    lower_text = text.lower()
    score = 0.0
    for term in terms:
        lower_term = term.lower()
        position = lower_text.find(lower_term)
        if position < 0:
            continue
        score += 0.5
        score += max(0.0, 1 - position / len(lower_text)) * 0.3
        if re.search(rf"\b{re.escape(lower_term)}\b", lower_text):
            score += 0.2

    return min(1.0, score / len(terms))


def extract_keywords(text: Optional[str]) -> List[str]:
    """
    Lower-cased words longer than two characters that are not stop words.

    Punctuation is stripped first; order and duplicates are preserved.

    Examples:
        >>> extract_keywords("The Quick, brown fox!")
        ['quick', 'brown', 'fox']
    """
    if not text or not text.strip():
        return []
    words = _PUNCTUATION_RE.sub("", text.lower()).split()
    return [word for word in words if len(word) > 2 and word not in STOP_WORDS]


@dataclass
class SearchFilters:
    """
    Conjunctive search filters.

    Attributes:
        status: Article status; published when unset
        author_id: Only this author's articles
        date_from, date_to: Inclusive bounds on published_at
        category_ids: Articles in any of these categories
        tag_ids: Articles with any of these tags
    """

    status: Optional[ArticleStatus] = None
    author_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    category_ids: List[int] = field(default_factory=list)
    tag_ids: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.status is not None:
            self.status = parse_status(self.status)
        self.author_id = DataValidator.normalize_string(self.author_id)
        self.date_from = DataValidator.normalize_datetime(self.date_from, "date_from")
        self.date_to = DataValidator.normalize_datetime(self.date_to, "date_to")
        self.category_ids = DataValidator.normalize_id_list(self.category_ids, "category_ids")
        self.tag_ids = DataValidator.normalize_id_list(self.tag_ids, "tag_ids")

    @property
    def effective_status(self) -> ArticleStatus:
        return self.status if self.status is not None else ArticleStatus.PUBLISHED

    @classmethod
    def from_mapping(cls, raw: Optional[Any]) -> "SearchFilters":
        """Build filters from a loosely keyed dict (snake or camelCase)."""
        raw = raw or {}
        return cls(
            status=raw.get("status"),
            author_id=raw.get("author_id", raw.get("authorId")),
            date_from=raw.get("date_from", raw.get("dateFrom")),
            date_to=raw.get("date_to", raw.get("dateTo")),
            category_ids=raw.get("category_ids", raw.get("categoryIds")) or [],
            tag_ids=raw.get("tag_ids", raw.get("tagIds")) or [],
        )
