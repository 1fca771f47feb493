#!/usr/bin/env python3
"""
pagination.py
-------------
Page/limit/sort options for article listings and the page envelope
returned with them.

Usage:
    opts = parse_pagination({"page": "2", "limit": "500"})
    # PaginationOptions(page=2, limit=100, sort_by=None, sort_order='desc')
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from .exceptions import ValidationError
from .validators import DataValidator

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
SORT_FIELDS = ("created_at", "updated_at", "published_at", "title", "relevance")
SORT_ORDERS = ("asc", "desc")

T = TypeVar("T")


def _loose_int(value: Any) -> Optional[int]:
    """Leading-integer parse of loosely typed input; None when absent/invalid."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    text = str(value).strip()
    digits = ""
    for i, ch in enumerate(text):
        if ch.isdigit() or (i == 0 and ch in "+-"):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


@dataclass
class PaginationOptions:
    """
    Listing options.

    Attributes:
        page: 1-based page number
        limit: Page size, 1..100
        sort_by: Sort column, or None for the listing's default
        sort_order: 'asc' or 'desc'
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort_by: Optional[str] = None
    sort_order: str = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def validate(self) -> "PaginationOptions":
        """
        Check the options, raising on the first problem.

        Raises:
            ValidationError: On an out-of-range page/limit or unknown sort
        """
        if not isinstance(self.page, int) or self.page < 1:
            raise ValidationError(
                "Page must be greater than or equal to 1", field="page"
            )
        if not isinstance(self.limit, int) or not 1 <= self.limit <= MAX_LIMIT:
            raise ValidationError(
                f"Limit must be between 1 and {MAX_LIMIT}", field="limit"
            )
        if self.sort_by is not None and self.sort_by not in SORT_FIELDS:
            raise ValidationError(
                f"Invalid sort_by field. Must be one of: {', '.join(SORT_FIELDS)}",
                field="sort_by",
            )
        if self.sort_order not in SORT_ORDERS:
            raise ValidationError(
                'Invalid sort_order. Must be "asc" or "desc"', field="sort_order"
            )
        return self


def parse_pagination(raw: Optional[Mapping[str, Any]]) -> PaginationOptions:
    """
    Build PaginationOptions from loosely typed input (query-string style).

    Missing or non-numeric page/limit fall back to 1/10; page is raised to
    at least 1 and limit clamped to 1..100. Any sort order other than
    'asc' becomes 'desc'. Both ``sort_by`` and ``sortBy`` spellings are read.
    """
    raw = raw or {}
    page = _loose_int(raw.get("page")) or DEFAULT_PAGE
    limit = _loose_int(raw.get("limit")) or DEFAULT_LIMIT
    sort_by = raw.get("sort_by", raw.get("sortBy"))
    sort_order = raw.get("sort_order", raw.get("sortOrder"))

    return PaginationOptions(
        page=max(1, page),
        limit=min(max(1, limit), MAX_LIMIT),
        sort_by=str(sort_by) if sort_by else None,
        sort_order="asc" if sort_order == "asc" else "desc",
    )


def parse_date_range(
    raw: Optional[Mapping[str, Any]],
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Read ``start_date`` / ``end_date`` (or camelCase) from loose input.

    Unparseable values are dropped rather than rejected.
    """
    raw = raw or {}
    bounds: List[Optional[datetime]] = []
    for snake, camel in (("start_date", "startDate"), ("end_date", "endDate")):
        value = raw.get(snake, raw.get(camel))
        try:
            bounds.append(DataValidator.normalize_datetime(value))
        except ValidationError:
            bounds.append(None)
    return bounds[0], bounds[1]


@dataclass
class PaginatedResult(Generic[T]):
    """
    One page of results plus the page envelope.

    Attributes:
        data: Items on this page
        page, limit, total: Request echo and total matching rows
    """

    data: List[T] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def pagination(self) -> Dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [
                item.to_dict() if hasattr(item, "to_dict") else item
                for item in self.data
            ],
            "pagination": self.pagination,
        }
