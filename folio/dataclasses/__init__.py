"""Plain records returned across the Folio service boundary."""
from .records import (
    ArticleRecord,
    CategoryRecord,
    RelatedArticle,
    SearchResult,
    TagRecord,
)

__all__ = [
    "ArticleRecord",
    "CategoryRecord",
    "RelatedArticle",
    "SearchResult",
    "TagRecord",
]
