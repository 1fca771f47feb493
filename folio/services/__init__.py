"""
Folio services: the public, record-returning operations.

- ArticleLifecycle: article state machine and listings
- TaxonomyService: categories and tags
"""
from .articles import ArticleLifecycle
from .taxonomy import TaxonomyService

__all__ = ["ArticleLifecycle", "TaxonomyService"]
