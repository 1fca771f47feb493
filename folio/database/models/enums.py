"""
Enumeration Types
------------------

Enum classes for the Folio database models.

Enums:
    - ArticleStatus: Lifecycle state of an article (draft, published, archived)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import List


class ArticleStatus(str, Enum):
    """
    Enumeration of article lifecycle states.
    - DRAFT: Private, editable, not publicly listed
    - PUBLISHED: Publicly visible and searchable
    - ARCHIVED: Retired; hidden from public listings
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available article status choices."""
        return [status.value for status in cls]
