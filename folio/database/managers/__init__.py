"""
Entity Managers
---------------

Session-bound managers used inside FolioDB.session_scope():

- BaseManager: shared helpers
- CategoryManager, TagManager: taxonomy rows
- AssociationManager: article link tables
- ArticleManager: article rows and listings
"""
from .base_manager import BaseManager
from .category_manager import CategoryManager
from .tag_manager import TagManager
from .association_manager import AssociationManager
from .article_manager import ArticleManager

__all__ = [
    "BaseManager",
    "CategoryManager",
    "TagManager",
    "AssociationManager",
    "ArticleManager",
]
