"""
Folio database layer: ORM models, session-bound managers and FolioDB.

Usage:
    from folio.database import FolioDB
"""
from .manager import FolioDB

__all__ = ["FolioDB"]
