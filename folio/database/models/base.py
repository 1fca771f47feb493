"""
Base Classes and Mixins
------------------------

Foundational ORM classes for the Folio database.

Classes:
    - Base: Declarative base for all SQLAlchemy models
    - TimestampMixin: created_at / updated_at columns maintained by the ORM

Functions:
    - utc_now: Current time as a naive UTC datetime (SQLite stores no offset)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from datetime import datetime, timezone

# --- Third party ---
from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Return the current UTC time without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Base ORM class ---
class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Serves as the declarative base for SQLAlchemy models and provides
    access to the metadata object for table creation.
    """

    pass


# --- Timestamps ---
class TimestampMixin:
    """
    Mixin providing creation and modification timestamps.

    Attributes:
        created_at: When the row was inserted
        updated_at: When the row was last written through the ORM
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now, doc="Row creation time (UTC)"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
        doc="Last modification time (UTC)",
    )
