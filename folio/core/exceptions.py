#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Folio project.

Every exception raised by the core carries a machine-readable ``kind`` so
callers (controllers, CLIs) can map failures to responses without
inspecting message text.

Exception Hierarchy:
    Exception (built-in)
    └── FolioError - Base for everything raised by the core
        ├── NotFoundError - Entity id does not resolve
        ├── ConflictError - Unique-name collision or forbidden state
        │   ├── InvalidTransitionError - Article already in/not in a state
        │   └── StaleWriteError - Optimistic version check failed
        ├── ValidationError - Empty/oversized field, malformed id
        ├── UnauthorizedError - No authenticated identity
        ├── ForbiddenError - Identity lacks permission
        └── DatabaseError - Unexpected store failure
            └── TransientError - Store temporarily unavailable

Usage:
    from folio.core.exceptions import ErrorKind, FolioError, NotFoundError

    try:
        articles.publish(article_id)
    except FolioError as e:
        if e.kind is ErrorKind.NOT_FOUND:
            ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """
    Enumeration of caller-recoverable failure kinds.

    - NOT_FOUND: Entity id does not resolve
    - CONFLICT: Unique-name collision, or operation forbidden by state
    - VALIDATION_FAILED: Empty required field, oversized field, malformed id
    - UNAUTHORIZED: Missing identity (raised by the auth layer)
    - FORBIDDEN: Identity lacks permission (raised by the auth layer)
    - TRANSIENT: Underlying store unavailable; the caller decides on retry
    - INTERNAL: Anything else
    """

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION_FAILED = "validation_failed"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    TRANSIENT = "transient"
    INTERNAL = "internal"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available error kind values."""
        return [kind.value for kind in cls]


class FolioError(Exception):
    """
    Base exception for all errors raised by the Folio core.

    Attributes:
        message: Error description
        kind: ErrorKind classifying the failure
        details: Optional structured context (entity, id, field, ...)

    Examples:
        >>> raise FolioError("Something went wrong")
        >>> err = NotFoundError("Article not found", entity="article", id=4)
        >>> err.kind
        <ErrorKind.NOT_FOUND: 'not_found'>
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str = "", **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for logging or an outer protocol layer."""
        return {
            "kind": self.kind.value,
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(FolioError):
    """
    Raised when an entity id does not resolve.

    Examples:
        >>> raise NotFoundError("Article not found", entity="article", id=12)
        >>> raise NotFoundError("Category not found", entity="category", id=3)
    """

    kind = ErrorKind.NOT_FOUND


class ConflictError(FolioError):
    """
    Raised on unique-name collisions and state-forbidden operations.

    Examples:
        >>> raise ConflictError("Category 'News' already exists", field="name")
    """

    kind = ErrorKind.CONFLICT


class InvalidTransitionError(ConflictError):
    """
    Raised when a lifecycle operation is attempted from a state that forbids it.

    Attributes:
        current: Status the article is in
        operation: Lifecycle operation that was attempted

    Examples:
        >>> raise InvalidTransitionError(
        ...     "Article is already published",
        ...     current="published",
        ...     operation="publish",
        ... )
    """

    @property
    def current(self) -> Optional[str]:
        return self.details.get("current")

    @property
    def operation(self) -> Optional[str]:
        return self.details.get("operation")


class StaleWriteError(ConflictError):
    """
    Raised when an article row changed since the caller read it.

    Examples:
        >>> raise StaleWriteError("Article 4 was modified", expected=2, actual=3)
    """


class ValidationError(FolioError):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Missing or whitespace-only required fields
    - Oversized fields
    - Malformed ids
    - Invalid enum values

    Examples:
        >>> raise ValidationError("Article title is required", field="title")
        >>> raise ValidationError("Limit must be between 1 and 100")
    """

    kind = ErrorKind.VALIDATION_FAILED

    @property
    def field(self) -> Optional[str]:
        return self.details.get("field")


class UnauthorizedError(FolioError):
    """Raised by the authentication layer when no identity is present."""

    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(FolioError):
    """Raised by the authentication layer when an identity lacks permission."""

    kind = ErrorKind.FORBIDDEN


class DatabaseError(FolioError):
    """
    Base exception for database-related errors.

    Raised when database operations fail for reasons that are not a
    caller mistake (unexpected query errors, schema problems).

    Examples:
        >>> raise DatabaseError("Database initialization failed: disk I/O error")
    """


class TransientError(DatabaseError):
    """
    Exception for temporary store unavailability.

    Raised when the database is locked, busy, or the connection dropped.
    The core does not retry beyond its short lock-retry helper; the caller
    decides whether to try again.

    Examples:
        >>> raise TransientError("Database is locked")
    """

    kind = ErrorKind.TRANSIENT
