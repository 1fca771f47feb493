#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing common CRUD helpers for session-bound managers.
All entity managers inherit from this class.

Key Features:
    - Generic get-or-create that survives a concurrent insert race
    - Lookup helpers that raise typed NotFoundError
    - Scalar field patching from metadata dicts

Managers never commit. They operate inside the caller's session (opened
with FolioDB.session_scope()), flush to surface constraint errors early
and leave transaction boundaries to the caller.

Example:
    class CategoryManager(BaseManager):
        def create(self, metadata: Dict[str, Any]) -> Category:
            ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC
from typing import Any, Dict, List, Optional, Protocol, Type, TypeVar

# --- Third party imports ---
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, Session

# --- Local imports ---
from folio.core.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.core.validators import DataValidator
from folio.utils.slugify import slugify


class HasId(Protocol):
    """Protocol for objects that have an id attribute."""

    id: Mapped[int]


T = TypeVar("T", bound=HasId)


class BaseManager(ABC):
    """
    Abstract base manager providing common CRUD operations and utilities.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[FolioLogger] = None):
        """
        Initialize the base manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _get_or_create(
        self,
        model_class: Type[T],
        lookup_fields: Dict[str, Any],
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Get an existing row or create it if it doesn't exist.

        The insert runs inside a SAVEPOINT, so losing a race to a concurrent
        writer only rolls back the attempted insert, never the caller's
        transaction. The winner's row is then returned.

        Args:
            model_class: ORM model class to query or create
            lookup_fields: Dictionary of field_name: value to filter/create
            extra_fields: Additional fields for new object creation only

        Returns:
            ORM instance of the model class

        Raises:
            DatabaseError: If creation fails and no row can be found
        """
        obj = self.session.execute(
            select(model_class).filter_by(**lookup_fields)
        ).scalar_one_or_none()
        if obj is not None:
            return obj

        fields = dict(lookup_fields)
        if extra_fields:
            fields.update(extra_fields)

        try:
            with self.session.begin_nested():
                obj = model_class(**fields)
                self.session.add(obj)
            return obj
        except IntegrityError:
            obj = self.session.execute(
                select(model_class).filter_by(**lookup_fields)
            ).scalar_one_or_none()
            if obj is not None:
                safe_logger(self.logger).log_debug(
                    f"{model_class.__name__} created concurrently, reusing it",
                    lookup_fields,
                )
                return obj
            raise

    # -------------------------------------------------------------------------
    # Generic Lookup Helpers
    # -------------------------------------------------------------------------

    def _get_by_id(self, model_class: Type[T], entity_id: Any) -> Optional[T]:
        """
        Get entity by ID.

        Args:
            model_class: ORM model class
            entity_id: Candidate id (validated as a positive int)

        Returns:
            Entity if found, None otherwise
        """
        entity_id = DataValidator.normalize_id(entity_id, f"{model_class.__name__.lower()}_id")
        return self.session.get(model_class, entity_id)

    def _require(self, model_class: Type[T], entity_id: Any) -> T:
        """
        Get entity by ID or raise.

        Raises:
            NotFoundError: If no row has that id
        """
        entity = self._get_by_id(model_class, entity_id)
        if entity is None:
            name = model_class.__name__
            raise NotFoundError(
                f"{name} {entity_id} not found", entity=name.lower(), id=entity_id
            )
        return entity

    def _get_by_field(
        self,
        model_class: Type[T],
        field_name: str,
        value: Any,
        normalize: bool = True,
    ) -> Optional[T]:
        """
        Get entity by a specific field value.

        Args:
            model_class: ORM model class
            field_name: Field name to filter by
            value: Value to look up
            normalize: Whether to trim string values first

        Returns:
            Entity if found, None otherwise
        """
        if value is None:
            return None
        if normalize and isinstance(value, str):
            value = DataValidator.normalize_string(value)
            if not value:
                return None

        return self.session.execute(
            select(model_class).filter_by(**{field_name: value})
        ).scalar_one_or_none()

    def _exists(self, model_class: Type[T], field_name: str, value: Any) -> bool:
        """True if a row with ``field_name == value`` exists."""
        return self._get_by_field(model_class, field_name, value) is not None

    def _missing_ids(self, model_class: Type[T], ids: List[int]) -> List[int]:
        """Return the subset of ``ids`` with no matching row, sorted."""
        if not ids:
            return []
        found = set(
            self.session.execute(
                select(model_class.id).where(model_class.id.in_(ids))
            ).scalars()
        )
        return sorted(set(ids) - found)

    def _count(self, model_class: Type[T], **filters: Any) -> int:
        """
        Count entities with optional equality filters.

        Returns:
            Count of matching entities
        """
        stmt = select(func.count()).select_from(model_class)
        if filters:
            stmt = stmt.filter_by(**filters)
        return self.session.execute(stmt).scalar_one()

    # -------------------------------------------------------------------------
    # Scalar Field Update Helpers
    # -------------------------------------------------------------------------

    def _update_scalar_fields(
        self,
        entity: Any,
        metadata: Dict[str, Any],
        field_configs: List[tuple],
    ) -> List[str]:
        """
        Update multiple scalar fields from metadata using normalizers.

        Args:
            entity: Entity to update
            metadata: Dictionary containing field values
            field_configs: List of tuples:
                - (field_name, normalizer) for required fields
                - (field_name, normalizer, allow_none) for optional fields

        Returns:
            Names of the fields that were assigned

        Example:
            self._update_scalar_fields(category, metadata, [
                ("name", DataValidator.normalize_string),
                ("description", DataValidator.normalize_string, True),
            ])
        """
        changed: List[str] = []
        for config in field_configs:
            field_name = config[0]
            normalizer = config[1]
            allow_none = config[2] if len(config) > 2 else False

            if field_name not in metadata:
                continue

            value = normalizer(metadata[field_name])
            if value is not None or allow_none:
                setattr(entity, field_name, value)
                changed.append(field_name)
        return changed

    # -------------------------------------------------------------------------
    # Taxonomy Name Helpers
    # -------------------------------------------------------------------------

    def _name_and_slug(self, value: Any, max_length: int, entity: str) -> tuple:
        """
        Validate a display name and derive its slug.

        Args:
            value: Raw name
            max_length: Maximum name length
            entity: Entity label for error messages ('category', 'tag')

        Returns:
            (trimmed name, slug)

        Raises:
            ValidationError: On a blank or oversized name, or an empty slug
        """
        name = DataValidator.require_non_blank(value, "name")
        DataValidator.validate_max_length(name, max_length, "name")
        slug = slugify(name, max_length=max_length)
        if not slug:
            raise ValidationError(
                f"{entity.capitalize()} name '{name}' has no URL-safe characters",
                field="name",
            )
        return name, slug

    def _ensure_name_available(
        self,
        model_class: Type[T],
        name: str,
        slug: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        """
        Raise ConflictError if another row already uses ``name`` or ``slug``.
        """
        stmt = select(model_class).where(
            or_(model_class.name == name, model_class.slug == slug)
        )
        if exclude_id is not None:
            stmt = stmt.where(model_class.id != exclude_id)
        existing = self.session.execute(stmt.limit(1)).scalar_one_or_none()
        if existing is not None:
            label = model_class.__name__
            raise ConflictError(
                f"{label} '{name}' already exists",
                entity=label.lower(),
                field="name",
                existing_id=existing.id,
            )
