#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for all Folio operations.

Provides type-safe conversion, validation, and normalization functions
used by the managers, services and search components. Every failure is
raised as a ValidationError carrying the offending field name.
"""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ValidationError


class DataValidator:
    """Centralized data validation for Folio operations."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Strings consisting only of whitespace count as empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        for field in required_fields:
            value = data.get(field)
            if isinstance(value, str):
                value = value.strip()
            if value is None or value == "":
                raise ValidationError(
                    f"Required field '{field}' missing or empty", field=field
                )

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Normalize string value.

        Args:
            value: Value to normalize

        Returns:
            Trimmed string, or None if the value is None or blank
        """
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def require_non_blank(value: Any, field: str) -> str:
        """
        Return the trimmed value, raising if it is missing or blank.

        Args:
            value: Candidate value
            field: Field name for the error message

        Raises:
            ValidationError: If the value trims to nothing
        """
        text = DataValidator.normalize_string(value)
        if text is None:
            raise ValidationError(f"{field.capitalize()} is required", field=field)
        return text

    @staticmethod
    def validate_max_length(value: Optional[str], max_length: int, field: str) -> None:
        """
        Reject strings longer than ``max_length`` characters.

        Raises:
            ValidationError: If the value exceeds the limit
        """
        if value is not None and len(value) > max_length:
            raise ValidationError(
                f"{field.capitalize()} must be at most {max_length} characters",
                field=field,
                max_length=max_length,
                length=len(value),
            )

    @staticmethod
    def normalize_id(value: Any, field: str = "id") -> int:
        """
        Convert an identifier to a positive integer.

        Accepts ints and digit strings. Booleans are rejected even though
        they are ints in Python.

        Args:
            value: Candidate identifier
            field: Field name for the error message

        Returns:
            Positive integer id

        Raises:
            ValidationError: If the value is not a positive integer
        """
        if isinstance(value, bool):
            raise ValidationError(f"Invalid {field}: {value!r}", field=field)
        if isinstance(value, int):
            result = value
        elif isinstance(value, str) and value.strip().isdigit():
            result = int(value.strip())
        else:
            raise ValidationError(f"Invalid {field}: {value!r}", field=field)
        if result < 1:
            raise ValidationError(f"Invalid {field}: {value!r}", field=field)
        return result

    @staticmethod
    def normalize_id_list(values: Optional[Iterable[Any]], field: str) -> List[int]:
        """
        Normalize a collection of ids to a sorted, de-duplicated list.

        Args:
            values: Iterable of ids (or None for an empty set)
            field: Field name for error messages

        Returns:
            Sorted list of unique positive ints
        """
        if values is None:
            return []
        if isinstance(values, (str, bytes)):
            raise ValidationError(f"{field} must be a list of ids", field=field)
        return sorted({DataValidator.normalize_id(v, field) for v in values})

    @staticmethod
    def normalize_datetime(value: Any, field: str = "date") -> Optional[datetime]:
        """
        Normalize various date inputs to a naive UTC datetime.

        Args:
            value: datetime, date, ISO-8601 string, or None

        Returns:
            Normalized datetime or None

        Raises:
            ValidationError: If a string cannot be parsed
        """
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            result = value
        elif isinstance(value, date):
            result = datetime.combine(value, time.min)
        elif isinstance(value, str):
            try:
                result = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            except ValueError as e:
                raise ValidationError(f"Invalid {field}: {value!r}", field=field) from e
        else:
            raise ValidationError(f"Invalid {field}: {value!r}", field=field)

        if result.tzinfo is not None:
            result = result.astimezone(timezone.utc).replace(tzinfo=None)
        return result
