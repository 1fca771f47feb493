#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators for database operations.

- log_database_operation: start / completion / error records with durations
- handle_db_errors: translate SQLAlchemy exceptions into typed FolioErrors
- validate_metadata: required-field check on a metadata dict argument
- DatabaseOperation: context-manager form of log_database_operation
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, List, Optional

# --- Third party imports ---
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm.exc import StaleDataError

# --- Local imports ---
from folio.core.exceptions import (
    ConflictError,
    DatabaseError,
    FolioError,
    StaleWriteError,
    TransientError,
)
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.core.validators import DataValidator


def _operation_id(operation_name: str) -> str:
    return f"{operation_name}_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}"


def log_database_operation(operation_name: str):
    """
    Decorator to log database operations with timing and context.

    The decorated method's instance must expose a ``logger`` attribute
    (a FolioLogger or None).

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = safe_logger(getattr(self, "logger", None))
            operation_id = _operation_id(operation_name)
            start = time.perf_counter()

            logger.log_debug(
                f"Starting {operation_name}",
                {
                    "operation_id": operation_id,
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                },
            )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "operation_id": operation_id,
                        "duration_seconds": time.perf_counter() - start,
                    },
                )
                raise

            logger.log_operation(
                f"{operation_name}_completed",
                {
                    "operation_id": operation_id,
                    "duration_seconds": time.perf_counter() - start,
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator


def validate_metadata(required_fields: List[str]):
    """
    Decorator to validate metadata dictionaries before processing.

    The metadata dict is taken from the ``metadata`` keyword argument, or
    else from the last positional argument.

    Args:
        required_fields: List of required field names

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            metadata = kwargs.get("metadata")
            if metadata is None:
                metadata = args[-1] if args else {}
            DataValidator.validate_required_fields(metadata, required_fields)
            return function(self, *args, **kwargs)

        return wrapper

    return decorator


def translate_db_error(error: SQLAlchemyError) -> FolioError:
    """
    Map a SQLAlchemy exception to the matching FolioError.

    - StaleDataError -> StaleWriteError
    - IntegrityError -> ConflictError
    - OperationalError / DisconnectionError -> TransientError
    - anything else -> DatabaseError
    """
    if isinstance(error, StaleDataError):
        return StaleWriteError(f"Row was modified concurrently: {error}")
    if isinstance(error, IntegrityError):
        return ConflictError(f"Data integrity violation: {error.orig}")
    if isinstance(error, (OperationalError, DisconnectionError)):
        return TransientError(f"Database unavailable: {error}")
    return DatabaseError(f"Database operation failed: {error}")


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator to handle common database errors.

    FolioErrors pass through untouched; SQLAlchemy errors are translated
    with translate_db_error and chained to the original.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except SQLAlchemyError as e:
            raise translate_db_error(e) from e

    return wrapper


class DatabaseOperation:
    """
    Context manager that logs an operation's start, completion and failure.

    Exceptions are logged; SQLAlchemy errors are re-raised translated by
    translate_db_error, anything else propagates unchanged.

    Example:
        with DatabaseOperation(self.logger, "rebuild_index", {"rows": n}):
            ...
    """

    def __init__(
        self,
        logger: Optional[FolioLogger],
        operation_name: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.logger = safe_logger(logger)
        self.operation_name = operation_name
        self.details = details or {}
        self.operation_id = _operation_id(operation_name)
        self._start = 0.0

    def __enter__(self) -> "DatabaseOperation":
        self._start = time.perf_counter()
        self.logger.log_debug(
            f"Starting {self.operation_name}",
            {"operation_id": self.operation_id, **self.details},
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        duration = time.perf_counter() - self._start
        if exc is not None:
            self.logger.log_error(
                exc,
                {
                    "operation": self.operation_name,
                    "operation_id": self.operation_id,
                    "duration_seconds": duration,
                },
            )
            if isinstance(exc, SQLAlchemyError):
                raise translate_db_error(exc) from exc
            return False

        self.logger.log_operation(
            f"{self.operation_name}_completed",
            {
                "operation_id": self.operation_id,
                "duration_seconds": duration,
                "success": True,
            },
        )
        return False
