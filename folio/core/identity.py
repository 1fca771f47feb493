#!/usr/bin/env python3
"""
identity.py
-----------
The authenticated caller, as handed to the core by the auth layer.

The core only reads ``user_id`` (to stamp ``author_id`` on new articles).
Role checks belong to the outer layer.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from enum import Enum
from typing import List

from .exceptions import UnauthorizedError, ValidationError


class Role(str, Enum):
    """
    Enumeration of user roles.
    - ADMIN: Full access
    - AUTHOR: Writes own articles
    - READER: Read-only
    """

    ADMIN = "admin"
    AUTHOR = "author"
    READER = "reader"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available role choices."""
        return [role.value for role in cls]


@dataclass(frozen=True)
class Identity:
    """
    Authenticated user.

    Attributes:
        user_id: Opaque user identifier
        role: Role granted by the auth layer
    """

    user_id: str
    role: Role = Role.AUTHOR

    def __post_init__(self) -> None:
        if not isinstance(self.user_id, str) or not self.user_id.strip():
            raise UnauthorizedError("Identity requires a user id")
        if not isinstance(self.role, Role):
            try:
                object.__setattr__(self, "role", Role(self.role))
            except ValueError as e:
                raise ValidationError(
                    f"Invalid role: {self.role!r}. Must be one of {Role.choices()}",
                    field="role",
                ) from e
