"""
Identity domain constants and simple helpers.

Why:
- Centralize the closed role enumeration and the panel identifiers so the
  policy, the router and the web adapter cannot drift apart.
- Unknown role strings coming from the profile store never become a RoleTag;
  callers receive `None` and fail closed.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class RoleTag(str, Enum):
    STUDENT = "student"
    STAFF = "staff"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"

    @classmethod
    def parse(cls, value: object) -> Optional["RoleTag"]:
        """Return the exactly matching tag or None; no case or whitespace folding."""
        if isinstance(value, RoleTag):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class PanelId(str, Enum):
    LOGIN = "login"
    STUDENT = "student"
    STAFF = "staff"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# Immutable to prevent accidental mutation.
ALLOWED_ROLES = frozenset(tag.value for tag in RoleTag)

__all__ = ["ALLOWED_ROLES", "PanelId", "RoleTag"]
