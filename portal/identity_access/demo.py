"""
Demo identity records.

Fixed, well-known test accounts that bypass the external auth provider. The
table is compiled in and never mutated at runtime; lookups require an exact
(identifier, secret) match.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .domain import RoleTag


@dataclass(frozen=True)
class DemoIdentity:
    identifier: str
    secret: str = ""
    subject_id: str = ""
    name: str = ""
    role: RoleTag = RoleTag.STUDENT

    def __repr__(self) -> str:
        return f"DemoIdentity(identifier={self.identifier!r}, subject_id={self.subject_id!r}, role={self.role.value!r})"


DEMO_IDENTITIES: tuple[DemoIdentity, ...] = (
    DemoIdentity("admin@example.com", "admin123", "1", "Admin User", RoleTag.ADMIN),
    DemoIdentity("staff@example.com", "staff123", "2", "Staff User", RoleTag.STAFF),
    DemoIdentity("student@example.com", "student123", "3", "Student User", RoleTag.STUDENT),
    DemoIdentity("superadmin@example.com", "superadmin123", "0", "Super Admin", RoleTag.SUPER_ADMIN),
)


def find_demo_identity(
    identifier: str,
    secret: str,
    table: tuple[DemoIdentity, ...] = DEMO_IDENTITIES,
) -> Optional[DemoIdentity]:
    for rec in table:
        if rec.identifier == identifier and rec.secret == secret:
            return rec
    return None


__all__ = ["DEMO_IDENTITIES", "DemoIdentity", "find_demo_identity"]
