"""
User directory service: profiles of students, staff and administrators.

Why:
    Administrators register students; the super administrator manages every
    account. Both go through this service so the validation rules live in one
    place.

Behavior:
    - Name is required, email must contain "@".
    - Students need a registration number that is unique across profiles.
    - Staff need a department.
    - Creating a student also creates its `students` record (resume pending).
    - Deleting removes the login account first, then the `students` record and
      the profile. A profile insert that fails after its account was created
      removes that account again.
    - With an account provisioner, a login is created at the auth provider and
      its id becomes the profile id; new accounts need a password of at least
      six characters. Without one, profiles are stored with a generated id.

Permissions:
    Callers pass `allowed_roles`, the roles they may manage. Routes derive it
    from the capabilities of the current panel.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional
from uuid import uuid4

from pydantic import ValidationError

from ..identity_access.domain import RoleTag
from .models import ProfileInput, ResumeStatus, validation_code


logger = logging.getLogger("portal.recruiting")

PROFILES_TABLE = "profiles"
STUDENTS_TABLE = "students"
MIN_PASSWORD_LENGTH = 6

_SEARCH_FIELDS = ("name", "email", "registration_number", "department")


def _parse(data: Mapping[str, Any]) -> ProfileInput:
    try:
        return ProfileInput.model_validate(dict(data))
    except ValidationError as exc:
        raise ValueError(validation_code(exc)) from exc


class ProfileService:
    def __init__(self, store, accounts=None):
        self._store = store
        self._accounts = accounts

    # --- Queries ------------------------------------------------------------------

    def list(self, role: str, q: str = "") -> list[dict]:
        tag = RoleTag.parse(role)
        if tag is None:
            raise ValueError("invalid_role")
        rows = self._store.select(PROFILES_TABLE, {"role": tag.value}, order_by="created_at", descending=True)
        needle = (q or "").strip().lower()
        if not needle:
            return rows
        return [
            r for r in rows
            if any(needle in str(r.get(f) or "").lower() for f in _SEARCH_FIELDS)
        ]

    def get(self, profile_id: str) -> Optional[dict]:
        rows = self._store.select(PROFILES_TABLE, {"id": profile_id}, limit=1)
        return rows[0] if rows else None

    def counts_by_role(self) -> dict[str, int]:
        counts = {tag.value: 0 for tag in RoleTag}
        for r in self._store.select(PROFILES_TABLE, columns=("role",)):
            tag = RoleTag.parse(r.get("role"))
            if tag is not None:
                counts[tag.value] += 1
        return counts

    # --- Validation ---------------------------------------------------------------

    def _check(self, payload: ProfileInput, allowed_roles: Iterable[RoleTag], *, exclude_id: Optional[str] = None) -> RoleTag:
        tag = RoleTag.parse(payload.role)
        if tag is None:
            raise ValueError("invalid_role")
        if tag not in set(allowed_roles):
            raise PermissionError("role_not_manageable")
        if tag is RoleTag.STUDENT:
            if not payload.registration_number:
                raise ValueError("missing_registration_number")
            clash = self._store.select(
                PROFILES_TABLE, {"registration_number": payload.registration_number}, columns=("id",)
            )
            if any(r.get("id") != exclude_id for r in clash):
                raise ValueError("registration_number_taken")
        if tag is RoleTag.STAFF and not payload.department:
            raise ValueError("missing_department")
        same_email = self._store.select(PROFILES_TABLE, {"email": payload.email}, columns=("id",))
        if any(r.get("id") != exclude_id for r in same_email):
            raise ValueError("email_taken")
        if payload.password is not None and len(payload.password) < MIN_PASSWORD_LENGTH:
            raise ValueError("invalid_password")
        return tag

    # --- Commands -----------------------------------------------------------------

    def create(self, data: Mapping[str, Any], *, allowed_roles: Iterable[RoleTag]) -> dict:
        payload = _parse(data)
        tag = self._check(payload, allowed_roles)
        if self._accounts is not None:
            if payload.password is None:
                raise ValueError("invalid_password")
            profile_id = self._accounts.create_account(
                email=payload.email, password=payload.password, name=payload.name
            )
        else:
            profile_id = str(uuid4())
        row = payload.to_row()
        row.update({"id": profile_id, "role": tag.value, "created_at": datetime.now(timezone.utc).isoformat()})
        try:
            created = self._store.insert(PROFILES_TABLE, row)
        except Exception:
            if self._accounts is not None:
                self._discard_account(profile_id)
            raise
        if tag is RoleTag.STUDENT:
            self._ensure_student_record(profile_id)
        return created

    def update(self, profile_id: str, data: Mapping[str, Any], *, allowed_roles: Iterable[RoleTag]) -> dict:
        allowed = set(allowed_roles)
        current = self.get(profile_id)
        if current is None:
            raise LookupError("profile_not_found")
        if RoleTag.parse(current.get("role")) not in allowed:
            raise PermissionError("role_not_manageable")
        payload = _parse(data)
        tag = self._check(payload, allowed, exclude_id=profile_id)
        patch = payload.to_row()
        patch["role"] = tag.value
        rows = self._store.update(PROFILES_TABLE, {"id": profile_id}, patch)
        if tag is RoleTag.STUDENT:
            self._ensure_student_record(profile_id)
        if payload.password is not None and self._accounts is not None:
            self._accounts.update_password(profile_id, payload.password)
        return rows[0] if rows else {**current, **patch}

    def delete(self, profile_id: str, *, allowed_roles: Iterable[RoleTag]) -> None:
        current = self.get(profile_id)
        if current is None:
            raise LookupError("profile_not_found")
        if RoleTag.parse(current.get("role")) not in set(allowed_roles):
            raise PermissionError("role_not_manageable")
        # The login goes first; a failure here leaves the profile in place.
        if self._accounts is not None:
            self._accounts.delete_account(profile_id)
        self._store.delete(STUDENTS_TABLE, {"user_id": profile_id})
        self._store.delete(PROFILES_TABLE, {"id": profile_id})

    def _discard_account(self, account_id: str) -> None:
        try:
            self._accounts.delete_account(account_id)
        except ValueError as exc:
            logger.error("Account %s has no profile and could not be removed: %s", account_id, exc)

    def _ensure_student_record(self, profile_id: str) -> None:
        if self._store.select(STUDENTS_TABLE, {"user_id": profile_id}, columns=("user_id",)):
            return
        self._store.insert(
            STUDENTS_TABLE,
            {
                "user_id": profile_id,
                "resume_status": ResumeStatus.PENDING.value,
                "resume_url": None,
                "resume_notes": "",
            },
        )


__all__ = ["MIN_PASSWORD_LENGTH", "PROFILES_TABLE", "ProfileService", "STUDENTS_TABLE"]
