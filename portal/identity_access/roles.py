"""
Role Lookup: resolve the single role tag of an authenticated Session.

Behavior:
    - Demo sessions carry their role; no query is issued.
    - The legacy identity pin (super-admin identifier) resolves to
      `super_admin` without a query when the pin is enabled.
    - Otherwise one point lookup on `profiles` keyed by subject id, projecting
      only the `role` column.
    - Zero rows, a null role or an unknown role value fail closed with
      `no_role_assigned`; store failures map to `provider_unavailable`.

Roles are never cached: the lookup runs after every session change because an
administrator may edit a role between sessions.
"""
from __future__ import annotations

import asyncio
import logging

from ..records.ports import RecordStoreError
from .config import AccessConfig
from .credentials import Session
from .domain import RoleTag
from .errors import NO_ROLE_ASSIGNED, PROVIDER_UNAVAILABLE, RoleLookupError


logger = logging.getLogger("portal.identity_access")

PROFILES_TABLE = "profiles"


class RoleLookup:
    def __init__(self, store, config: AccessConfig):
        self._store = store
        self._config = config

    async def resolve_role(self, session: Session) -> RoleTag:
        if session.is_demo:
            if session.demo_role is None:
                raise RoleLookupError(NO_ROLE_ASSIGNED)
            return session.demo_role
        if self._config.super_admin_pin_enabled and session.email == self._config.super_admin_identifier:
            return RoleTag.SUPER_ADMIN
        try:
            rows = await asyncio.to_thread(
                self._store.select,
                PROFILES_TABLE,
                {"id": session.subject_id},
                columns=("role",),
                limit=1,
            )
        except RecordStoreError as exc:
            logger.warning("Role lookup failed for subject %s: %s", session.subject_id, exc.code)
            raise RoleLookupError(PROVIDER_UNAVAILABLE) from exc
        if not rows:
            raise RoleLookupError(NO_ROLE_ASSIGNED)
        role = RoleTag.parse(rows[0].get("role"))
        if role is None:
            logger.info("Subject %s has no usable role", session.subject_id)
            raise RoleLookupError(NO_ROLE_ASSIGNED)
        return role


__all__ = ["PROFILES_TABLE", "RoleLookup"]
