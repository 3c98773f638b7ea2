"""
Role Lookup: demo roles, pinned super admin, profile table, fail-closed.
"""
from __future__ import annotations

import pytest

from portal.identity_access.config import AccessConfig
from portal.identity_access.credentials import StaticTableSource
from portal.identity_access.domain import RoleTag
from portal.identity_access.errors import NO_ROLE_ASSIGNED, PROVIDER_UNAVAILABLE, RoleLookupError
from portal.identity_access.roles import RoleLookup
from portal.records.memory import InMemoryRecordStore
from portal.records.ports import RecordStoreError

from fakes import provider_session


pytestmark = pytest.mark.anyio("asyncio")


class _CountingStore(InMemoryRecordStore):
    def __init__(self):
        super().__init__()
        self.selects = []

    def select(self, table, filters=None, **kwargs):
        self.selects.append((table, dict(filters or {}), kwargs.get("columns")))
        return super().select(table, filters, **kwargs)


class _BrokenStore:
    def select(self, *args, **kwargs):
        raise RecordStoreError("store_error")


@pytest.mark.anyio
async def test_demo_session_uses_its_role_without_query():
    store = _CountingStore()
    session = await StaticTableSource().authenticate("admin@example.com", "admin123")

    role = await RoleLookup(store, AccessConfig()).resolve_role(session)

    assert role is RoleTag.ADMIN
    assert store.selects == []


@pytest.mark.anyio
async def test_profile_role_is_looked_up_by_subject_projecting_role_only():
    store = _CountingStore()
    store.insert("profiles", {"id": "abc", "email": "x@example.com", "role": "staff"})

    role = await RoleLookup(store, AccessConfig()).resolve_role(provider_session("abc", "x@example.com"))

    assert role is RoleTag.STAFF
    assert store.selects == [("profiles", {"id": "abc"}, ("role",))]


@pytest.mark.anyio
async def test_pinned_identifier_resolves_super_admin_without_query():
    store = _CountingStore()
    lookup = RoleLookup(store, AccessConfig(super_admin_identifier="root@example.com"))

    role = await lookup.resolve_role(provider_session("r1", "root@example.com"))

    assert role is RoleTag.SUPER_ADMIN
    assert store.selects == []


@pytest.mark.anyio
@pytest.mark.parametrize(
    "row",
    [None, {"id": "abc", "role": None}, {"id": "abc", "role": "recruiter"}, {"id": "abc", "role": "Admin"}],
)
async def test_missing_or_unknown_role_fails_closed(row):
    store = InMemoryRecordStore()
    if row is not None:
        store.insert("profiles", row)

    with pytest.raises(RoleLookupError) as exc:
        await RoleLookup(store, AccessConfig()).resolve_role(provider_session("abc", "x@example.com"))

    assert exc.value.code == NO_ROLE_ASSIGNED


@pytest.mark.anyio
async def test_store_failure_maps_to_provider_unavailable():
    with pytest.raises(RoleLookupError) as exc:
        await RoleLookup(_BrokenStore(), AccessConfig()).resolve_role(provider_session("abc", "x@example.com"))

    assert exc.value.code == PROVIDER_UNAVAILABLE


@pytest.mark.anyio
async def test_role_change_is_seen_on_next_lookup():
    store = InMemoryRecordStore()
    store.insert("profiles", {"id": "abc", "role": "student"})
    lookup = RoleLookup(store, AccessConfig())
    session = provider_session("abc", "x@example.com")

    assert await lookup.resolve_role(session) is RoleTag.STUDENT
    store.update("profiles", {"id": "abc"}, {"role": "admin"})
    assert await lookup.resolve_role(session) is RoleTag.ADMIN
