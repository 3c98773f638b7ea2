"""
AuthContext: login/logout/restore, provider events and stale-result dropping.
"""
from __future__ import annotations

import asyncio

import pytest

from portal.identity_access.config import AccessConfig
from portal.identity_access.context import AuthContext
from portal.identity_access.credentials import build_resolver
from portal.identity_access.domain import PanelId, RoleTag
from portal.identity_access.errors import INVALID_CREDENTIALS, NO_ROLE_ASSIGNED, AuthError, RoleLookupError
from portal.identity_access.roles import RoleLookup
from portal.records.memory import InMemoryRecordStore

from fakes import FakeAuthProvider, GatedRoleStore, provider_session


pytestmark = pytest.mark.anyio("asyncio")


def _context(provider=None, store=None, config=None) -> AuthContext:
    config = config or AccessConfig()
    provider = provider or FakeAuthProvider()
    store = store if store is not None else InMemoryRecordStore()
    return AuthContext(build_resolver(config, provider), RoleLookup(store, config), provider, config=config)


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0.01)


@pytest.mark.anyio
async def test_demo_login_sets_session_role_and_selection():
    ctx = _context()
    await ctx.restore()
    seen = []
    ctx.subscribe(lambda c: seen.append(c.selection().panel_id))

    session = await ctx.login("student@example.com", "student123")

    assert session is not None and session.subject_id == "3"
    assert ctx.role is RoleTag.STUDENT
    assert ctx.selection().panel_id is PanelId.STUDENT
    assert seen[-1] is PanelId.STUDENT


@pytest.mark.anyio
async def test_failed_login_leaves_context_logged_out():
    ctx = _context()
    await ctx.restore()
    await ctx.login("admin@example.com", "admin123")

    with pytest.raises(AuthError) as exc:
        await ctx.login("admin@example.com", "wrong")

    assert exc.value.code == INVALID_CREDENTIALS
    assert ctx.session is None and ctx.role is None
    assert ctx.last_error == INVALID_CREDENTIALS
    assert ctx.selection().is_login


@pytest.mark.anyio
async def test_missing_role_signs_out_provider_and_fails_closed():
    session = provider_session("x1", "norole@example.com")
    provider = FakeAuthProvider({"norole@example.com": ("pw123456", session)})
    ctx = _context(provider)
    await ctx.restore()

    with pytest.raises(RoleLookupError) as exc:
        await ctx.login("norole@example.com", "pw123456")

    assert exc.value.code == NO_ROLE_ASSIGNED
    assert ctx.session is None
    assert provider.sign_out_calls == 1
    assert ctx.selection().is_login


class _EchoingProvider(FakeAuthProvider):
    async def sign_out(self) -> None:
        await super().sign_out()
        self.emit("SIGNED_OUT", None)


@pytest.mark.anyio
async def test_sign_out_event_after_missing_role_is_ignored():
    session = provider_session("x1", "norole@example.com")
    provider = _EchoingProvider({"norole@example.com": ("pw123456", session)})
    ctx = _context(provider)
    await ctx.restore()
    seen = []
    ctx.subscribe(lambda c: seen.append(c.session))

    with pytest.raises(RoleLookupError):
        await ctx.login("norole@example.com", "pw123456")
    generation = ctx.generation
    await _settle()

    assert seen == [None]
    assert ctx.generation == generation
    assert ctx.last_error == NO_ROLE_ASSIGNED


@pytest.mark.anyio
async def test_logout_clears_locally_and_signs_out_provider_sessions_only():
    store = InMemoryRecordStore()
    store.insert("profiles", {"id": "p1", "role": "staff"})
    session = provider_session("p1", "p1@example.com")
    provider = FakeAuthProvider({"p1@example.com": ("pw123456", session)})
    ctx = _context(provider, store)
    await ctx.restore()

    await ctx.login("admin@example.com", "admin123")
    await ctx.logout()
    assert provider.sign_out_calls == 0

    await ctx.login("p1@example.com", "pw123456")
    assert ctx.role is RoleTag.STAFF
    await ctx.logout()
    assert provider.sign_out_calls == 1
    assert ctx.session is None and ctx.role is None


@pytest.mark.anyio
async def test_restore_revalidates_live_provider_session():
    store = InMemoryRecordStore()
    store.insert("profiles", {"id": "p1", "role": "admin"})
    provider = FakeAuthProvider(current=provider_session("p1", "p1@example.com"))
    ctx = _context(provider, store)
    assert not ctx.ready

    await ctx.restore()

    assert ctx.ready
    assert ctx.role is RoleTag.ADMIN
    assert ctx.selection().panel_id is PanelId.ADMIN


@pytest.mark.anyio
async def test_restore_ignores_expired_provider_session():
    provider = FakeAuthProvider(current=provider_session("p1", "p1@example.com", expires_in=-10))
    ctx = _context(provider)

    await ctx.restore()

    assert ctx.ready
    assert ctx.session is None


@pytest.mark.anyio
async def test_late_role_result_for_replaced_session_is_dropped():
    inner = InMemoryRecordStore()
    inner.insert("profiles", {"id": "a", "role": "admin"})
    inner.insert("profiles", {"id": "b", "role": "student"})
    store = GatedRoleStore(inner)
    provider = FakeAuthProvider(
        {
            "a@example.com": ("pw-a-123", provider_session("a", "a@example.com")),
            "b@example.com": ("pw-b-123", provider_session("b", "b@example.com")),
        }
    )
    ctx = _context(provider, store)
    await ctx.restore()
    gate_a = store.gate("a")

    first = asyncio.ensure_future(ctx.login("a@example.com", "pw-a-123"))
    for _ in range(200):
        if ctx.session is not None and ctx.session.subject_id == "a":
            break
        await asyncio.sleep(0.01)
    second = await ctx.login("b@example.com", "pw-b-123")
    gate_a.set()
    stale = await first

    assert stale is None
    assert second is not None and second.subject_id == "b"
    assert ctx.role is RoleTag.STUDENT
    assert ctx.selection().subject_id == "b"


@pytest.mark.anyio
async def test_provider_sign_out_event_clears_context():
    store = InMemoryRecordStore()
    store.insert("profiles", {"id": "p1", "role": "staff"})
    provider = FakeAuthProvider(current=provider_session("p1", "p1@example.com"))
    ctx = _context(provider, store)
    await ctx.restore()
    assert ctx.role is RoleTag.STAFF

    provider.emit("SIGNED_OUT", None)
    await _settle()

    assert ctx.session is None
    assert ctx.selection().is_login


@pytest.mark.anyio
async def test_token_refresh_reruns_role_lookup():
    store = InMemoryRecordStore()
    store.insert("profiles", {"id": "p1", "role": "staff"})
    provider = FakeAuthProvider(current=provider_session("p1", "p1@example.com"))
    ctx = _context(provider, store)
    await ctx.restore()

    store.update("profiles", {"id": "p1"}, {"role": "admin"})
    provider.emit("TOKEN_REFRESHED", provider_session("p1", "p1@example.com"))
    await _settle()

    assert ctx.role is RoleTag.ADMIN


@pytest.mark.anyio
async def test_provider_events_do_not_touch_demo_sessions():
    provider = FakeAuthProvider()
    ctx = _context(provider)
    await ctx.restore()
    await ctx.login("staff@example.com", "staff123")

    provider.emit("SIGNED_OUT", None)
    await _settle()

    assert ctx.role is RoleTag.STAFF


@pytest.mark.anyio
async def test_expired_session_is_cleared_like_logout():
    ctx = _context()
    await ctx.restore()
    session = await ctx.login("staff@example.com", "staff123")

    assert not ctx.expire_if_needed(now=session.issued_at)
    assert ctx.expire_if_needed(now=session.expires_at + 1)
    assert ctx.session is None


@pytest.mark.anyio
async def test_close_detaches_provider_listener():
    provider = FakeAuthProvider()
    ctx = _context(provider)
    await ctx.restore()
    assert len(provider.listeners) == 1

    ctx.close()

    assert provider.listeners == []
