"""
Panel Router: one mounted panel per context, subscriptions released on swap.
"""
from __future__ import annotations

import pytest

from portal.identity_access.config import AccessConfig
from portal.identity_access.context import AuthContext
from portal.identity_access.credentials import build_resolver
from portal.identity_access.domain import PanelId
from portal.identity_access.errors import ForbiddenPanelTransition
from portal.identity_access.roles import RoleLookup
from portal.records.memory import InMemoryFileStore, InMemoryRecordStore, seed_demo_records
from portal.web.panel_router import PanelRouter
from portal.web.panels import AdminPanel, LoginPanel, StudentPanel, build_panel
from portal.web.services import PortalServices

from fakes import FakeAuthProvider


pytestmark = pytest.mark.anyio("asyncio")


def _setup(factory=None):
    store = seed_demo_records(InMemoryRecordStore())
    services = PortalServices.build(store, InMemoryFileStore())
    config = AccessConfig()
    provider = FakeAuthProvider()
    ctx = AuthContext(build_resolver(config, provider), RoleLookup(store, config), provider, config=config)
    factory = factory or (lambda selection: build_panel(services, selection, ctx.session))
    router = PanelRouter(ctx, factory, store)
    return ctx, router, store


@pytest.mark.anyio
async def test_router_is_loading_until_context_is_ready():
    ctx, router, store = _setup()

    assert router.loading
    assert router.panel is None
    assert store.open_subscriptions() == 0

    await ctx.restore()

    assert not router.loading
    assert isinstance(router.panel, LoginPanel)


@pytest.mark.anyio
async def test_login_mounts_role_panel_with_subscriptions():
    ctx, router, store = _setup()
    await ctx.restore()

    await ctx.login("student@example.com", "student123")

    assert isinstance(router.panel, StudentPanel)
    assert router.panel.subject_id == "3"
    assert router.panel.mounted
    assert store.open_subscriptions() == len(StudentPanel.subscriptions)


@pytest.mark.anyio
async def test_logout_unmounts_and_releases_every_subscription():
    ctx, router, store = _setup()
    await ctx.restore()
    await ctx.login("admin@example.com", "admin123")
    admin = router.panel
    assert isinstance(admin, AdminPanel)

    await ctx.logout()

    assert not admin.mounted
    assert isinstance(router.panel, LoginPanel)
    assert store.open_subscriptions() == 0


@pytest.mark.anyio
async def test_repeated_login_logout_cycles_do_not_leak():
    ctx, router, store = _setup()
    await ctx.restore()

    for ident, secret in [("admin@example.com", "admin123"), ("staff@example.com", "staff123")] * 3:
        await ctx.login(ident, secret)
        assert store.open_subscriptions() == len(type(router.panel).subscriptions)
        await ctx.logout()
        assert store.open_subscriptions() == 0


@pytest.mark.anyio
async def test_switching_identity_recreates_panel_without_local_state():
    ctx, router, store = _setup()
    await ctx.restore()
    await ctx.login("admin@example.com", "admin123")
    first = router.panel
    first.flash("success", "left over")

    await ctx.logout()
    await ctx.login("admin@example.com", "admin123")

    assert router.panel is not first
    assert router.panel.pop_flash() is None


@pytest.mark.anyio
async def test_change_event_bumps_mounted_panel_version():
    ctx, router, store = _setup()
    await ctx.restore()
    await ctx.login("staff@example.com", "staff123")
    before = router.panel.version

    store.update("companies", {"id": "c1"}, {"location": "Remote"})

    assert router.panel.version == before + 1


@pytest.mark.anyio
async def test_ensure_rejects_other_panels_and_keeps_current():
    ctx, router, store = _setup()
    await ctx.restore()
    await ctx.login("student@example.com", "student123")
    mounted = router.panel

    with pytest.raises(ForbiddenPanelTransition) as exc:
        router.ensure(PanelId.ADMIN)

    assert exc.value.requested == "admin"
    assert exc.value.allowed == "student"
    assert router.panel is mounted
    assert router.ensure(PanelId.STUDENT) is mounted


@pytest.mark.anyio
async def test_mount_failure_releases_partial_subscriptions_and_falls_back_to_login():
    holder = {}

    class _Exploding(AdminPanel):
        def mount(self, scope):
            scope.acquire("companies", "*", self._on_change)
            raise RuntimeError("boom")

    def factory(selection):
        if selection.panel_id is PanelId.ADMIN:
            return _Exploding(holder["services"], selection, None)
        return build_panel(holder["services"], selection, None)

    ctx, router, store = _setup(factory)
    holder["services"] = PortalServices.build(store, InMemoryFileStore())
    await ctx.restore()

    await ctx.login("admin@example.com", "admin123")

    assert isinstance(router.panel, LoginPanel)
    assert store.open_subscriptions() == 0


@pytest.mark.anyio
async def test_close_unmounts_and_detaches():
    ctx, router, store = _setup()
    await ctx.restore()
    await ctx.login("staff@example.com", "staff123")

    router.close()
    await ctx.logout()

    assert router.panel is None
    assert store.open_subscriptions() == 0
