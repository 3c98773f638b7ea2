"""
Security config guard tests.

Production/staging must fail fast when the hosted backend is missing, demo
logins are on, or the super-admin pin keeps its well-known default secret.
Development stays permissive.
"""
from __future__ import annotations

import importlib

import pytest


def _prod_env(monkeypatch: pytest.MonkeyPatch, **overrides: str) -> None:
    values = {
        "PORTAL_ENV": "prod",
        "SUPABASE_URL": "https://project.supabase.co",
        "SUPABASE_ANON_KEY": "anon-key",
        "SUPABASE_SERVICE_ROLE_KEY": "service-key",
        "PORTAL_DEMO_LOGINS": "false",
        "PORTAL_SUPER_ADMIN_SECRET": "a-strong-secret",
    }
    values.update(overrides)
    for key, value in values.items():
        monkeypatch.setenv(key, value)


def _guard():
    from portal.web import config as cfg

    importlib.reload(cfg)
    return cfg.ensure_secure_config_on_startup


def test_dev_allows_demo_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("PORTAL_ENV", "dev")

    _guard()()


def test_prod_with_hardened_settings_starts(monkeypatch: pytest.MonkeyPatch):
    _prod_env(monkeypatch)

    _guard()()


@pytest.mark.parametrize("var", ["SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"])
def test_prod_requires_backend_settings(monkeypatch: pytest.MonkeyPatch, var: str):
    _prod_env(monkeypatch)
    monkeypatch.setenv(var, "DUMMY_DO_NOT_USE")

    with pytest.raises(SystemExit):
        _guard()()


def test_prod_requires_https_backend(monkeypatch: pytest.MonkeyPatch):
    _prod_env(monkeypatch, SUPABASE_URL="http://project.supabase.co")

    with pytest.raises(SystemExit) as exc:
        _guard()()

    assert "https" in str(exc.value)


def test_staging_refuses_demo_logins(monkeypatch: pytest.MonkeyPatch):
    _prod_env(monkeypatch, PORTAL_ENV="staging")
    monkeypatch.delenv("PORTAL_DEMO_LOGINS")

    with pytest.raises(SystemExit) as exc:
        _guard()()

    assert "PORTAL_DEMO_LOGINS" in str(exc.value)


def test_prod_refuses_default_pin_secret(monkeypatch: pytest.MonkeyPatch):
    _prod_env(monkeypatch)
    monkeypatch.delenv("PORTAL_SUPER_ADMIN_SECRET")

    with pytest.raises(SystemExit) as exc:
        _guard()()

    assert "PORTAL_SUPER_ADMIN_SECRET" in str(exc.value)


def test_prod_allows_disabled_pin(monkeypatch: pytest.MonkeyPatch):
    _prod_env(monkeypatch, PORTAL_SUPER_ADMIN_EMAIL="")
    monkeypatch.delenv("PORTAL_SUPER_ADMIN_SECRET")

    _guard()()
