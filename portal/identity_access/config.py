"""
Access-control configuration read from the environment.

Env:
    PORTAL_DEMO_LOGINS          – "true"/"false"; enables the demo identity table.
    PORTAL_SUPER_ADMIN_EMAIL    – distinguished super-admin identifier; empty
                                  disables the identity-pinned override.
    PORTAL_SUPER_ADMIN_SECRET   – pinned secret for that identifier.
    PORTAL_SESSION_TTL_SECONDS  – lifetime of demo and portal sessions.
"""
from __future__ import annotations

from dataclasses import dataclass
import os


DEFAULT_SUPER_ADMIN_EMAIL = "superadmin@example.com"
DEFAULT_SUPER_ADMIN_SECRET = "superadmin123"
DEFAULT_SESSION_TTL_SECONDS = 3600


def _env_flag(name: str, default: str) -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes")


def _parse_ttl(raw: str | None) -> int:
    try:
        value = int((raw or "").strip())
    except ValueError:
        return DEFAULT_SESSION_TTL_SECONDS
    return value if value > 0 else DEFAULT_SESSION_TTL_SECONDS


@dataclass(frozen=True)
class AccessConfig:
    demo_logins: bool = True
    super_admin_identifier: str = DEFAULT_SUPER_ADMIN_EMAIL
    super_admin_secret: str = DEFAULT_SUPER_ADMIN_SECRET
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS

    @property
    def super_admin_pin_enabled(self) -> bool:
        return bool(self.super_admin_identifier)

    @classmethod
    def from_env(cls) -> "AccessConfig":
        ident = os.getenv("PORTAL_SUPER_ADMIN_EMAIL")
        secret = os.getenv("PORTAL_SUPER_ADMIN_SECRET")
        return cls(
            demo_logins=_env_flag("PORTAL_DEMO_LOGINS", "true"),
            super_admin_identifier=(DEFAULT_SUPER_ADMIN_EMAIL if ident is None else ident.strip()),
            super_admin_secret=(DEFAULT_SUPER_ADMIN_SECRET if secret is None else secret),
            session_ttl_seconds=_parse_ttl(os.getenv("PORTAL_SESSION_TTL_SECONDS")),
        )


__all__ = ["AccessConfig", "DEFAULT_SUPER_ADMIN_EMAIL", "DEFAULT_SUPER_ADMIN_SECRET"]
