"""
Configuration and startup security checks for the portal.

Why: Demo accounts and the pinned super-admin secret are convenient locally
but must never reach a production deployment. This module provides a single
guard that enforces minimal production safety constraints without burdening
local development.

Permissions: The caller needs no special privileges. The function simply reads
environment variables and raises `SystemExit` on fatal misconfiguration.
"""
from __future__ import annotations

import os

from ..identity_access.config import DEFAULT_SUPER_ADMIN_SECRET, AccessConfig


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def ensure_secure_config_on_startup() -> None:
    """Fail fast on insecure production configuration.

    Intent: Abort process startup when obviously insecure settings are detected
    in production/staging. Development remains permissive for convenience.

    Checks:
    - SUPABASE_URL, SUPABASE_ANON_KEY and SUPABASE_SERVICE_ROLE_KEY are set.
    - SUPABASE_URL uses https.
    - Demo logins are disabled.
    - The legacy super-admin pin is disabled or uses a non-default secret.
    """

    env = os.getenv("PORTAL_ENV", "dev")
    if not _is_prod_like(env):
        return  # dev/test remain permissive

    # 1) Hosted backend must be configured
    for var in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"):
        val = (os.getenv(var) or "").strip()
        if not val or val.upper() == "DUMMY_DO_NOT_USE":
            raise SystemExit(f"Refusing to start: {var} is unset or a dummy placeholder in production.")

    # 2) Backend endpoint must use HTTPS
    if (os.getenv("SUPABASE_URL") or "").strip().lower().startswith("http://"):
        raise SystemExit("Refusing to start: SUPABASE_URL must use https in production (got http).")

    access = AccessConfig.from_env()

    # 3) Demo accounts bypass the provider entirely
    if access.demo_logins:
        raise SystemExit("Refusing to start: PORTAL_DEMO_LOGINS must be false in production/staging.")

    # 4) Legacy identity pin with the well-known default secret
    if access.super_admin_pin_enabled and access.super_admin_secret == DEFAULT_SUPER_ADMIN_SECRET:
        raise SystemExit(
            "Refusing to start: PORTAL_SUPER_ADMIN_SECRET uses the default value in production. "
            "Set a strong secret or disable the pin with an empty PORTAL_SUPER_ADMIN_EMAIL."
        )
