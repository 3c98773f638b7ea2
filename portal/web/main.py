"""
Campus Recruitment Portal: FastAPI application.

Wires the backends (record store, file store, auth provider), the access
configuration and the server-side portal sessions, and mounts the routers.
Every request outside the public paths needs a portal session whose Panel
Router has a non-login panel mounted.
"""
from __future__ import annotations

from pathlib import Path
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles

from ..identity_access.config import AccessConfig
from ..identity_access.context import AuthContext
from ..identity_access.credentials import build_resolver
from ..identity_access.roles import RoleLookup
from ..records.wiring import Backends, build_backends
from . import config as _cfg
from .auth_utils import cookie_opts
from .panel_router import PanelRouter
from .panels import build_panel
from .services import PortalServices
from .sessions import PortalSession, PortalSessionStore


def _should_load_dotenv() -> bool:
    """Decide whether to load a local .env file.

    Under pytest, do not load .env; tests provide their own env. Outside of
    tests PORTAL_ENABLE_DOTENV (default true) switches it off, e.g. in
    containers that inject the environment directly.
    """
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return False
    flag = (os.getenv("PORTAL_ENABLE_DOTENV", "true") or "").strip().lower()
    return flag in ("1", "true", "yes")


if _should_load_dotenv():
    load_dotenv()

# Minimal production safety checks (fail-fast on insecure config)
_cfg.ensure_secure_config_on_startup()

# --- App & Settings Setup -------------------------------------------------------


class AuthSettings:
    def __init__(self) -> None:
        self._env_override: str | None = None

    @property
    def environment(self) -> str:
        if self._env_override is not None:
            return self._env_override
        return os.getenv("PORTAL_ENV", "dev").lower()

    def override_environment(self, env: str | None) -> None:
        """Override environment for tests (e.g., "prod"), or reset with None."""
        self._env_override = env


logger = logging.getLogger("portal.web")
SETTINGS = AuthSettings()
SESSION_COOKIE_NAME = "portal_session"

ACCESS_CONFIG = AccessConfig.from_env()
BACKENDS: Backends = build_backends()
SERVICES = PortalServices.build(BACKENDS.record_store, BACKENDS.file_store, BACKENDS.accounts)
SESSION_STORE = PortalSessionStore(ttl_seconds=ACCESS_CONFIG.session_ttl_seconds)


def set_backends(backends: Backends) -> None:
    """Swap the wired backends (tests, alternative deployments).

    Existing portal sessions are closed because their panels hold
    subscriptions on the previous record store.
    """
    global BACKENDS, SERVICES
    SESSION_STORE.clear()
    BACKENDS = backends
    SERVICES = PortalServices.build(backends.record_store, backends.file_store, backends.accounts)


def set_access_config(config: Optional[AccessConfig]) -> None:
    """Replace the access configuration, or re-read it from the environment with None."""
    global ACCESS_CONFIG
    ACCESS_CONFIG = config if config is not None else AccessConfig.from_env()


app = FastAPI(title="Campus Recruitment Portal", description="Role-based campus recruitment", version="0.1.0")

# --- Static Files & Routers -----------------------------------------------------

static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

from .routes.auth import auth_router  # noqa: E402
from .routes.companies import companies_router  # noqa: E402
from .routes.panels import panels_router  # noqa: E402
from .routes.resumes import resumes_router  # noqa: E402
from .routes.users import users_router  # noqa: E402

# --- Portal sessions -------------------------------------------------------------


async def open_portal_session() -> PortalSession:
    """Create a portal session: one auth provider, one AuthContext, one router.

    The context is restored against the provider's live session before the
    router is attached, so the router starts in a settled state.
    """
    provider = BACKENDS.auth_provider_factory()
    context = AuthContext(
        build_resolver(ACCESS_CONFIG, provider),
        RoleLookup(SERVICES.store, ACCESS_CONFIG),
        provider,
        config=ACCESS_CONFIG,
    )
    await context.restore()
    services = SERVICES

    def _router(ctx: AuthContext) -> PanelRouter:
        return PanelRouter(ctx, lambda selection: build_panel(services, selection, ctx.session), services.store)

    return SESSION_STORE.add(context, _router)


def set_session_cookie(response: Response, session_id: str) -> None:
    opts = cookie_opts(SETTINGS.environment)
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        secure=opts["secure"],
        samesite=opts["samesite"],
        path="/",
        max_age=ACCESS_CONFIG.session_ttl_seconds,
    )


def _is_public_path(path: str) -> bool:
    return path.startswith(("/auth/", "/static/")) or path in ("/health", "/favicon.ico")


@app.middleware("http")
async def auth_enforcement(request: Request, call_next):
    path = request.url.path
    SESSION_STORE.prune_if_due()
    if path.startswith("/static/") or path == "/health":
        return await call_next(request)

    sid = request.cookies.get(SESSION_COOKIE_NAME)
    rec = SESSION_STORE.get(sid)
    if rec is not None:
        # Expiry is handled like a logout: the router falls back to login.
        rec.context.expire_if_needed()
    request.state.portal = rec
    if _is_public_path(path):
        return await call_next(request)

    selection = rec.router.selection if rec is not None else None
    if rec is not None and selection is None:
        rec.router.sync()
        selection = rec.router.selection
    if selection is None or selection.is_login:
        if path.startswith("/api/"):
            headers = {"Cache-Control": "private, no-store", "Vary": "Origin"}
            return JSONResponse({"error": "unauthenticated"}, status_code=401, headers=headers)
        return RedirectResponse(url="/auth/login", status_code=303 if request.method == "POST" else 302)
    return await call_next(request)


# --- Security Headers Middleware ----------------------------------------------


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    extra_connect = []
    pub = (os.getenv("SUPABASE_URL") or "").strip()
    if pub.startswith(("https://", "http://")):
        extra_connect.append(pub.rstrip("/"))
    connect_src = "'self'" + (" " + " ".join(extra_connect) if extra_connect else "")
    if SETTINGS.environment == "prod":
        csp = (
            "default-src 'self'; script-src 'self'; style-src 'self'; "
            f"img-src 'self' data:; font-src 'self' data:; connect-src {connect_src}; frame-src {connect_src};"
        )
    else:
        # Developer experience: allow inline for local SSR components.
        csp = (
            "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'; "
            f"img-src 'self' data:; font-src 'self' data:; connect-src {connect_src}; frame-src {connect_src};"
        )
    response.headers.setdefault("Content-Security-Policy", csp)
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    if SETTINGS.environment == "prod":
        response.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
    response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
    response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response


# --- Other Routes & App Includes -----------------------------------------------

app.include_router(auth_router)
app.include_router(panels_router)
app.include_router(companies_router)
app.include_router(users_router)
app.include_router(resumes_router)


@app.get("/health")
async def health_check():
    # Security: include no-store to avoid caching any runtime status.
    return JSONResponse(
        {"status": "healthy", "backend": BACKENDS.source},
        headers={"Cache-Control": "private, no-store"},
    )
