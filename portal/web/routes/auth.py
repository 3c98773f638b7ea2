"""
Authentication routes (login, logout) for the portal.

Why:
    The browser talks to an SSR app, so sign-in is a plain form POST. The
    resulting Session/Role pair lives server-side in a fresh portal session;
    the browser only ever sees an opaque, httpOnly cookie.

Behavior:
    - GET /auth/login renders the login panel (demo accounts listed only when
      demo logins are enabled). Signed-in users are sent to `/`.
    - POST /auth/login always opens a new portal session (no fixation of an
      earlier id), runs the Credential Resolver and the Role Lookup, and
      redirects to `/` on success. Failures re-render the login panel with the
      user-visible message for the error code.
    - POST /auth/logout clears the context (which unmounts the panel and
      releases its subscriptions), drops the portal session and the cookie.

Security:
    - Same-origin checks on both POST routes.
    - Responses carry `Cache-Control: private, no-store`.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...identity_access.errors import PROVIDER_UNAVAILABLE, AccessError
from ...identity_access.policy import LOGIN
from ..auth_utils import cookie_opts
from ..components import Layout, NavBar
from ..messages import error_message
from ..panels import LoginPanel, PanelRequest
from .guards import _forbidden
from .security import _is_same_origin


auth_router = APIRouter(tags=["Auth"])
logger = logging.getLogger("portal.web.auth")


def _main():
    from .. import main

    return main


def _login_page(*, error: Optional[str] = None, email: str = "", status_code: int = 200) -> HTMLResponse:
    main = _main()
    panel = LoginPanel(main.SERVICES, LOGIN, None)
    content = panel.render(PanelRequest(), error=error, email=email, show_demo=main.ACCESS_CONFIG.demo_logins)
    layout = Layout(LoginPanel.title, content, nav_html=NavBar(LoginPanel.title).render())
    return HTMLResponse(layout.render(), status_code=status_code, headers={"Cache-Control": "private, no-store"})


@auth_router.get("/auth/login", response_class=HTMLResponse)
async def auth_login_page(request: Request):
    portal = getattr(request.state, "portal", None)
    if portal is not None:
        portal.router.sync()
        selection = portal.router.selection
        if selection is not None and not selection.is_login:
            resp = RedirectResponse(url="/", status_code=303)
            resp.headers["Cache-Control"] = "private, no-store"
            return resp
    return _login_page()


@auth_router.post("/auth/login")
async def auth_login(request: Request):
    if not _is_same_origin(request):
        return _forbidden("csrf_violation")
    main = _main()
    form = await request.form()
    email = str(form.get("email") or "").strip()
    password = str(form.get("password") or "")

    previous = getattr(request.state, "portal", None)
    if previous is not None:
        main.SESSION_STORE.delete(previous.session_id)

    portal = await main.open_portal_session()
    try:
        await portal.context.login(email, password)
    except AccessError as exc:
        main.SESSION_STORE.delete(portal.session_id)
        logger.info("Login failed: %s", exc.code)
        status = 503 if exc.code == PROVIDER_UNAVAILABLE else 401
        resp = _login_page(error=error_message(exc.code), email=email, status_code=status)
        opts = cookie_opts(main.SETTINGS.environment)
        resp.delete_cookie(main.SESSION_COOKIE_NAME, path="/", secure=opts["secure"], samesite=opts["samesite"])
        return resp

    panel = portal.router.sync()
    if panel is None or portal.router.selection is None or portal.router.selection.is_login:
        # Superseded by a concurrent change; start over.
        main.SESSION_STORE.delete(portal.session_id)
        return _login_page(error=error_message("invalid_credentials"), email=email, status_code=401)

    resp = RedirectResponse(url="/", status_code=303)
    resp.headers["Cache-Control"] = "private, no-store"
    main.set_session_cookie(resp, portal.session_id)
    return resp


@auth_router.post("/auth/logout")
async def auth_logout(request: Request):
    if not _is_same_origin(request):
        return _forbidden("csrf_violation")
    main = _main()
    portal = getattr(request.state, "portal", None)
    if portal is not None:
        await portal.context.logout()
        main.SESSION_STORE.delete(portal.session_id)
        logger.info("Logout completed")
    resp = RedirectResponse(url="/auth/login", status_code=303)
    resp.headers["Cache-Control"] = "private, no-store"
    opts = cookie_opts(main.SETTINGS.environment)
    resp.delete_cookie(
        key=main.SESSION_COOKIE_NAME,
        path="/",
        secure=opts["secure"],
        samesite=opts["samesite"],
    )
    return resp


__all__ = ["auth_router"]
