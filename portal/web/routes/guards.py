"""
Guards shared by the state-changing form routes.

Why:
    Every POST route needs the same three checks before touching a service:
    a live portal session, a same-origin request carrying the session's CSRF
    token, and a capability granted by the currently selected panel.

Behavior:
    `guard_form()` returns a `FormContext` on success or a ready-made response
    (redirect to login, 403) that the route returns unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Union

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from ...identity_access.policy import PanelSelection, can
from ..panels.base import Panel
from ..sessions import PortalSession
from .security import _csrf_matches, _is_same_origin


logger = logging.getLogger("portal.web")


def _private_no_store() -> dict:
    return {"Cache-Control": "private, no-store"}


def _json_private(payload: Any, *, status_code: int = 200) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=_private_no_store())


def _forbidden(detail: str) -> HTMLResponse:
    body = f'<!DOCTYPE html><html lang="en"><body><h1>Forbidden</h1><p>{detail}</p><a href="/">Back</a></body></html>'
    return HTMLResponse(body, status_code=403, headers=_private_no_store())


def _see_other(url: str) -> RedirectResponse:
    resp = RedirectResponse(url=url, status_code=303)
    resp.headers["Cache-Control"] = "private, no-store"
    return resp


@dataclass
class FormContext:
    portal: PortalSession
    panel: Panel
    selection: PanelSelection
    form: Any


async def guard_form(request: Request, *capabilities: str) -> Union[FormContext, Response]:
    """Check session, origin, CSRF token and that the panel grants any of `capabilities`."""
    portal = getattr(request.state, "portal", None)
    if portal is None:
        return _see_other("/auth/login")
    if not _is_same_origin(request):
        return _forbidden("csrf_violation")
    form = await request.form()
    if not _csrf_matches(portal.csrf_token, form.get("csrf_token")):
        return _forbidden("csrf_violation")
    panel = portal.router.sync()
    selection = portal.router.selection
    if panel is None or selection is None or selection.is_login:
        return _see_other("/auth/login")
    if not any(can(selection, c) for c in capabilities):
        logger.warning("Capability %s denied for panel %s", "|".join(capabilities), selection.panel_id.value)
        return _forbidden("forbidden")
    return FormContext(portal=portal, panel=panel, selection=selection, form=form)


__all__ = ["FormContext", "guard_form", "_forbidden", "_json_private", "_private_no_store", "_see_other"]
