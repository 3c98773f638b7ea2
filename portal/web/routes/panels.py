"""
Panel routes: render the mounted panel and expose its state to the browser.

Behavior:
    - GET / syncs the Panel Router and renders whatever panel it mounted. A
      login selection redirects to /auth/login; a context that is not ready
      yet renders a loading view instead of any panel.
    - GET /api/session reports the selected panel, role and capabilities.
    - GET /api/live returns the panel id and its change version; portal.js
      polls it and reloads the page when either changes.
"""
from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...identity_access.policy import capabilities_for
from ..components import Layout, NavBar
from ..panels import PanelRequest
from .guards import _json_private, _private_no_store


panels_router = APIRouter(tags=["Panels"])

_LOADING = '<section class="card loading" aria-busy="true"><p>Loading...</p></section>'


@panels_router.get("/", response_class=HTMLResponse)
async def index(request: Request, tab: str = "", q: str = "", edit: str = ""):
    portal = request.state.portal
    if portal.router.loading:
        layout = Layout("Loading", _LOADING)
        return HTMLResponse(layout.render(), headers=_private_no_store())
    panel = portal.router.sync()
    selection = portal.router.selection
    if panel is None or selection is None or selection.is_login:
        resp = RedirectResponse(url="/auth/login", status_code=303)
        resp.headers["Cache-Control"] = "private, no-store"
        return resp
    active = panel.resolve_tab(tab)
    content = panel.render(PanelRequest(tab=active, q=q, edit=edit, csrf_token=portal.csrf_token))
    nav = NavBar(panel.title, display_name=panel.display_name, tabs=panel.tabs, active_tab=active)
    layout = Layout(
        panel.title,
        content,
        nav_html=nav.render(),
        flash=panel.pop_flash(),
        live_panel=selection.panel_id.value,
        live_version=panel.version,
    )
    return HTMLResponse(layout.render(), headers=_private_no_store())


@panels_router.get("/api/session")
async def api_session(request: Request):
    portal = request.state.portal
    portal.router.sync()
    selection = portal.router.selection
    context = portal.context
    session = context.session
    return _json_private(
        {
            "loading": portal.router.loading,
            "panel": selection.panel_id.value if selection else None,
            "role": context.role.value if context.role is not None else None,
            "subject_id": selection.subject_id if selection else None,
            "name": session.display_name if session is not None else None,
            "capabilities": sorted(capabilities_for(selection)) if selection else [],
        }
    )


@panels_router.get("/api/live")
async def api_live(request: Request):
    portal = request.state.portal
    panel = portal.router.sync()
    selection = portal.router.selection
    return _json_private(
        {
            "panel": selection.panel_id.value if selection else None,
            "version": panel.version if panel is not None else 0,
        }
    )


__all__ = ["panels_router"]
