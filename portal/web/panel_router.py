"""
Panel Router: keep exactly one panel mounted for an AuthContext.

Why:
    The router is the front door of a portal session. It owns no business
    data; it re-evaluates the access policy on every context change and swaps
    panels accordingly.

Behavior:
    - Before the context is ready the router is in the loading state and no
      panel is mounted.
    - On every context change `select_panel` runs again. When the selection
      (panel and subject) changes, the current panel is unmounted (its
      subscription scope closed) before the next one is created and mounted.
      Panels are recreated, so no panel-local state survives logout/login.
    - A panel whose mount fails releases what it acquired, and the router falls
      back to the login panel.
    - `ensure(panel_id)` rejects requests for any panel other than the one
      selected with ForbiddenPanelTransition; the mounted panel stays as is.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from ..identity_access.context import AuthContext
from ..identity_access.domain import PanelId
from ..identity_access.errors import ForbiddenPanelTransition
from ..identity_access.policy import LOGIN, PanelSelection
from ..records.subscriptions import SubscriptionScope
from .panels.base import Panel


logger = logging.getLogger("portal.web")

PanelFactory = Callable[[PanelSelection], Panel]


class PanelRouter:
    def __init__(self, context: AuthContext, factory: PanelFactory, store):
        self._context = context
        self._factory = factory
        self._store = store
        self._panel: Optional[Panel] = None
        self._scope: Optional[SubscriptionScope] = None
        self._selection: Optional[PanelSelection] = None
        self._closed = False
        self._detach = context.subscribe(self._on_context_change)
        self.sync()

    # --- State ----------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        return not self._context.ready

    @property
    def panel(self) -> Optional[Panel]:
        return self._panel

    @property
    def selection(self) -> Optional[PanelSelection]:
        return self._selection

    # --- Transitions ----------------------------------------------------------------

    def _on_context_change(self, context: AuthContext) -> None:
        self.sync()

    def sync(self) -> Optional[Panel]:
        """Re-run the access policy and mount the selected panel if it changed."""
        if self._closed:
            return None
        if not self._context.ready:
            self._unmount()
            return None
        selection = self._context.selection()
        if self._panel is not None and selection == self._selection:
            return self._panel
        self._unmount()
        self._mount(selection)
        return self._panel

    def ensure(self, panel_id: PanelId) -> Panel:
        """Return the mounted panel if it is `panel_id`, otherwise refuse."""
        panel = self.sync()
        if panel is None or self._selection is None or self._selection.panel_id is not panel_id:
            allowed = self._selection.panel_id.value if self._selection else "loading"
            logger.warning("Forbidden panel transition: requested=%s allowed=%s", panel_id.value, allowed)
            raise ForbiddenPanelTransition(panel_id.value, allowed)
        return panel

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._detach()
        self._unmount()

    # --- Internals ------------------------------------------------------------------

    def _mount(self, selection: PanelSelection) -> None:
        scope = SubscriptionScope(self._store)
        panel = self._factory(selection)
        try:
            panel.mount(scope)
        except Exception as exc:
            scope.close()
            logger.warning(
                "Mounting %s panel failed: %s", selection.panel_id.value, exc.__class__.__name__
            )
            if selection.is_login:
                raise
            self._mount(LOGIN)
            return
        self._panel, self._scope, self._selection = panel, scope, selection
        logger.info("Panel mounted: %s", selection.panel_id.value)

    def _unmount(self) -> None:
        panel, scope = self._panel, self._scope
        self._panel, self._scope, self._selection = None, None, None
        if scope is not None:
            scope.close()
        if panel is not None:
            panel.unmount()
            logger.info("Panel unmounted: %s", panel.panel_id.value)


__all__ = ["PanelFactory", "PanelRouter"]
