"""
Panel base class.

Why:
    A panel is the top-level screen of one role. It owns its push
    subscriptions and its local state (flash notices, change version), and it
    lives exactly as long as the router keeps it mounted.

Behavior:
    - `mount(scope)` acquires the panel's table subscriptions through the
      router-provided SubscriptionScope; the router closes the scope on unmount.
    - Subscription callbacks bump `version`; the browser polls it and reloads
      when it changes.
    - `render()` dispatches to `_render_<tab>` for the requested tab and falls
      back to the first tab for unknown keys.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ...identity_access.credentials import Session
from ...identity_access.domain import PanelId
from ...identity_access.policy import PanelSelection
from ...records.ports import ChangeEvent


@dataclass(frozen=True)
class PanelRequest:
    """Per-request view parameters (query string and CSRF token)."""

    tab: str = ""
    q: str = ""
    edit: str = ""
    csrf_token: str = ""


class Panel:
    panel_id: ClassVar[PanelId]
    title: ClassVar[str] = ""
    tabs: ClassVar[tuple[tuple[str, str], ...]] = ()
    subscriptions: ClassVar[tuple[tuple[str, str], ...]] = ()

    def __init__(self, services, selection: PanelSelection, session: Optional[Session]):
        self.services = services
        self.selection = selection
        self.session = session
        self.version = 0
        self.mounted = False
        self._flash: Optional[tuple[str, str]] = None

    # --- Lifecycle ----------------------------------------------------------------

    def mount(self, scope) -> None:
        for table, events in self.subscriptions:
            scope.acquire(table, events, self._on_change)
        self.mounted = True

    def unmount(self) -> None:
        self.mounted = False
        self._flash = None

    def _on_change(self, event: ChangeEvent) -> None:
        self.version += 1

    # --- Local state ----------------------------------------------------------------

    def flash(self, kind: str, message: str) -> None:
        self._flash = (kind, message)

    def pop_flash(self) -> Optional[tuple[str, str]]:
        flash, self._flash = self._flash, None
        return flash

    @property
    def subject_id(self) -> str:
        return self.selection.subject_id or ""

    @property
    def display_name(self) -> str:
        return self.session.display_name if self.session is not None else ""

    # --- Rendering ------------------------------------------------------------------

    def resolve_tab(self, tab: str) -> str:
        keys = [key for key, _ in self.tabs]
        if tab in keys:
            return tab
        return keys[0] if keys else ""

    def render(self, request: PanelRequest) -> str:
        tab = self.resolve_tab(request.tab)
        renderer = getattr(self, f"_render_{tab}", None)
        if renderer is None:
            return ""
        return renderer(request)


__all__ = ["Panel", "PanelRequest"]
