"""Login panel: the fail-closed destination of the access policy."""
from __future__ import annotations

from ...identity_access.demo import DEMO_IDENTITIES
from ...identity_access.domain import PanelId
from ..components import LoginForm
from .base import Panel, PanelRequest


_ROLE_LABELS = {
    "admin": "Admin",
    "staff": "Staff",
    "student": "Student",
    "super_admin": "Super Admin",
}


class LoginPanel(Panel):
    panel_id = PanelId.LOGIN
    title = "Campus Recruitment Portal"

    def render(self, request: PanelRequest, *, error: str | None = None, email: str = "", show_demo: bool = False) -> str:
        demo = ()
        if show_demo:
            demo = tuple((_ROLE_LABELS[d.role.value], d.identifier, d.secret) for d in DEMO_IDENTITIES)
        return LoginForm(error=error, email=email, demo_accounts=demo).render()


__all__ = ["LoginPanel"]
