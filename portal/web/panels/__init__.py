"""
Panels: one top-level screen per role, created by the Panel Router.
"""
from __future__ import annotations

from typing import Optional

from ...identity_access.credentials import Session
from ...identity_access.domain import PanelId
from ...identity_access.policy import PanelSelection
from .admin import AdminPanel
from .base import Panel, PanelRequest
from .login import LoginPanel
from .staff import StaffPanel
from .student import StudentPanel
from .super_admin import SuperAdminPanel


PANEL_CLASSES: dict[PanelId, type[Panel]] = {
    PanelId.LOGIN: LoginPanel,
    PanelId.STUDENT: StudentPanel,
    PanelId.STAFF: StaffPanel,
    PanelId.ADMIN: AdminPanel,
    PanelId.SUPER_ADMIN: SuperAdminPanel,
}


def build_panel(services, selection: PanelSelection, session: Optional[Session]) -> Panel:
    cls = PANEL_CLASSES[selection.panel_id]
    return cls(services, selection, session if not selection.is_login else None)


__all__ = [
    "AdminPanel",
    "LoginPanel",
    "PANEL_CLASSES",
    "Panel",
    "PanelRequest",
    "StaffPanel",
    "StudentPanel",
    "SuperAdminPanel",
    "build_panel",
]
