"""Super-admin panel: dashboard and management of every account type."""
from __future__ import annotations

from ...identity_access.domain import PanelId
from ...records.ports import EVENT_ALL
from .base import Panel, PanelRequest
from .sections import companies_section, dashboard_section, profiles_section


MANAGEABLE_ROLES = ("student", "staff", "admin", "super_admin")


class SuperAdminPanel(Panel):
    panel_id = PanelId.SUPER_ADMIN
    title = "Campus Recruitment - Super Admin Panel"
    tabs = (
        ("dashboard", "Dashboard"),
        ("admins", "Admins"),
        ("staff", "Staff"),
        ("students", "Students"),
        ("companies", "Companies"),
    )
    subscriptions = (("profiles", EVENT_ALL), ("companies", EVENT_ALL), ("students", EVENT_ALL))

    def _render_dashboard(self, request: PanelRequest) -> str:
        return f'<h2>System Overview</h2>{dashboard_section(self)}'

    def _render_admins(self, request: PanelRequest) -> str:
        return profiles_section(
            self, request, role="admin", heading="Admin Management", tab="admins", assignable_roles=MANAGEABLE_ROLES
        )

    def _render_staff(self, request: PanelRequest) -> str:
        return profiles_section(
            self, request, role="staff", heading="Staff Management", tab="staff", assignable_roles=MANAGEABLE_ROLES
        )

    def _render_students(self, request: PanelRequest) -> str:
        return profiles_section(
            self, request, role="student", heading="Student Management", tab="students", assignable_roles=MANAGEABLE_ROLES
        )

    def _render_companies(self, request: PanelRequest) -> str:
        return companies_section(self, request)


__all__ = ["MANAGEABLE_ROLES", "SuperAdminPanel"]
