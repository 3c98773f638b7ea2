"""Admin panel: dashboard, companies, student registrations and resume review."""
from __future__ import annotations

from ...identity_access.domain import PanelId
from ...records.ports import EVENT_ALL
from ..components import ResumeReviewTable
from .base import Panel, PanelRequest
from .sections import companies_section, dashboard_section, profiles_section


class AdminPanel(Panel):
    panel_id = PanelId.ADMIN
    title = "Campus Recruitment - Admin Panel"
    tabs = (
        ("dashboard", "Dashboard"),
        ("companies", "Companies"),
        ("students", "Student Registration"),
        ("resumes", "Resume Review"),
    )
    subscriptions = (("companies", EVENT_ALL), ("profiles", EVENT_ALL), ("students", EVENT_ALL))

    def _render_dashboard(self, request: PanelRequest) -> str:
        return f'<h2>Dashboard</h2>{dashboard_section(self)}'

    def _render_companies(self, request: PanelRequest) -> str:
        return companies_section(self, request)

    def _render_students(self, request: PanelRequest) -> str:
        return profiles_section(
            self, request, role="student", heading="Student Registration", tab="students", assignable_roles=("student",)
        )

    def _render_resumes(self, request: PanelRequest) -> str:
        entries = self.services.resumes.list_for_review()
        return f'<h2>Resume Review</h2>{ResumeReviewTable(entries, csrf_token=request.csrf_token).render()}'


__all__ = ["AdminPanel"]
