"""
Student panel, parameterized by the session's subject id.

Tabs: dashboard (resume status, upcoming deadlines), resume (upload and
review notes), companies (listings with apply).
"""
from __future__ import annotations

from ...identity_access.domain import PanelId
from ...records.config import get_max_resume_bytes
from ...records.ports import EVENT_ALL
from ..components import CompanyCard, Component, ResumeCard, ResumeStatusBadge, SearchBox
from .base import Panel, PanelRequest


class StudentPanel(Panel):
    panel_id = PanelId.STUDENT
    title = "Campus Recruitment - Student Panel"
    tabs = (("dashboard", "Dashboard"), ("resume", "Resume Management"), ("companies", "Companies"))
    subscriptions = (("companies", EVENT_ALL), ("students", EVENT_ALL))

    def _resume(self) -> dict | None:
        return self.services.resumes.status(self.subject_id)

    def _render_dashboard(self, request: PanelRequest) -> str:
        resume = self._resume()
        if resume and resume.get("url"):
            status_html = (
                f"{ResumeStatusBadge(resume['status'].value).render()}"
                '<p><a class="btn btn-secondary" href="/?tab=resume">View Resume</a></p>'
            )
        else:
            status_html = (
                '<p class="text-muted">You haven\'t uploaded a resume yet.</p>'
                '<p><a class="btn btn-secondary" href="/?tab=resume">Upload Resume</a></p>'
            )
        upcoming = sorted(self.services.companies.list(), key=lambda c: str(c.get("deadline") or ""))[:3]
        deadlines = "".join(
            "<li>"
            f"<strong>{Component.escape(c.get('name'))}</strong> "
            f"<span>{Component.escape(', '.join(c.get('positions') or []))}</span> "
            f"<time>{Component.escape(c.get('deadline'))}</time>"
            "</li>"
            for c in upcoming
        )
        return f"""
        <section class="card">
            <h2>Welcome to Campus Recruitment Portal</h2>
            <p>This platform connects you with potential employers and helps you manage your job applications.</p>
        </section>
        <section class="card"><h3>Resume Status</h3>{status_html}</section>
        <section class="card"><h3>Upcoming Deadlines</h3><ul class="deadline-list">{deadlines}</ul></section>
        """

    def _render_resume(self, request: PanelRequest) -> str:
        return ResumeCard(self._resume(), csrf_token=request.csrf_token, max_bytes=get_max_resume_bytes()).render()

    def _render_companies(self, request: PanelRequest) -> str:
        can_apply = self.services.applications.can_apply(self.subject_id)
        applied = self.services.applications.applied_company_ids(self.subject_id)
        cards = "".join(
            CompanyCard(
                c,
                csrf_token=request.csrf_token,
                can_apply=can_apply,
                applied=str(c.get("id")) in applied,
            ).render()
            for c in self.services.companies.list(request.q)
        )
        notice = ""
        if not can_apply:
            notice = '<p class="notice">Your resume must be approved before you can apply to companies.</p>'
        return f"""
        <section class="panel-section">
            <h2>Companies</h2>
            {SearchBox("companies", request.q, "Search companies by name, industry or location...").render()}
            {notice}
            <div class="company-grid">{cards or '<p class="text-muted">No companies found.</p>'}</div>
        </section>
        """


__all__ = ["StudentPanel"]
