"""Staff panel: resume review and company listings."""
from __future__ import annotations

from ...identity_access.domain import PanelId
from ...records.ports import EVENT_ALL
from ..components import ResumeReviewTable
from .base import Panel, PanelRequest
from .sections import companies_section


class StaffPanel(Panel):
    panel_id = PanelId.STAFF
    title = "Campus Recruitment - Staff Panel"
    tabs = (("resumes", "Resume Review"), ("companies", "Companies"))
    subscriptions = (("students", EVENT_ALL), ("companies", EVENT_ALL))

    def _render_resumes(self, request: PanelRequest) -> str:
        entries = self.services.resumes.list_for_review()
        return f"""
        <section class="panel-section">
            <h2>Resume Review</h2>
            {ResumeReviewTable(entries, csrf_token=request.csrf_token).render()}
        </section>
        """

    def _render_companies(self, request: PanelRequest) -> str:
        return companies_section(self, request)


__all__ = ["StaffPanel"]
