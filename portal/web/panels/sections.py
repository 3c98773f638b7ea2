"""
Tab sections shared by the staff-side panels (companies, users, dashboard).
"""
from __future__ import annotations

from typing import Sequence

from ...recruiting.dashboard import dashboard_stats
from ..components import Component, CompanyForm, CompanyTable, ProfileForm, ProfileTable, SearchBox, StatCards
from .base import Panel, PanelRequest


def companies_section(panel: Panel, request: PanelRequest, *, tab: str = "companies") -> str:
    companies = panel.services.companies
    editing = companies.get(request.edit) if request.edit else None
    rows = companies.list(request.q)
    return f"""
    <section class="panel-section" aria-labelledby="companies-title">
        <h2 id="companies-title">Company Management</h2>
        {SearchBox(tab, request.q, "Search companies by name, industry or location...").render()}
        {CompanyTable(rows, csrf_token=request.csrf_token, tab=tab).render()}
        {CompanyForm(request.csrf_token, company=editing).render()}
    </section>
    """


def profiles_section(
    panel: Panel,
    request: PanelRequest,
    *,
    role: str,
    heading: str,
    tab: str,
    assignable_roles: Sequence[str],
) -> str:
    profiles = panel.services.profiles
    editing = None
    if request.edit:
        candidate = profiles.get(request.edit)
        if candidate is not None and candidate.get("role") == role:
            editing = candidate
    rows = profiles.list(role, request.q)
    form = ProfileForm(
        request.csrf_token,
        roles=assignable_roles,
        profile=editing,
        default_role=role,
        return_tab=tab,
    )
    return f"""
    <section class="panel-section" aria-labelledby="{tab}-title">
        <h2 id="{tab}-title">{Component.escape(heading)}</h2>
        {SearchBox(tab, request.q, "Search by name, email, registration number or department...").render()}
        {ProfileTable(rows, csrf_token=request.csrf_token, tab=tab, self_id=panel.subject_id).render()}
        {form.render()}
    </section>
    """


def dashboard_section(panel: Panel) -> str:
    stats = dashboard_stats(panel.services.store)
    return StatCards(
        [
            ("Students", stats.students),
            ("Staff", stats.staff),
            ("Admins", stats.admins),
            ("Companies", stats.companies),
        ]
    ).render()


__all__ = ["companies_section", "dashboard_section", "profiles_section"]
