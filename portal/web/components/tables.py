"""
Management tables for the staff, admin and super-admin panels.

Each row carries its own POST forms (delete, review) with the portal
session's CSRF token; edit links reload the panel with `edit=<id>`.
"""

from typing import Sequence

from .base import Component
from .cards.resume import ResumeStatusBadge


def _delete_form(action: str, csrf_token: str, label: str, return_tab: str = "") -> str:
    return (
        f'<form method="post" action="{Component.escape(action)}" class="inline-form">'
        f'<input type="hidden" name="csrf_token" value="{Component.escape(csrf_token)}">'
        f'<input type="hidden" name="return_tab" value="{Component.escape(return_tab)}">'
        f'<button type="submit" class="btn btn-danger" aria-label="{Component.escape(label)}">Delete</button>'
        "</form>"
    )


class SearchBox(Component):
    def __init__(self, tab: str, q: str = "", placeholder: str = "Search..."):
        self.tab = tab
        self.q = q
        self.placeholder = placeholder

    def render(self) -> str:
        attrs = self.attributes(type="search", name="q", value=self.q, placeholder=self.placeholder, class_="form-input")
        return (
            '<form method="get" action="/" class="search-form" role="search">'
            f'<input type="hidden" name="tab" value="{self.escape(self.tab)}">'
            f"<input {attrs}>"
            '<button type="submit" class="btn btn-secondary">Search</button>'
            "</form>"
        )


class CompanyTable(Component):
    def __init__(self, companies: Sequence[dict], *, csrf_token: str, tab: str = "companies"):
        self.companies = companies
        self.csrf_token = csrf_token
        self.tab = tab

    def render(self) -> str:
        if not self.companies:
            return '<p class="text-muted">No companies found.</p>'
        rows = []
        for c in self.companies:
            cid = str(c.get("id"))
            rows.append(
                "<tr>"
                f"<td>{self.escape(c.get('name'))}</td>"
                f"<td>{self.escape(c.get('industry') or 'N/A')}</td>"
                f"<td>{self.escape(c.get('location'))}</td>"
                f"<td>{self.escape(c.get('deadline'))}</td>"
                f"<td>{self.escape(c.get('posted_by'))}</td>"
                '<td class="row-actions">'
                f'<a class="btn btn-secondary" href="/?tab={self.escape(self.tab)}&amp;edit={self.escape(cid)}">Edit</a>'
                f"{_delete_form(f'/companies/{cid}/delete', self.csrf_token, 'Delete ' + str(c.get('name') or ''), self.tab)}"
                "</td>"
                "</tr>"
            )
        return (
            '<table class="data-table company-table">'
            "<thead><tr><th>Name</th><th>Industry</th><th>Location</th><th>Deadline</th>"
            "<th>Posted by</th><th>Actions</th></tr></thead>"
            f"<tbody>{''.join(rows)}</tbody></table>"
        )


class ProfileTable(Component):
    def __init__(self, profiles: Sequence[dict], *, csrf_token: str, tab: str, self_id: str = ""):
        self.profiles = profiles
        self.csrf_token = csrf_token
        self.tab = tab
        self.self_id = self_id

    def render(self) -> str:
        if not self.profiles:
            return '<p class="text-muted">No users found.</p>'
        rows = []
        for p in self.profiles:
            pid = str(p.get("id"))
            actions = f'<a class="btn btn-secondary" href="/?tab={self.escape(self.tab)}&amp;edit={self.escape(pid)}">Edit</a>'
            if pid != self.self_id:
                actions += _delete_form(f"/users/{pid}/delete", self.csrf_token, "Delete " + str(p.get("name") or ""), self.tab)
            rows.append(
                "<tr>"
                f"<td>{self.escape(p.get('name'))}</td>"
                f"<td>{self.escape(p.get('email'))}</td>"
                f"<td>{self.escape(p.get('registration_number') or '')}</td>"
                f"<td>{self.escape(p.get('department') or '')}</td>"
                f'<td class="row-actions">{actions}</td>'
                "</tr>"
            )
        return (
            '<table class="data-table profile-table">'
            "<thead><tr><th>Name</th><th>Email</th><th>Registration no.</th><th>Department</th>"
            "<th>Actions</th></tr></thead>"
            f"<tbody>{''.join(rows)}</tbody></table>"
        )


class ResumeReviewTable(Component):
    def __init__(self, entries: Sequence[dict], *, csrf_token: str):
        self.entries = entries
        self.csrf_token = csrf_token

    def render(self) -> str:
        if not self.entries:
            return '<p class="text-muted">No student records.</p>'
        rows = []
        for e in self.entries:
            sid = str(e.get("student_id"))
            if e.get("url"):
                link = f'<a {self.attributes(href=e.get("url"), target="_blank", rel="noopener")}>View</a>'
                review = (
                    f'<form method="post" action="/resumes/{self.escape(sid)}/review" class="review-form">'
                    f'<input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">'
                    f'<input type="text" name="notes" class="form-input" placeholder="Notes" value="{self.escape(e.get("notes"))}">'
                    '<button type="submit" name="status" value="approved" class="btn btn-primary">Approve</button>'
                    '<button type="submit" name="status" value="rejected" class="btn btn-danger">Reject</button>'
                    "</form>"
                )
            else:
                link = '<span class="text-muted">No resume</span>'
                review = ""
            rows.append(
                "<tr>"
                f"<td>{self.escape(e.get('name'))}</td>"
                f"<td>{self.escape(e.get('registration_number'))}</td>"
                f"<td>{ResumeStatusBadge(str(e.get('status'))).render()}</td>"
                f"<td>{link}</td>"
                f"<td>{review}</td>"
                "</tr>"
            )
        return (
            '<table class="data-table resume-table">'
            "<thead><tr><th>Student</th><th>Registration no.</th><th>Status</th><th>Resume</th>"
            "<th>Review</th></tr></thead>"
            f"<tbody>{''.join(rows)}</tbody></table>"
        )
