"""
CompanyCard component.

Shows one listing to students: description, positions, requirements,
deadline and the apply action. The apply button is disabled until the
student's resume is approved.
"""

from typing import Optional

from ..base import Component


class CompanyCard(Component):
    def __init__(
        self,
        company: dict,
        *,
        csrf_token: Optional[str] = None,
        can_apply: bool = False,
        applied: bool = False,
    ):
        self.company = company
        self.csrf_token = csrf_token
        self.can_apply = can_apply
        self.applied = applied

    def render(self) -> str:
        c = self.company
        positions = "".join(f"<li>{self.escape(p)}</li>" for p in c.get("positions") or [])
        requirements = "".join(f"<li>{self.escape(r)}</li>" for r in c.get("requirements") or [])
        meta = [f'<span class="company-location">{self.escape(c.get("location"))}</span>']
        if c.get("industry"):
            meta.append(f'<span class="company-industry">{self.escape(c.get("industry"))}</span>')
        website = ""
        if c.get("website"):
            website = (
                f'<a {self.attributes(href=c.get("website"), target="_blank", rel="noopener")}>Website</a>'
            )
        return f"""
        <article class="card company-card" id="company-{self.escape(c.get("id"))}">
            <header class="card-header">
                <h3>{self.escape(c.get("name"))}</h3>
                <div class="company-meta">{" ".join(meta)}</div>
            </header>
            <p>{self.escape(c.get("description"))}</p>
            <h4>Positions</h4>
            <ul class="company-positions">{positions}</ul>
            <h4>Requirements</h4>
            <ul class="company-requirements">{requirements}</ul>
            <footer class="card-footer">
                <span class="company-deadline">Deadline: {self.escape(c.get("deadline"))}</span>
                {website}
                {self._render_action()}
            </footer>
        </article>
        """

    def _render_action(self) -> str:
        if self.csrf_token is None:
            return ""
        if self.applied:
            return '<span class="badge badge-approved">Applied</span>'
        disabled = not self.can_apply
        button_attrs = self.attributes(
            type="submit",
            class_="btn btn-primary",
            disabled=disabled,
            title="Your resume must be approved before you can apply" if disabled else None,
        )
        return (
            f'<form method="post" action="/companies/{self.escape(self.company.get("id"))}/apply" class="apply-form">'
            f'<input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">'
            f"<button {button_attrs}>Apply</button>"
            "</form>"
        )
