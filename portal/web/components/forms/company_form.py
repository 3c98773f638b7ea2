"""
Company create/edit form.

Positions and requirements are edited as one entry per line; the service
splits them into lists.
"""
from typing import Optional

from ..base import Component
from .fields import SubmitButton, TextAreaField, TextInputField


def _lines(value) -> str:
    if isinstance(value, (list, tuple)):
        return "\n".join(str(v) for v in value)
    return str(value or "")


class CompanyForm(Component):
    """Renders the company form posting to /companies or /companies/{id}."""

    def __init__(self, csrf_token: str, *, company: Optional[dict] = None, error: Optional[str] = None):
        self.csrf_token = csrf_token
        self.company = company or {}
        self.error = error

    def render(self) -> str:
        c = self.company
        company_id = c.get("id")
        action = f"/companies/{company_id}" if company_id else "/companies"
        heading = "Edit company" if company_id else "Add company"
        fields = [
            TextInputField("name", "Company name", required=True).render(value=c.get("name") or "", class_="form-input"),
            TextInputField("industry", "Industry").render(value=c.get("industry") or "", class_="form-input"),
            TextInputField("location", "Location", required=True).render(value=c.get("location") or "", class_="form-input"),
            TextInputField("website", "Website").render(value=c.get("website") or "", input_type="url", class_="form-input"),
            TextInputField("deadline", "Application deadline", required=True).render(
                value=c.get("deadline") or "", input_type="date", class_="form-input"
            ),
            TextAreaField("description", "Description", required=True).render(value=c.get("description") or ""),
            TextAreaField("positions", "Positions", required=True, help_text="One position per line").render(
                value=_lines(c.get("positions"))
            ),
            TextAreaField("requirements", "Requirements", help_text="One requirement per line").render(
                value=_lines(c.get("requirements"))
            ),
        ]
        error_html = f'<div class="form-error" role="alert">{self.escape(self.error)}</div>' if self.error else ""
        return f"""
        <form method="post" action="{self.escape(action)}" class="company-form">
            <h3>{heading}</h3>
            <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
            {"".join(fields)}
            {error_html}
            <div class="form-actions">{SubmitButton("Save company").render()}</div>
        </form>
        """
