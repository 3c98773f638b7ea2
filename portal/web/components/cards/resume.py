"""
Resume components: status badge and the student's resume card.
"""

from typing import Optional

from ..base import Component
from ..forms.fields import FileUploadField, SubmitButton


STATUS_LABELS = {
    "approved": "Approved",
    "pending": "Pending Review",
    "rejected": "Needs Revision",
}


class ResumeStatusBadge(Component):
    def __init__(self, status: str):
        self.status = status or "pending"

    def render(self) -> str:
        label = STATUS_LABELS.get(self.status, self.status)
        return f'<span class="{self.classes("badge", f"badge-{self.status}")}">{self.escape(label)}</span>'


class ResumeCard(Component):
    """Status, review notes, link to the uploaded file and the upload form."""

    def __init__(self, resume: Optional[dict], *, csrf_token: str, max_bytes: int):
        self.resume = resume
        self.csrf_token = csrf_token
        self.max_bytes = max_bytes

    def render(self) -> str:
        r = self.resume or {}
        status = getattr(r.get("status"), "value", r.get("status")) or "pending"
        if r.get("url"):
            body = (
                f"<p>Status: {ResumeStatusBadge(status).render()}</p>"
                f'<p><a {self.attributes(href=r.get("url"), target="_blank", rel="noopener")}>View resume</a></p>'
            )
            if r.get("notes"):
                body += f'<div class="resume-notes"><h4>Reviewer notes</h4><p>{self.escape(r.get("notes"))}</p></div>'
        else:
            body = '<p class="text-muted">You haven\'t uploaded a resume yet.</p>'
        limit_mb = max(1, self.max_bytes // (1024 * 1024))
        upload = FileUploadField("resume", "Resume (PDF)", required=True, help_text=f"PDF only, up to {limit_mb} MB").render(
            accept="application/pdf"
        )
        return f"""
        <section class="card resume-card" aria-labelledby="resume-title">
            <h2 id="resume-title">Resume</h2>
            {body}
            <form method="post" action="/resume" enctype="multipart/form-data" class="resume-upload-form">
                <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
                {upload}
                <div class="form-actions">{SubmitButton("Upload Resume").render()}</div>
            </form>
        </section>
        """
