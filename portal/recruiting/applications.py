"""Student applications to company listings."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from .companies import COMPANIES_TABLE
from .directory import STUDENTS_TABLE
from .models import ResumeStatus


APPLICATIONS_TABLE = "applications"


class ApplicationService:
    def __init__(self, store):
        self._store = store

    def can_apply(self, student_id: str) -> bool:
        rows = self._store.select(STUDENTS_TABLE, {"user_id": student_id}, columns=("resume_status",), limit=1)
        return bool(rows) and rows[0].get("resume_status") == ResumeStatus.APPROVED.value

    def applied_company_ids(self, student_id: str) -> set[str]:
        rows = self._store.select(APPLICATIONS_TABLE, {"student_id": student_id}, columns=("company_id",))
        return {str(r.get("company_id")) for r in rows}

    def apply(self, student_id: str, company_id: str) -> dict:
        if not self._store.select(COMPANIES_TABLE, {"id": company_id}, columns=("id",), limit=1):
            raise LookupError("company_not_found")
        if not self.can_apply(student_id):
            raise ValueError("resume_not_approved")
        if company_id in self.applied_company_ids(student_id):
            raise ValueError("already_applied")
        return self._store.insert(
            APPLICATIONS_TABLE,
            {
                "id": str(uuid4()),
                "student_id": student_id,
                "company_id": company_id,
                "status": "submitted",
                "created_at": datetime.now(timezone.utc).isoformat(),
            },
        )


__all__ = ["APPLICATIONS_TABLE", "ApplicationService"]
