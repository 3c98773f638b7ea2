"""
Resume upload and review.

Intent:
    Students upload a single PDF resume; staff approve or reject it with
    notes. Only an approved resume allows applying to companies.

Behavior:
    - Upload accepts PDFs only (content type and file signature), rejects empty
      files and files above the configured size limit.
    - A new upload resets the status to `pending` and clears review notes.
    - Review sets `approved` or `rejected` plus notes.

Permissions:
    Upload is limited to the student's own record; review to staff-side panels.
    Routes enforce both before calling into this service.
"""
from __future__ import annotations

import logging
from typing import Optional
from uuid import uuid4

from ..records.config import get_max_resume_bytes, get_resumes_bucket
from .directory import PROFILES_TABLE, STUDENTS_TABLE
from .models import ResumeStatus


logger = logging.getLogger("portal.recruiting")

PDF_CONTENT_TYPE = "application/pdf"
_PDF_MAGIC = b"%PDF-"


class ResumeService:
    def __init__(self, store, files):
        self._store = store
        self._files = files

    def status(self, student_id: str) -> Optional[dict]:
        rows = self._store.select(STUDENTS_TABLE, {"user_id": student_id}, limit=1)
        if not rows:
            return None
        row = rows[0]
        return {
            "status": ResumeStatus(row.get("resume_status") or ResumeStatus.PENDING.value),
            "url": row.get("resume_url"),
            "notes": row.get("resume_notes") or "",
        }

    def upload(self, student_id: str, *, filename: str, data: bytes, content_type: str) -> str:
        ctype = (content_type or "").split(";", 1)[0].strip().lower()
        if ctype != PDF_CONTENT_TYPE or not (filename or "").lower().endswith(".pdf"):
            raise ValueError("invalid_file_type")
        if not data:
            raise ValueError("empty_file")
        if len(data) > get_max_resume_bytes():
            raise ValueError("file_too_large")
        if not data.startswith(_PDF_MAGIC):
            raise ValueError("invalid_file_type")
        path = f"{student_id}/{uuid4()}.pdf"
        url = self._files.upload(
            bucket=get_resumes_bucket(), path=path, data=data, content_type=PDF_CONTENT_TYPE
        )
        patch = {
            "resume_url": url,
            "resume_status": ResumeStatus.PENDING.value,
            "resume_notes": "",
        }
        if not self._store.update(STUDENTS_TABLE, {"user_id": student_id}, patch):
            self._store.insert(STUDENTS_TABLE, {"user_id": student_id, **patch})
        logger.info("Resume uploaded for subject %s", student_id)
        return url

    def review(self, student_id: str, *, status: str, notes: str = "") -> dict:
        try:
            decision = ResumeStatus((status or "").strip().lower())
        except ValueError as exc:
            raise ValueError("invalid_status") from exc
        if decision is ResumeStatus.PENDING:
            raise ValueError("invalid_status")
        current = self.status(student_id)
        if current is None:
            raise LookupError("student_not_found")
        if not current["url"]:
            raise ValueError("resume_missing")
        rows = self._store.update(
            STUDENTS_TABLE,
            {"user_id": student_id},
            {"resume_status": decision.value, "resume_notes": (notes or "").strip()},
        )
        return rows[0] if rows else {}

    def list_for_review(self, status: Optional[str] = None) -> list[dict]:
        """Student records joined with profile name, email and registration number."""
        filters = None
        if status:
            try:
                filters = {"resume_status": ResumeStatus(status).value}
            except ValueError as exc:
                raise ValueError("invalid_status") from exc
        students = self._store.select(STUDENTS_TABLE, filters)
        profiles = {
            p.get("id"): p
            for p in self._store.select(
                PROFILES_TABLE, {"role": "student"}, columns=("id", "name", "email", "registration_number")
            )
        }
        out = []
        for s in students:
            p = profiles.get(s.get("user_id"))
            if p is None:
                continue
            out.append(
                {
                    "student_id": s.get("user_id"),
                    "name": p.get("name") or "",
                    "email": p.get("email") or "",
                    "registration_number": p.get("registration_number") or "",
                    "status": s.get("resume_status") or ResumeStatus.PENDING.value,
                    "url": s.get("resume_url"),
                    "notes": s.get("resume_notes") or "",
                }
            )
        out.sort(key=lambda r: r["name"].lower())
        return out


__all__ = ["PDF_CONTENT_TYPE", "ResumeService"]
