"""Company listings service."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional
from uuid import uuid4

from pydantic import ValidationError

from .models import CompanyInput, validation_code


COMPANIES_TABLE = "companies"

_SEARCH_FIELDS = ("name", "industry", "location")


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse(data: Mapping[str, Any]) -> CompanyInput:
    try:
        return CompanyInput.model_validate(dict(data))
    except ValidationError as exc:
        raise ValueError(validation_code(exc)) from exc


class CompanyService:
    def __init__(self, store):
        self._store = store

    def list(self, q: str = "") -> list[dict]:
        """Newest first; optional case-insensitive search on name, industry, location."""
        rows = self._store.select(COMPANIES_TABLE, order_by="created_at", descending=True)
        needle = (q or "").strip().lower()
        if not needle:
            return rows
        return [
            r for r in rows
            if any(needle in str(r.get(f) or "").lower() for f in _SEARCH_FIELDS)
        ]

    def get(self, company_id: str) -> Optional[dict]:
        rows = self._store.select(COMPANIES_TABLE, {"id": company_id}, limit=1)
        return rows[0] if rows else None

    def create(self, data: Mapping[str, Any], *, posted_by: str) -> dict:
        payload = _parse(data)
        row = payload.to_row()
        row.update({"id": str(uuid4()), "posted_by": posted_by, "created_at": _utcnow_iso()})
        return self._store.insert(COMPANIES_TABLE, row)

    def update(self, company_id: str, data: Mapping[str, Any]) -> dict:
        if self.get(company_id) is None:
            raise LookupError("company_not_found")
        payload = _parse(data)
        rows = self._store.update(COMPANIES_TABLE, {"id": company_id}, payload.to_row())
        if not rows:
            raise LookupError("company_not_found")
        return rows[0]

    def delete(self, company_id: str) -> None:
        if self._store.delete(COMPANIES_TABLE, {"id": company_id}) == 0:
            raise LookupError("company_not_found")

    def count(self) -> int:
        return len(self._store.select(COMPANIES_TABLE, columns=("id",)))


__all__ = ["COMPANIES_TABLE", "CompanyService"]
