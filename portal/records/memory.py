"""
In-memory record and file stores for development and tests.

Why:
    Local development and the test-suite should not need a hosted backend. The
    in-memory store honours the same contract as the Supabase adapter,
    including change notifications through the shared `ChangeFeed`.
"""
from __future__ import annotations

import copy
import threading
from typing import Any, Iterable, Mapping, Optional, Sequence

from .feed import ChangeFeed
from .ports import (
    EVENT_DELETE,
    EVENT_INSERT,
    EVENT_UPDATE,
    ChangeCallback,
    ChangeEvent,
    RecordStoreError,
    Row,
    SubscriptionHandle,
)


def _matches(row: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    if not filters:
        return True
    return all(row.get(key) == value for key, value in filters.items())


class InMemoryRecordStore:
    """Dict-of-tables store; rows are copied on the way in and out."""

    def __init__(self, feed: Optional[ChangeFeed] = None):
        self._tables: dict[str, list[Row]] = {}
        self._lock = threading.Lock()
        self.feed = feed or ChangeFeed()

    # --- Queries ------------------------------------------------------------------

    def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        columns: Optional[Sequence[str]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Row]:
        with self._lock:
            rows = [copy.deepcopy(r) for r in self._tables.get(table, []) if _matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by) or ""), reverse=descending)
        if limit is not None:
            rows = rows[: max(0, int(limit))]
        if columns:
            rows = [{c: r.get(c) for c in columns} for r in rows]
        return rows

    # --- Writes -------------------------------------------------------------------

    def insert(self, table: str, row: Mapping[str, Any]) -> Row:
        if not table:
            raise RecordStoreError("invalid_table")
        stored = copy.deepcopy(dict(row))
        with self._lock:
            rows = self._tables.setdefault(table, [])
            if "id" in stored and any(r.get("id") == stored["id"] for r in rows):
                raise RecordStoreError("duplicate_key", f"{table}.id")
            rows.append(stored)
        self.feed.publish(ChangeEvent(table, EVENT_INSERT, copy.deepcopy(stored)))
        return copy.deepcopy(stored)

    def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> list[Row]:
        if not filters:
            raise RecordStoreError("unfiltered_update")
        changed: list[Row] = []
        with self._lock:
            for r in self._tables.get(table, []):
                if _matches(r, filters):
                    r.update(copy.deepcopy(dict(patch)))
                    changed.append(copy.deepcopy(r))
        for r in changed:
            self.feed.publish(ChangeEvent(table, EVENT_UPDATE, r))
        return changed

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        if not filters:
            raise RecordStoreError("unfiltered_delete")
        with self._lock:
            rows = self._tables.get(table, [])
            removed = [r for r in rows if _matches(r, filters)]
            self._tables[table] = [r for r in rows if not _matches(r, filters)]
        for r in removed:
            self.feed.publish(ChangeEvent(table, EVENT_DELETE, r))
        return len(removed)

    # --- Subscriptions ------------------------------------------------------------

    def subscribe(self, table: str, events: str | Iterable[str], callback: ChangeCallback) -> SubscriptionHandle:
        return self.feed.subscribe(table, events, callback)

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        self.feed.unsubscribe(handle)

    def open_subscriptions(self) -> int:
        return self.feed.open_subscriptions()


class InMemoryFileStore:
    """Keep uploaded objects in a dict; URLs use the `memory://` scheme."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}

    def upload(self, *, bucket: str, path: str, data: bytes, content_type: str) -> str:
        key = path.lstrip("/")
        self.objects[(bucket, key)] = (bytes(data), content_type)
        return f"memory://{bucket}/{key}"


# --- Demo seed --------------------------------------------------------------------

DEMO_PROFILES: tuple[Row, ...] = (
    {"id": "0", "name": "Super Admin", "email": "superadmin@example.com", "role": "super_admin",
     "registration_number": None, "department": None, "created_at": "2025-01-01T00:00:00+00:00"},
    {"id": "1", "name": "Admin User", "email": "admin@example.com", "role": "admin",
     "registration_number": None, "department": None, "created_at": "2025-01-02T00:00:00+00:00"},
    {"id": "2", "name": "Staff User", "email": "staff@example.com", "role": "staff",
     "registration_number": None, "department": "Placement Cell", "created_at": "2025-01-03T00:00:00+00:00"},
    {"id": "3", "name": "Student User", "email": "student@example.com", "role": "student",
     "registration_number": "CS2022001", "department": "Computer Science", "created_at": "2025-01-04T00:00:00+00:00"},
    {"id": "4", "name": "Jane Smith", "email": "jane@example.com", "role": "student",
     "registration_number": "BA2021014", "department": "Business Administration", "created_at": "2025-01-05T00:00:00+00:00"},
    {"id": "5", "name": "John Doe", "email": "john@example.com", "role": "student",
     "registration_number": "ME2023007", "department": "Mechanical Engineering", "created_at": "2025-01-06T00:00:00+00:00"},
)

DEMO_STUDENTS: tuple[Row, ...] = (
    {"user_id": "3", "resume_status": "pending", "resume_url": None, "resume_notes": ""},
    {"user_id": "4", "resume_status": "approved", "resume_url": "memory://resumes/4/resume.pdf",
     "resume_notes": "Great resume, approved for applications."},
    {"user_id": "5", "resume_status": "rejected", "resume_url": "memory://resumes/5/resume.pdf",
     "resume_notes": "Please add more details about your project experience."},
)

DEMO_COMPANIES: tuple[Row, ...] = (
    {"id": "c1", "name": "Tech Innovations Inc.", "description": "Leading technology company focused on AI solutions.",
     "positions": ["Software Engineer", "Data Scientist", "UX Designer"], "deadline": "2025-06-15",
     "requirements": ["Strong programming skills", "Problem-solving abilities", "Team player"],
     "location": "San Francisco, CA", "industry": "Technology", "website": None,
     "posted_by": "Admin User", "created_at": "2025-02-03T00:00:00+00:00"},
    {"id": "c2", "name": "Global Finance Group", "description": "International financial services provider.",
     "positions": ["Financial Analyst", "Risk Management Specialist", "Business Consultant"], "deadline": "2025-05-30",
     "requirements": ["Finance or related degree", "Analytical skills", "Excel proficiency"],
     "location": "New York, NY", "industry": "Finance", "website": None,
     "posted_by": "Staff User", "created_at": "2025-02-02T00:00:00+00:00"},
    {"id": "c3", "name": "Eco Solutions", "description": "Sustainable engineering and environmental consulting firm.",
     "positions": ["Environmental Engineer", "Sustainability Consultant", "Project Manager"], "deadline": "2025-07-01",
     "requirements": ["Engineering background", "Environmental knowledge", "Project management skills"],
     "location": "Seattle, WA", "industry": "Engineering", "website": None,
     "posted_by": "Admin User", "created_at": "2025-02-01T00:00:00+00:00"},
)


def seed_demo_records(store: InMemoryRecordStore) -> InMemoryRecordStore:
    """Insert demo profiles, student records and companies."""
    for row in DEMO_PROFILES:
        store.insert("profiles", row)
    for row in DEMO_STUDENTS:
        store.insert("students", row)
    for row in DEMO_COMPANIES:
        store.insert("companies", row)
    return store


__all__ = [
    "DEMO_COMPANIES",
    "DEMO_PROFILES",
    "DEMO_STUDENTS",
    "InMemoryFileStore",
    "InMemoryRecordStore",
    "seed_demo_records",
]
