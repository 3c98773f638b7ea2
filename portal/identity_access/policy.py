"""
Access Policy: map (session, role) to the one panel the session may view.

Decision table, evaluated top to bottom, first match wins:

| Condition                                             | Panel        |
|-------------------------------------------------------|--------------|
| session absent or role absent                         | login        |
| role is super_admin or email equals the pinned id     | super_admin  |
| role is admin                                         | admin        |
| role is staff                                         | staff        |
| role is student                                       | student      |
| anything else                                         | login        |

`select_panel` is pure: no hidden state, no I/O. Callers re-evaluate it on
every session or role change instead of caching the result.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .credentials import Session
from .domain import PanelId, RoleTag


@dataclass(frozen=True)
class PanelSelection:
    panel_id: PanelId
    subject_id: Optional[str] = None

    @property
    def is_login(self) -> bool:
        return self.panel_id is PanelId.LOGIN


LOGIN = PanelSelection(PanelId.LOGIN)

_ROLE_PANELS = {
    RoleTag.ADMIN: PanelId.ADMIN,
    RoleTag.STAFF: PanelId.STAFF,
    RoleTag.STUDENT: PanelId.STUDENT,
}


def select_panel(
    session: Optional[Session],
    role: Union[RoleTag, str, None],
    *,
    super_admin_identifier: str = "",
) -> PanelSelection:
    if session is None or role is None or role == "":
        return LOGIN
    tag = RoleTag.parse(role)
    if tag is RoleTag.SUPER_ADMIN or (super_admin_identifier and session.email == super_admin_identifier):
        return PanelSelection(PanelId.SUPER_ADMIN, session.subject_id)
    panel = _ROLE_PANELS.get(tag) if tag is not None else None
    if panel is None:
        return LOGIN
    return PanelSelection(panel, session.subject_id)


# --- Capabilities -------------------------------------------------------------

COMPANIES_READ = "companies:read"
COMPANIES_WRITE = "companies:write"
RESUME_UPLOAD = "resume:upload"
APPLICATIONS_CREATE = "applications:create"
RESUMES_REVIEW = "resumes:review"
STUDENTS_MANAGE = "students:manage"
DASHBOARD_READ = "dashboard:read"
USERS_MANAGE = "users:manage"

_STUDENT = frozenset({COMPANIES_READ, RESUME_UPLOAD, APPLICATIONS_CREATE})
_STAFF = frozenset({COMPANIES_READ, COMPANIES_WRITE, RESUMES_REVIEW})
_ADMIN = _STAFF | {STUDENTS_MANAGE, DASHBOARD_READ}
_SUPER_ADMIN = _ADMIN | {USERS_MANAGE}

CAPABILITIES: dict[PanelId, frozenset[str]] = {
    PanelId.LOGIN: frozenset(),
    PanelId.STUDENT: _STUDENT,
    PanelId.STAFF: _STAFF,
    PanelId.ADMIN: frozenset(_ADMIN),
    PanelId.SUPER_ADMIN: frozenset(_SUPER_ADMIN),
}


def capabilities_for(selection: PanelSelection) -> frozenset[str]:
    """Capabilities follow the selected panel so the identity pin carries super-admin rights."""
    return CAPABILITIES.get(selection.panel_id, frozenset())


def can(selection: PanelSelection, capability: str) -> bool:
    return capability in capabilities_for(selection)


__all__ = [
    "APPLICATIONS_CREATE",
    "CAPABILITIES",
    "COMPANIES_READ",
    "COMPANIES_WRITE",
    "DASHBOARD_READ",
    "LOGIN",
    "PanelSelection",
    "RESUMES_REVIEW",
    "RESUME_UPLOAD",
    "STUDENTS_MANAGE",
    "USERS_MANAGE",
    "can",
    "capabilities_for",
    "select_panel",
]
