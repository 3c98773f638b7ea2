"""
Service bundle handed to panels and routes.

Built once per app from the wired backends; tests replace it through
`main.set_backends()`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..recruiting.applications import ApplicationService
from ..recruiting.companies import CompanyService
from ..recruiting.directory import ProfileService
from ..recruiting.resumes import ResumeService


@dataclass
class PortalServices:
    store: Any
    files: Any
    companies: CompanyService
    profiles: ProfileService
    resumes: ResumeService
    applications: ApplicationService

    @classmethod
    def build(cls, store, files, accounts=None) -> "PortalServices":
        return cls(
            store=store,
            files=files,
            companies=CompanyService(store),
            profiles=ProfileService(store, accounts),
            resumes=ResumeService(store, files),
            applications=ApplicationService(store),
        )


__all__ = ["PortalServices"]
