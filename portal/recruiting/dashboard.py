"""Headline numbers for the admin and super-admin dashboards."""
from __future__ import annotations

from dataclasses import dataclass

from .companies import CompanyService
from .directory import ProfileService


@dataclass(frozen=True)
class DashboardStats:
    students: int
    staff: int
    admins: int
    companies: int


def dashboard_stats(store) -> DashboardStats:
    counts = ProfileService(store).counts_by_role()
    return DashboardStats(
        students=counts.get("student", 0),
        staff=counts.get("staff", 0),
        admins=counts.get("admin", 0),
        companies=CompanyService(store).count(),
    )


__all__ = ["DashboardStats", "dashboard_stats"]
