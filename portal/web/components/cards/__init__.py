"""
Card components for the portal panels.
"""

from .company import CompanyCard
from .resume import ResumeCard, ResumeStatusBadge, STATUS_LABELS
from .stats import StatCards

__all__ = ["CompanyCard", "ResumeCard", "ResumeStatusBadge", "STATUS_LABELS", "StatCards"]
