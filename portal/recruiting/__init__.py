"""Recruiting data services used by the panels (companies, profiles, resumes)."""
