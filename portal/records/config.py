"""
Centralized configuration for the resumes bucket and upload limits.

Behavior:
    - RESUMES_BUCKET_DEFAULT defines the canonical bucket ("resumes").
    - get_resumes_bucket() reads the PORTAL_RESUMES_BUCKET override.
    - get_max_resume_bytes() reads PORTAL_MAX_RESUME_BYTES, defaulting to and
      clamped at 5 MiB.

Permissions:
    Pure configuration; no external calls or privileges required.
"""
from __future__ import annotations

import os


RESUMES_BUCKET_DEFAULT = "resumes"
MAX_RESUME_BYTES = 5 * 1024 * 1024


def get_resumes_bucket() -> str:
    return (os.getenv("PORTAL_RESUMES_BUCKET") or RESUMES_BUCKET_DEFAULT).strip()


def _parse_int_env(name: str, default: int, *, contract_max: int | None = None) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value <= 0:
        return default
    if isinstance(contract_max, int) and contract_max > 0:
        value = min(value, contract_max)
    return value


def get_max_resume_bytes() -> int:
    return _parse_int_env("PORTAL_MAX_RESUME_BYTES", MAX_RESUME_BYTES, contract_max=MAX_RESUME_BYTES)


__all__ = [
    "MAX_RESUME_BYTES",
    "RESUMES_BUCKET_DEFAULT",
    "get_max_resume_bytes",
    "get_resumes_bucket",
]
