"""
Input models for the recruiting services.

Form input arrives as loosely typed strings. The models normalize it (strip,
split list fields, parse dates) and reject invalid values with stable codes.
`validation_code()` turns a pydantic ValidationError into that code so
services can raise `ValueError(code)` like the rest of the codebase.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
import re
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic.functional_validators import field_validator


class ResumeStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


_LIST_SPLIT = re.compile(r"[,\n]")


def _split_list(v):
    if v is None:
        return []
    if isinstance(v, str):
        items = _LIST_SPLIT.split(v)
    else:
        items = list(v)
    return [str(i).strip() for i in items if str(i).strip()]


def _strip_or_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class CompanyInput(BaseModel):
    name: str = Field(..., max_length=200)
    description: str = Field(..., max_length=4000)
    location: str = Field(..., max_length=200)
    deadline: date
    positions: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    industry: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = Field(default=None, max_length=300)

    @field_validator("name", "description", "location", mode="before")
    @classmethod
    def _require_text(cls, v, info):
        if not isinstance(v, str) or not v.strip():
            raise ValueError(f"invalid_{info.field_name}")
        return v.strip()

    @field_validator("positions", "requirements", mode="before")
    @classmethod
    def _parse_list(cls, v):
        return _split_list(v)

    @field_validator("positions")
    @classmethod
    def _require_position(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("invalid_positions")
        return v

    @field_validator("industry", "website", mode="before")
    @classmethod
    def _strip_empty(cls, v):
        return _strip_or_none(v)

    @field_validator("website")
    @classmethod
    def _check_website(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.lower().startswith(("http://", "https://")):
            raise ValueError("invalid_website")
        return v

    def to_row(self) -> dict:
        data = self.model_dump()
        data["deadline"] = self.deadline.isoformat()
        return data


class ProfileInput(BaseModel):
    """Profile fields editable from the management panels."""

    name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=320)
    role: str
    registration_number: Optional[str] = Field(default=None, max_length=64)
    department: Optional[str] = Field(default=None, max_length=200)
    password: Optional[str] = Field(default=None, repr=False)

    @field_validator("name", mode="before")
    @classmethod
    def _require_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("invalid_name")
        return v.strip()

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, v):
        if not isinstance(v, str) or "@" not in v:
            raise ValueError("invalid_email")
        return v.strip()

    @field_validator("registration_number", "department", "password", mode="before")
    @classmethod
    def _strip_empty(cls, v):
        return _strip_or_none(v)

    def to_row(self) -> dict:
        return self.model_dump(exclude={"password"})


def validation_code(exc: ValidationError) -> str:
    """Return the first stable error code carried by a ValidationError."""
    for err in exc.errors():
        ctx_err = (err.get("ctx") or {}).get("error")
        if isinstance(ctx_err, ValueError) and str(ctx_err):
            return str(ctx_err)
        loc = err.get("loc") or ("input",)
        return f"invalid_{loc[0]}"
    return "invalid_input"


__all__ = ["CompanyInput", "ProfileInput", "ResumeStatus", "validation_code"]
