# Portal Component System
# Pure Python Components for type-safe HTML generation

from .base import Component
from .layout import Layout
from .navigation import NavBar
from .cards import CompanyCard, ResumeCard, ResumeStatusBadge, StatCards
from .forms import (
    CompanyForm,
    FileUploadField,
    FormField,
    LoginForm,
    ProfileForm,
    SelectField,
    SubmitButton,
    TextAreaField,
    TextInputField,
)
from .tables import CompanyTable, ProfileTable, ResumeReviewTable, SearchBox

__all__ = [
    "CompanyCard",
    "CompanyForm",
    "CompanyTable",
    "Component",
    "FileUploadField",
    "FormField",
    "Layout",
    "LoginForm",
    "NavBar",
    "ProfileForm",
    "ProfileTable",
    "ResumeCard",
    "ResumeReviewTable",
    "ResumeStatusBadge",
    "SearchBox",
    "SelectField",
    "StatCards",
    "SubmitButton",
    "TextAreaField",
    "TextInputField",
]
