"""
Form components for the portal.
"""

from .fields import FormField, TextAreaField, FileUploadField, TextInputField, SelectField, SubmitButton
from .login_form import LoginForm
from .company_form import CompanyForm
from .profile_form import ProfileForm, ROLE_LABELS

__all__ = [
    "CompanyForm",
    "FileUploadField",
    "FormField",
    "LoginForm",
    "ProfileForm",
    "ROLE_LABELS",
    "SelectField",
    "SubmitButton",
    "TextAreaField",
    "TextInputField",
]
