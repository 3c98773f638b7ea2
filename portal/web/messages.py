"""
User-visible messages for error codes raised by the services.

Unknown codes fall back to a generic message so internal codes never leak
into the page.
"""
from __future__ import annotations

from ..identity_access.errors import user_message as _access_message


_MESSAGES = {
    # companies
    "invalid_name": "Please enter a name.",
    "invalid_description": "Please enter a description.",
    "invalid_location": "Please enter a location.",
    "invalid_deadline": "Please enter a valid application deadline.",
    "invalid_positions": "Please add at least one position.",
    "invalid_website": "The website must start with http:// or https://.",
    "company_not_found": "The company no longer exists.",
    # users
    "invalid_email": "Please enter a valid email address.",
    "invalid_password": "The password must be at least 6 characters long.",
    "invalid_role": "Please choose a valid role.",
    "missing_registration_number": "Students need a registration number.",
    "registration_number_taken": "This registration number is already in use.",
    "missing_department": "Staff members need a department.",
    "email_taken": "A user with this email already exists.",
    "profile_not_found": "The user no longer exists.",
    "role_not_manageable": "You are not allowed to manage users with this role.",
    "cannot_delete_self": "You cannot delete your own account.",
    "account_create_failed": "The login account could not be created.",
    "account_update_failed": "The password could not be updated.",
    "account_delete_failed": "The login account could not be deleted.",
    # resumes and applications
    "invalid_file_type": "Please upload a PDF file.",
    "empty_file": "The uploaded file is empty.",
    "file_too_large": "The file is too large.",
    "missing_file": "Please choose a file to upload.",
    "upload_failed": "The upload failed. Please try again.",
    "invalid_status": "Please choose approve or reject.",
    "student_not_found": "The student record no longer exists.",
    "resume_missing": "This student has not uploaded a resume yet.",
    "resume_not_approved": "Your resume must be approved before you can apply to companies.",
    "already_applied": "You have already applied to this company.",
    # store
    "store_error": "The data service is currently unavailable. Please try again later.",
    "duplicate_key": "This record already exists.",
}

_ACCESS_CODES = {"invalid_credentials", "provider_unavailable", "no_role_assigned", "forbidden_panel_transition"}


def error_message(code: str) -> str:
    if code in _ACCESS_CODES:
        return _access_message(code)
    return _MESSAGES.get(code, "Something went wrong. Please try again.")


__all__ = ["error_message"]
