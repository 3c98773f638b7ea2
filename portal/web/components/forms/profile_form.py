"""
Profile create/edit form used by the student registration and user
management tabs.
"""
from typing import Optional, Sequence

from ..base import Component
from .fields import SelectField, SubmitButton, TextInputField


ROLE_LABELS = {
    "student": "Student",
    "staff": "Staff",
    "admin": "Admin",
    "super_admin": "Super Admin",
}


class ProfileForm(Component):
    def __init__(
        self,
        csrf_token: str,
        *,
        roles: Sequence[str],
        profile: Optional[dict] = None,
        default_role: str = "student",
        return_tab: str = "",
    ):
        """
        Args:
            csrf_token: Token of the portal session
            roles: Roles the current user may assign
            profile: Existing profile when editing
            default_role: Preselected role for new profiles
            return_tab: Panel tab to redirect back to
        """
        self.csrf_token = csrf_token
        self.roles = roles
        self.profile = profile or {}
        self.default_role = default_role
        self.return_tab = return_tab

    def render(self) -> str:
        p = self.profile
        profile_id = p.get("id")
        action = f"/users/{profile_id}" if profile_id else "/users"
        role = p.get("role") or self.default_role
        if len(self.roles) > 1:
            role_html = SelectField("role", "Role", required=True).render(
                [(r, ROLE_LABELS.get(r, r)) for r in self.roles], value=role
            )
        else:
            role_html = f'<input type="hidden" name="role" value="{self.escape(self.roles[0] if self.roles else role)}">'
        password_help = "Leave blank to keep the current password" if profile_id else "At least 6 characters"
        fields = [
            TextInputField("name", "Full name", required=True).render(value=p.get("name") or "", class_="form-input"),
            TextInputField("email", "Email", required=True).render(
                value=p.get("email") or "", input_type="email", class_="form-input"
            ),
            TextInputField("password", "Password", help_text=password_help).render(
                input_type="password", autocomplete="new-password", class_="form-input"
            ),
            role_html,
            TextInputField("registration_number", "Registration number", help_text="Required for students").render(
                value=p.get("registration_number") or "", class_="form-input"
            ),
            TextInputField("department", "Department", help_text="Required for staff").render(
                value=p.get("department") or "", class_="form-input"
            ),
        ]
        heading = "Edit user" if profile_id else "Add user"
        return f"""
        <form method="post" action="{self.escape(action)}" class="profile-form">
            <h3>{heading}</h3>
            <input type="hidden" name="csrf_token" value="{self.escape(self.csrf_token)}">
            <input type="hidden" name="return_tab" value="{self.escape(self.return_tab)}">
            {"".join(fields)}
            <div class="form-actions">{SubmitButton("Save").render()}</div>
        </form>
        """
