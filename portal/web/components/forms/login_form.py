"""
Login form component.

Renders the identifier/secret form, the error returned by the last attempt
and, when demo logins are enabled, the list of demo accounts.
"""
from typing import Optional, Sequence

from ..base import Component
from .fields import SubmitButton, TextInputField


class LoginForm(Component):
    def __init__(
        self,
        *,
        error: Optional[str] = None,
        email: str = "",
        demo_accounts: Sequence[tuple[str, str, str]] = (),
    ):
        """
        Args:
            error: User-visible message of the failed attempt
            email: Identifier to prefill after a failed attempt
            demo_accounts: (role label, identifier, secret) rows for the hint box
        """
        self.error = error
        self.email = email
        self.demo_accounts = demo_accounts

    def render(self) -> str:
        email_field = TextInputField("email", "Email", required=True).render(
            value=self.email, input_type="text", autocomplete="username", class_="form-input"
        )
        password_field = TextInputField("password", "Password", required=True).render(
            input_type="password", autocomplete="current-password", class_="form-input"
        )
        error_html = (
            f'<div class="form-error" role="alert">{self.escape(self.error)}</div>' if self.error else ""
        )
        return f"""
        <section class="card login-card" aria-labelledby="login-title">
            <h2 id="login-title">Sign in</h2>
            <form method="post" action="/auth/login" class="login-form">
                {email_field}
                {password_field}
                {error_html}
                <div class="form-actions">{SubmitButton("Login").render()}</div>
            </form>
            {self._render_demo_hint()}
        </section>
        """

    def _render_demo_hint(self) -> str:
        if not self.demo_accounts:
            return ""
        rows = "".join(
            f"<li><strong>{self.escape(label)}:</strong> {self.escape(ident)} / {self.escape(secret)}</li>"
            for label, ident, secret in self.demo_accounts
        )
        return f'<div class="demo-hint"><p>Demo accounts</p><ul>{rows}</ul></div>'
