"""
Access-control error taxonomy.

Every error carries a stable `code` so adapters can map it to a status code or
a user-visible message without parsing exception text. Access-control failures
always fail closed to the login panel.
"""
from __future__ import annotations


INVALID_CREDENTIALS = "invalid_credentials"
PROVIDER_UNAVAILABLE = "provider_unavailable"
NO_ROLE_ASSIGNED = "no_role_assigned"
FORBIDDEN_PANEL_TRANSITION = "forbidden_panel_transition"


class AccessError(Exception):
    """Base class for access-control failures."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class AuthError(AccessError):
    """Raised when credentials cannot be turned into a Session."""


class RoleLookupError(AccessError):
    """Raised when no usable role can be resolved for a Session."""


class ForbiddenPanelTransition(AccessError):
    """Raised when a panel is requested that the current selection does not permit."""

    def __init__(self, requested: str, allowed: str):
        super().__init__(FORBIDDEN_PANEL_TRANSITION)
        self.requested = requested
        self.allowed = allowed


_MESSAGES = {
    INVALID_CREDENTIALS: "Invalid email or password.",
    PROVIDER_UNAVAILABLE: "The sign-in service is currently unavailable. Please try again later.",
    NO_ROLE_ASSIGNED: "Your account has no role assigned. Please contact an administrator.",
    FORBIDDEN_PANEL_TRANSITION: "You are not allowed to open this page.",
}


def user_message(code: str) -> str:
    """Return the login-screen message for an error code."""
    return _MESSAGES.get(code, _MESSAGES[INVALID_CREDENTIALS])


__all__ = [
    "AccessError",
    "AuthError",
    "FORBIDDEN_PANEL_TRANSITION",
    "ForbiddenPanelTransition",
    "INVALID_CREDENTIALS",
    "NO_ROLE_ASSIGNED",
    "PROVIDER_UNAVAILABLE",
    "RoleLookupError",
    "user_message",
]
