"""
Shared authentication utilities.

Why:
    Main app and auth router both set the session cookie; keeping the cookie
    policy in one helper keeps them consistent.

Design:
    The helper is framework-agnostic and pure: it accepts an environment string
    and returns the corresponding cookie flags.
"""

from __future__ import annotations


def cookie_opts(environment: str) -> dict:
    """Return hardened cookie flags (dev = prod).

    Returns a mapping with keys:
      - secure: True
      - samesite: "lax"
    """
    # Lax keeps top-level navigations working while blocking cross-site POSTs.
    return {"secure": True, "samesite": "lax"}
