"""
Auth provider contract and adapters.

Why:
    The hosted auth provider is an opaque credential verifier. The portal only
    relies on four operations: sign in, read the current session, observe
    session changes and sign out. Keeping the contract small lets tests use a
    fake and lets development run without any provider configured.

Design:
    - `NullAuthProvider` is used when Supabase is not configured; sign-in fails
      with `provider_unavailable` so demo logins keep working.
    - `SupabaseAuthProvider` wraps a duck-typed supabase-py client. The client
      keeps one auth session in memory, so the web adapter creates one provider
      per portal session. Blocking client calls run in a worker thread.

Security:
    Provider error messages are not surfaced to users; only the error code is.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .credentials import ORIGIN_PROVIDER, Session
from .errors import INVALID_CREDENTIALS, PROVIDER_UNAVAILABLE, AuthError


logger = logging.getLogger("portal.identity_access")

SessionChangeCallback = Callable[[str, Optional[Session]], None]
Unsubscribe = Callable[[], None]

# Statuses that mean "the provider answered and said no".
_REJECTION_STATUSES = {400, 401, 403, 422}


@runtime_checkable
class AuthProvider(Protocol):
    async def sign_in(self, identifier: str, secret: str) -> Session:
        ...

    async def get_current_session(self) -> Optional[Session]:
        ...

    def on_session_change(self, callback: SessionChangeCallback) -> Unsubscribe:
        ...

    async def sign_out(self) -> None:
        ...


class NullAuthProvider:
    """Fallback when no provider is configured."""

    async def sign_in(self, identifier: str, secret: str) -> Session:
        raise AuthError(PROVIDER_UNAVAILABLE)

    async def get_current_session(self) -> Optional[Session]:
        return None

    def on_session_change(self, callback: SessionChangeCallback) -> Unsubscribe:
        return lambda: None

    async def sign_out(self) -> None:
        return None


def _classify(exc: BaseException) -> str:
    status = getattr(exc, "status", None)
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None
    if status in _REJECTION_STATUSES:
        return INVALID_CREDENTIALS
    return PROVIDER_UNAVAILABLE


def _get(obj: Any, key: str) -> Any:
    """Read an attribute or mapping key (client responses vary by version)."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def session_from_provider(raw_session: Any, raw_user: Any = None) -> Optional[Session]:
    """Map a provider session object to the portal Session (None if incomplete)."""
    if raw_session is None:
        return None
    user = raw_user if raw_user is not None else _get(raw_session, "user")
    subject = _get(user, "id")
    if not subject:
        return None
    meta = _get(user, "user_metadata") or {}
    name = meta.get("name") if isinstance(meta, dict) else None
    expires_at = _get(raw_session, "expires_at")
    try:
        expires_at = int(expires_at) if expires_at is not None else None
    except (TypeError, ValueError):
        expires_at = None
    return Session(
        subject_id=str(subject),
        email=str(_get(user, "email") or ""),
        name=str(name or ""),
        issued_at=int(time.time()),
        expires_at=expires_at,
        origin=ORIGIN_PROVIDER,
        access_token=_get(raw_session, "access_token"),
    )


class SupabaseAuthProvider:
    """AuthProvider backed by `client.auth` of a supabase-py client."""

    def __init__(self, client: Any):
        self._client = client

    @property
    def _auth(self) -> Any:
        auth = getattr(self._client, "auth", None)
        if auth is None:
            raise RuntimeError("invalid_supabase_client")
        return auth

    async def sign_in(self, identifier: str, secret: str) -> Session:
        try:
            res = await asyncio.to_thread(
                self._auth.sign_in_with_password, {"email": identifier, "password": secret}
            )
        except Exception as exc:
            code = _classify(exc)
            if code == PROVIDER_UNAVAILABLE:
                logger.warning("Auth provider sign-in failed: %s", exc.__class__.__name__)
            raise AuthError(code) from exc
        session = session_from_provider(_get(res, "session"), _get(res, "user"))
        if session is None:
            raise AuthError(INVALID_CREDENTIALS)
        return session

    async def get_current_session(self) -> Optional[Session]:
        try:
            raw = await asyncio.to_thread(self._auth.get_session)
        except Exception as exc:
            logger.warning("Auth provider get_session failed: %s", exc.__class__.__name__)
            raise AuthError(PROVIDER_UNAVAILABLE) from exc
        return session_from_provider(raw)

    def on_session_change(self, callback: SessionChangeCallback) -> Unsubscribe:
        def _relay(event: Any, raw_session: Any) -> None:
            callback(str(getattr(event, "value", event)), session_from_provider(raw_session))

        subscription = self._auth.on_auth_state_change(_relay)

        def _unsubscribe() -> None:
            unsubscribe = getattr(subscription, "unsubscribe", None)
            if callable(unsubscribe):
                unsubscribe()

        return _unsubscribe

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self._auth.sign_out)
        except Exception as exc:
            # Local state is cleared regardless; the provider token simply expires.
            logger.warning("Auth provider sign_out failed: %s", exc.__class__.__name__)


__all__ = [
    "AuthProvider",
    "NullAuthProvider",
    "SessionChangeCallback",
    "SupabaseAuthProvider",
    "Unsubscribe",
    "session_from_provider",
]
