"""
Test doubles shared by the access-control tests.

`FakeAuthProvider` records calls and lets a test control sign-in results and
emit session-change events. `GatedRoleStore` blocks role lookups until the
test releases them, so interleavings can be forced deterministically.
"""
from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

from portal.identity_access.credentials import ORIGIN_PROVIDER, Session
from portal.identity_access.errors import INVALID_CREDENTIALS, AuthError


def provider_session(subject_id: str, email: str, *, name: str = "", expires_in: Optional[int] = 3600) -> Session:
    now = int(time.time())
    return Session(
        subject_id=subject_id,
        email=email,
        name=name,
        issued_at=now,
        expires_at=(now + expires_in) if expires_in is not None else None,
        origin=ORIGIN_PROVIDER,
        access_token="token-" + subject_id,
    )


class FakeAuthProvider:
    def __init__(self, accounts: Optional[dict] = None, *, current: Optional[Session] = None):
        # email -> (password, Session)
        self.accounts = dict(accounts or {})
        self.current = current
        self.error: Optional[AuthError] = None
        self.sign_in_calls: list[str] = []
        self.sign_out_calls = 0
        self.listeners: list[Callable] = []

    async def sign_in(self, identifier: str, secret: str) -> Session:
        self.sign_in_calls.append(identifier)
        if self.error is not None:
            raise self.error
        entry = self.accounts.get(identifier)
        if entry is None or entry[0] != secret:
            raise AuthError(INVALID_CREDENTIALS)
        self.current = entry[1]
        return entry[1]

    async def get_current_session(self) -> Optional[Session]:
        return self.current

    def on_session_change(self, callback):
        self.listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self.listeners:
                self.listeners.remove(callback)

        return _unsubscribe

    def emit(self, event: str, session: Optional[Session]) -> None:
        for cb in list(self.listeners):
            cb(event, session)

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.current = None


class GatedRoleStore:
    """Wrap a record store; `profiles` selects wait on a per-subject gate."""

    def __init__(self, inner):
        self.inner = inner
        self.gates: dict[str, asyncio.Event] = {}
        self.loop: Optional[asyncio.AbstractEventLoop] = None

    def gate(self, subject_id: str) -> asyncio.Event:
        self.loop = asyncio.get_running_loop()
        event = asyncio.Event()
        self.gates[subject_id] = event
        return event

    def select(self, table, filters=None, **kwargs):
        subject = (filters or {}).get("id")
        event = self.gates.get(subject) if table == "profiles" else None
        if event is not None and self.loop is not None:
            # Runs in a worker thread (asyncio.to_thread); wait for the loop-side gate.
            asyncio.run_coroutine_threadsafe(event.wait(), self.loop).result(timeout=5)
        return self.inner.select(table, filters, **kwargs)

    def __getattr__(self, name):
        return getattr(self.inner, name)
