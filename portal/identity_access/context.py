"""
AuthContext: the one active Session/Role pair of a portal session.

Why:
    Instead of process-wide mutable state, every portal session owns one
    explicit context object that is passed to the router and the panels. The
    context is the single writer of session and role; everything else reads
    through the read-only properties.

Behavior:
    - `restore()` revalidates against the provider's live session on start and
      marks the context ready. Until then the router shows a loading view.
    - `login()` runs the Credential Resolver, then the Role Lookup. Errors are
      recorded in `last_error`, leave the context logged out and are raised to
      the caller. Nothing is retried.
    - `logout()` clears local state first and then signs out at the provider.
    - Provider change events (token refresh, user update, sign-out) re-run the
      role lookup or clear the session.
    - Each session replacement increments `generation`. A role result is only
      committed when the generation is unchanged, so a late result for a
      replaced session is dropped.
    - Listeners are called after every committed state change.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .config import AccessConfig
from .credentials import CredentialResolver, Session
from .domain import RoleTag
from .errors import AuthError, RoleLookupError
from .policy import PanelSelection, select_panel
from .roles import RoleLookup


logger = logging.getLogger("portal.identity_access")

Listener = Callable[["AuthContext"], None]

# Login and restore apply these themselves.
_IGNORED_EVENTS = {"SIGNED_IN", "INITIAL_SESSION"}


class AuthContext:
    def __init__(
        self,
        resolver: CredentialResolver,
        lookup: RoleLookup,
        provider,
        *,
        config: AccessConfig,
    ):
        self._resolver = resolver
        self._lookup = lookup
        self._provider = provider
        self._config = config
        self._session: Optional[Session] = None
        self._role: Optional[RoleTag] = None
        self._ready = False
        self._generation = 0
        self._last_error: Optional[str] = None
        self._listeners: list[Listener] = []
        self._provider_unsubscribe: Optional[Callable[[], None]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set[asyncio.Task] = set()

    # --- Read-only accessors ------------------------------------------------------

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def role(self) -> Optional[RoleTag]:
        return self._role

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def config(self) -> AccessConfig:
        return self._config

    def selection(self) -> PanelSelection:
        """Evaluate the access policy against the current pair."""
        return select_panel(
            self._session,
            self._role,
            super_admin_identifier=self._config.super_admin_identifier,
        )

    # --- Listeners ----------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --- Lifecycle ----------------------------------------------------------------

    async def restore(self) -> None:
        """Revalidate against the provider's live session and become ready."""
        self._loop = asyncio.get_running_loop()
        if self._provider_unsubscribe is None:
            self._provider_unsubscribe = self._provider.on_session_change(self._on_provider_change)
        try:
            live = await self._provider.get_current_session()
        except AuthError as exc:
            logger.warning("Session restore failed: %s", exc.code)
            live = None
        self._ready = True
        if live is None or live.is_expired():
            self._notify()
            return
        try:
            await self._apply(live)
        except RoleLookupError as exc:
            logger.info("Restored session has no usable role: %s", exc.code)

    async def login(self, identifier: str, secret: str) -> Optional[Session]:
        """Authenticate and resolve the role.

        Returns the committed Session, or None when a newer session replaced this
        attempt before its role resolved.
        Raises AuthError or RoleLookupError; the context is logged out then.
        """
        self._ready = True
        self._last_error = None
        try:
            session = await self._resolver.authenticate(identifier, secret)
        except AuthError as exc:
            self._last_error = exc.code
            self._clear()
            self._notify()
            raise
        committed = await self._apply(session)
        return session if committed else None

    async def logout(self) -> None:
        previous = self._session
        self._clear()
        self._last_error = None
        self._notify()
        if previous is not None and not previous.is_demo:
            await self._provider.sign_out()

    def expire_if_needed(self, now: Optional[int] = None) -> bool:
        """Clear an expired session like a logout; True when something expired."""
        if self._session is None or not self._session.is_expired(now):
            return False
        logger.info("Session expired for subject %s", self._session.subject_id)
        self._clear()
        self._notify()
        return True

    def close(self) -> None:
        if self._provider_unsubscribe is not None:
            self._provider_unsubscribe()
            self._provider_unsubscribe = None
        for task in list(self._pending):
            task.cancel()
        self._listeners.clear()

    # --- Internals ----------------------------------------------------------------

    def _clear(self) -> None:
        self._generation += 1
        self._session = None
        self._role = None

    async def _apply(self, session: Session) -> bool:
        self._generation += 1
        generation = self._generation
        if self._session is None or self._session.subject_id != session.subject_id:
            # A refreshed session for the same subject keeps its role until the lookup returns.
            self._role = None
        self._session = session
        try:
            role = await self._lookup.resolve_role(session)
        except RoleLookupError as exc:
            if generation != self._generation:
                logger.info("Dropping stale role lookup failure for subject %s", session.subject_id)
                return False
            self._last_error = exc.code
            self._clear()
            self._notify()
            # Cleared above, so the SIGNED_OUT event this triggers finds no session and is ignored.
            if not session.is_demo:
                await self._provider.sign_out()
            raise
        if generation != self._generation:
            logger.info("Dropping stale role result for subject %s", session.subject_id)
            return False
        self._role = role
        self._notify()
        return True

    def _on_provider_change(self, event: str, session: Optional[Session]) -> None:
        # Provider callbacks may fire on a worker thread.
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._schedule_change, event, session)

    def _schedule_change(self, event: str, session: Optional[Session]) -> None:
        task = asyncio.ensure_future(self._handle_change(event, session))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _handle_change(self, event: str, session: Optional[Session]) -> None:
        if event in _IGNORED_EVENTS:
            return
        current = self._session
        if current is None or current.is_demo:
            return
        if session is None or event == "SIGNED_OUT":
            self._clear()
            self._notify()
            return
        if session.subject_id != current.subject_id:
            return
        try:
            await self._apply(session)
        except RoleLookupError as exc:
            logger.info("Role lookup after %s failed: %s", event, exc.code)


__all__ = ["AuthContext", "Listener"]
