"""
Server-side portal sessions.

Why: The browser holds only an opaque cookie. Each portal session owns one
AuthContext and one PanelRouter, so every browser session has its own single
Session/Role pair and its own mounted panel.

Security: Cookies carry only an opaque session id. Closing a portal session
releases the mounted panel's subscriptions and detaches provider listeners.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import secrets
import time
from typing import Callable, Dict, Optional

from ..identity_access.context import AuthContext
from .panel_router import PanelRouter


logger = logging.getLogger("portal.web")


def _now() -> int:
    return int(time.time())


@dataclass
class PortalSession:
    session_id: str
    context: AuthContext
    router: PanelRouter
    expires_at: int
    csrf_token: str = field(default_factory=lambda: secrets.token_urlsafe(32), repr=False)

    def close(self) -> None:
        self.router.close()
        self.context.close()


class PortalSessionStore:
    def __init__(self, *, ttl_seconds: int = 3600, prune_interval_seconds: int = 60):
        self._data: Dict[str, PortalSession] = {}
        self._ttl = ttl_seconds
        self._prune_interval = prune_interval_seconds
        self._next_prune = 0

    def __len__(self) -> int:
        return len(self._data)

    def add(self, context: AuthContext, router_factory: Callable[[AuthContext], PanelRouter]) -> PortalSession:
        sid = secrets.token_urlsafe(24)
        rec = PortalSession(
            session_id=sid,
            context=context,
            router=router_factory(context),
            expires_at=_now() + self._ttl,
        )
        self._data[sid] = rec
        return rec

    def get(self, session_id: Optional[str]) -> Optional[PortalSession]:
        if not session_id:
            return None
        rec = self._data.get(session_id)
        if not rec:
            return None
        if rec.expires_at < _now():
            self.delete(session_id)
            return None
        rec.expires_at = _now() + self._ttl
        return rec

    def delete(self, session_id: str) -> None:
        rec = self._data.pop(session_id, None)
        if rec is not None:
            rec.close()

    def prune(self) -> int:
        now = _now()
        expired = [sid for sid, rec in self._data.items() if rec.expires_at < now]
        for sid in expired:
            self.delete(sid)
        if expired:
            logger.info("Pruned %d expired portal sessions", len(expired))
        return len(expired)

    def prune_if_due(self) -> int:
        """Prune at most once per `prune_interval_seconds`."""
        now = _now()
        if now < self._next_prune:
            return 0
        self._next_prune = now + self._prune_interval
        return self.prune()

    def clear(self) -> None:
        for sid in list(self._data):
            self.delete(sid)
        self._next_prune = 0


__all__ = ["PortalSession", "PortalSessionStore"]
