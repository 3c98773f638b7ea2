"""
Credential Resolver: turn (identifier, secret) into a Session.

Why:
    The portal accepts two kinds of logins: fixed demo accounts and accounts
    verified by the hosted auth provider. Both are modelled as named
    `CredentialSource` strategies that are tried in a fixed, declared order so
    the precedence is visible configuration rather than inline branching.

Behavior:
    - A source returns a Session on success or None to pass to the next one.
    - A source may raise `AuthError` to terminate the chain (e.g. the pinned
      super-admin secret does not match, a demo identifier is given the wrong
      secret, or the provider is unreachable).
    - When every source passes, the resolver raises `invalid_credentials`.

Security:
    The identifier is opaque and passed through unchanged. Secrets and tokens
    are never logged; Session.access_token is excluded from repr.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import secrets as _secrets
import time
from typing import Optional, Protocol, Sequence, runtime_checkable

from .config import AccessConfig
from .demo import DEMO_IDENTITIES, DemoIdentity, find_demo_identity
from .domain import RoleTag
from .errors import INVALID_CREDENTIALS, AuthError


logger = logging.getLogger("portal.identity_access")

ORIGIN_DEMO = "demo"
ORIGIN_PROVIDER = "provider"


def _now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class Session:
    """Live, authenticated identity handle."""

    subject_id: str
    email: str
    name: str
    issued_at: int
    expires_at: Optional[int] = None
    origin: str = ORIGIN_PROVIDER
    demo_role: Optional[RoleTag] = None
    access_token: Optional[str] = field(default=None, repr=False, compare=False)

    @property
    def is_demo(self) -> bool:
        return self.origin == ORIGIN_DEMO

    def is_expired(self, now: Optional[int] = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (_now() if now is None else now)

    @property
    def display_name(self) -> str:
        """Name if known, otherwise the local part of the email."""
        if self.name:
            return self.name
        return (self.email or "").split("@", 1)[0]


@runtime_checkable
class CredentialSource(Protocol):
    name: str

    async def authenticate(self, identifier: str, secret: str) -> Optional[Session]:
        ...


class SuperAdminPinSource:
    """Legacy identity pin: one identifier accepts exactly one secret.

    Rejects immediately (without contacting any later source) when the
    identifier matches and the secret does not. Otherwise passes.
    """

    name = "super_admin_pin"

    def __init__(self, identifier: str, secret: str):
        self._identifier = identifier
        self._secret = secret

    async def authenticate(self, identifier: str, secret: str) -> Optional[Session]:
        if not self._identifier or identifier != self._identifier:
            return None
        if not _secrets.compare_digest(secret.encode("utf-8"), self._secret.encode("utf-8")):
            raise AuthError(INVALID_CREDENTIALS)
        return None


class StaticTableSource:
    """Synthesize a Session from the compiled-in demo table (no external call)."""

    name = "static_table"

    def __init__(self, table: tuple[DemoIdentity, ...] = DEMO_IDENTITIES, *, ttl_seconds: int = 3600):
        self._table = table
        self._ttl = ttl_seconds

    async def authenticate(self, identifier: str, secret: str) -> Optional[Session]:
        rec = find_demo_identity(identifier, secret, self._table)
        if rec is None:
            # A demo identifier owns its table entry; a wrong secret never reaches the provider.
            if any(r.identifier == identifier for r in self._table):
                raise AuthError(INVALID_CREDENTIALS)
            return None
        issued = _now()
        return Session(
            subject_id=rec.subject_id,
            email=rec.identifier,
            name=rec.name,
            issued_at=issued,
            expires_at=issued + self._ttl,
            origin=ORIGIN_DEMO,
            demo_role=rec.role,
        )


class ProviderSource:
    """Delegate password verification to the external auth provider.

    Provider rejection passes (None); `provider_unavailable` propagates.
    """

    name = "provider"

    def __init__(self, provider):
        self._provider = provider

    async def authenticate(self, identifier: str, secret: str) -> Optional[Session]:
        try:
            return await self._provider.sign_in(identifier, secret)
        except AuthError as exc:
            if exc.code == INVALID_CREDENTIALS:
                return None
            raise


class CredentialResolver:
    """Try each CredentialSource in declared order; first Session wins."""

    def __init__(self, sources: Sequence[CredentialSource]):
        self._sources = tuple(sources)

    @property
    def sources(self) -> tuple[CredentialSource, ...]:
        return self._sources

    async def authenticate(self, identifier: str, secret: str) -> Session:
        if not identifier or not secret:
            raise AuthError(INVALID_CREDENTIALS)
        for source in self._sources:
            try:
                session = await source.authenticate(identifier, secret)
            except AuthError as exc:
                logger.info("Login rejected by %s: %s", source.name, exc.code)
                raise
            if session is not None:
                logger.info("Login accepted by %s for subject %s", source.name, session.subject_id)
                return session
        logger.info("Login rejected: no source matched")
        raise AuthError(INVALID_CREDENTIALS)


def build_resolver(config: AccessConfig, provider) -> CredentialResolver:
    """Assemble the source chain from configuration.

    Order: super-admin pin (when enabled) → demo table (when enabled) → provider.
    """
    sources: list[CredentialSource] = []
    if config.super_admin_pin_enabled:
        sources.append(SuperAdminPinSource(config.super_admin_identifier, config.super_admin_secret))
    if config.demo_logins:
        sources.append(StaticTableSource(ttl_seconds=config.session_ttl_seconds))
    sources.append(ProviderSource(provider))
    return CredentialResolver(sources)


__all__ = [
    "CredentialResolver",
    "CredentialSource",
    "ORIGIN_DEMO",
    "ORIGIN_PROVIDER",
    "ProviderSource",
    "Session",
    "StaticTableSource",
    "SuperAdminPinSource",
    "build_resolver",
]
