"""
Shared helper for wiring the record store, file store and auth provider.

Why:
    The portal runs against the hosted Supabase backend when configured and
    against seeded in-memory stores otherwise (local development, tests). This
    module is the one place that makes that decision.

Security:
    SUPABASE_SERVICE_ROLE_KEY is used only for server-side record and file
    access. Password sign-in uses SUPABASE_ANON_KEY. No key reaches clients.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Any, Callable


logger = logging.getLogger("portal.records")


@dataclass
class Backends:
    record_store: Any
    file_store: Any
    auth_provider_factory: Callable[[], Any]
    accounts: Any = None
    source: str = "memory"


def _is_prod_like() -> bool:
    return (os.getenv("PORTAL_ENV", "dev") or "").strip().lower() in {"prod", "production", "stage", "staging"}


def _memory_backends() -> Backends:
    from ..identity_access.provider import NullAuthProvider
    from .memory import InMemoryFileStore, InMemoryRecordStore, seed_demo_records

    store = InMemoryRecordStore()
    if (os.getenv("PORTAL_SEED_DEMO_DATA", "true") or "").strip().lower() in ("1", "true", "yes"):
        seed_demo_records(store)
    return Backends(
        record_store=store,
        file_store=InMemoryFileStore(),
        auth_provider_factory=NullAuthProvider,
        source="memory",
    )


def build_backends() -> Backends:
    """Build Supabase-backed adapters when configured, in-memory ones otherwise.

    Behavior:
        - SUPABASE_URL + SUPABASE_SERVICE_ROLE_KEY → Supabase record/file store.
        - SUPABASE_URL + SUPABASE_ANON_KEY → one Supabase auth provider per
          portal session (the client keeps a single auth session in memory).
        - Client construction errors fall back to in-memory stores outside
          prod-like environments and abort startup inside them.
    """
    url = (os.getenv("SUPABASE_URL") or "").strip()
    service_key = (os.getenv("SUPABASE_SERVICE_ROLE_KEY") or "").strip()
    anon_key = (os.getenv("SUPABASE_ANON_KEY") or "").strip()
    if not url or not service_key:
        logger.info("Record store wired: in-memory")
        return _memory_backends()

    try:
        from supabase import create_client

        from ..identity_access.accounts import SupabaseAccountProvisioner
        from ..identity_access.provider import NullAuthProvider, SupabaseAuthProvider
        from .storage_supabase import SupabaseFileStore
        from .supabase_store import SupabaseRecordStore

        client = create_client(url, service_key)
        store = SupabaseRecordStore(client)
        files = SupabaseFileStore(client)
        accounts = SupabaseAccountProvisioner(client)
    except Exception as exc:
        if _is_prod_like():
            raise SystemExit(
                f"Refusing to start: Supabase client unavailable ({exc.__class__.__name__})."
            ) from exc
        logger.warning(
            "Supabase wiring skipped due to error: %s: %s", exc.__class__.__name__, str(exc)
        )
        return _memory_backends()

    if anon_key:
        def _provider_factory() -> Any:
            return SupabaseAuthProvider(create_client(url, anon_key))
    else:
        _provider_factory = NullAuthProvider

    logger.info("Record store wired: Supabase")
    return Backends(
        record_store=store,
        file_store=files,
        auth_provider_factory=_provider_factory,
        accounts=accounts,
        source="supabase",
    )


__all__ = ["Backends", "build_backends"]
