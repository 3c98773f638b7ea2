"""
Pytest configuration for the portal tests.

Why: Force AnyIO to use the asyncio backend to avoid sandbox restrictions
that can affect the Trio backend (e.g., socketpair permission errors), and
give every test fresh in-memory backends plus a dev environment.
"""
import sys
from pathlib import Path

import pytest

# Ensure the repository root is importable when the package is not installed.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


_ENV_VARS = (
    "PORTAL_ENV",
    "PORTAL_DEMO_LOGINS",
    "PORTAL_SUPER_ADMIN_EMAIL",
    "PORTAL_SUPER_ADMIN_SECRET",
    "PORTAL_SESSION_TTL_SECONDS",
    "PORTAL_TRUST_PROXY",
    "PORTAL_RESUMES_BUCKET",
    "PORTAL_MAX_RESUME_BYTES",
    "PORTAL_SEED_DEMO_DATA",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_portal_env(monkeypatch: pytest.MonkeyPatch):
    """Run every test against the dev defaults unless it opts in explicitly."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def _reset_web_state():
    """Give the FastAPI app fresh seeded stores, default config and no sessions.

    Why:
        Web tests share `main.SESSION_STORE`/`main.SERVICES`; without a reset,
        portal sessions and created records leak across tests.
    """
    from portal.records.memory import InMemoryFileStore, InMemoryRecordStore, seed_demo_records
    from portal.records.wiring import Backends
    from portal.identity_access.provider import NullAuthProvider
    from portal.web import main

    main.set_access_config(None)
    main.SETTINGS.override_environment(None)
    main.set_backends(
        Backends(
            record_store=seed_demo_records(InMemoryRecordStore()),
            file_store=InMemoryFileStore(),
            auth_provider_factory=NullAuthProvider,
        )
    )
    yield
    main.SESSION_STORE.clear()
