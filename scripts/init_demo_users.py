#!/usr/bin/env python3
"""
Provision the demo accounts in the hosted Supabase project.

Why:
    Demo logins bypass the auth provider, which is fine for local work but
    useless against a staging project with PORTAL_DEMO_LOGINS=false. This
    script creates the same four accounts as real provider users so the role
    table drives their panels.

Behavior:
    - Creates each account via the admin API (email confirmed).
    - Skips accounts whose email already has a profile row.
    - Upserts the profile role; students also get a pending students row.
    - Prints a JSON summary; exits non-zero when any account failed.

Security:
    Needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY. Never prints secrets.
"""
from __future__ import annotations

import argparse
from datetime import datetime, timezone
import json
import os
import sys

from dotenv import load_dotenv
from supabase import create_client

from portal.identity_access.demo import DEMO_IDENTITIES
from portal.identity_access.domain import RoleTag


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the demo accounts in Supabase Auth and the profiles table.")
    parser.add_argument("--url", default=None, help="Supabase project URL (default: SUPABASE_URL)")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would be created")
    parser.add_argument("--no-dotenv", action="store_true", help="Do not load a local .env file")
    return parser.parse_args()


def _profile_exists(client, email: str) -> bool:
    resp = client.table("profiles").select("id").eq("email", email).limit(1).execute()
    return bool(resp.data)


def _provision(client, identity) -> str:
    resp = client.auth.admin.create_user(
        {
            "email": identity.identifier,
            "password": identity.secret,
            "email_confirm": True,
            "user_metadata": {"name": identity.name},
        }
    )
    user_id = str(resp.user.id)
    now = datetime.now(timezone.utc).isoformat()
    client.table("profiles").upsert(
        {
            "id": user_id,
            "name": identity.name,
            "email": identity.identifier,
            "role": identity.role.value,
            "created_at": now,
        }
    ).execute()
    if identity.role is RoleTag.STUDENT:
        client.table("students").upsert({"user_id": user_id, "resume_status": "pending"}).execute()
    return user_id


def main() -> int:
    args = parse_args()
    if not args.no_dotenv:
        load_dotenv()
    url = (args.url or os.getenv("SUPABASE_URL") or "").strip()
    key = (os.getenv("SUPABASE_SERVICE_ROLE_KEY") or "").strip()
    if not url or not key:
        raise SystemExit("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set.")

    client = create_client(url, key)
    summary = {"created": [], "skipped": [], "failed": []}
    for identity in DEMO_IDENTITIES:
        email = identity.identifier
        if _profile_exists(client, email):
            summary["skipped"].append(email)
            continue
        if args.dry_run:
            summary["created"].append({"email": email, "role": identity.role.value, "dry_run": True})
            continue
        try:
            user_id = _provision(client, identity)
        except Exception as exc:  # report and continue with the next account
            summary["failed"].append({"email": email, "error": exc.__class__.__name__})
            continue
        summary["created"].append({"email": email, "role": identity.role.value, "id": user_id})

    print(json.dumps(summary, indent=2))
    return 1 if summary["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
