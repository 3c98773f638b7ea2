"""
Account provisioning at the auth provider (admin API).

Why:
    When administrators register students or staff, the person also needs a
    login at the hosted auth provider. Without a provider (local development)
    the portal stores profiles only and the provisioner is None.

Permissions:
    Requires a client initialized with the service-role key. Only the user
    management service calls into this module.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Protocol


logger = logging.getLogger("portal.identity_access")


class AccountProvisioner(Protocol):
    def create_account(self, *, email: str, password: str, name: str) -> str: ...

    def update_password(self, account_id: str, password: str) -> None: ...

    def delete_account(self, account_id: str) -> None: ...


def _get(obj: Any, key: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


class SupabaseAccountProvisioner:
    """Provision accounts through `client.auth.admin`."""

    def __init__(self, client: Any):
        self._client = client

    @property
    def _admin(self) -> Any:
        auth = getattr(self._client, "auth", None)
        admin = getattr(auth, "admin", None)
        if admin is None:
            raise RuntimeError("invalid_supabase_client")
        return admin

    def create_account(self, *, email: str, password: str, name: str) -> str:
        try:
            res = self._admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": {"name": name},
                }
            )
        except Exception as exc:
            logger.warning("Account creation failed: %s", exc.__class__.__name__)
            raise ValueError("account_create_failed") from exc
        account_id = _get(_get(res, "user"), "id")
        if not account_id:
            raise ValueError("account_create_failed")
        return str(account_id)

    def update_password(self, account_id: str, password: str) -> None:
        try:
            self._admin.update_user_by_id(account_id, {"password": password})
        except Exception as exc:
            logger.warning("Password update failed: %s", exc.__class__.__name__)
            raise ValueError("account_update_failed") from exc

    def delete_account(self, account_id: str) -> None:
        try:
            self._admin.delete_user(account_id)
        except Exception as exc:
            logger.warning("Account deletion failed: %s", exc.__class__.__name__)
            raise ValueError("account_delete_failed") from exc


__all__ = ["AccountProvisioner", "SupabaseAccountProvisioner"]
