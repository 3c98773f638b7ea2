"""
User management routes (admin: students only; super admin: every role).

Permissions:
    `users:manage` (super-admin panel) may assign and manage every role;
    `students:manage` (admin panel) is limited to student accounts. The
    allowed role set is derived from the selected panel and handed to the
    `ProfileService`, which enforces it again for the stored role.
    Deleting the signed-in user's own profile is refused.
"""
from __future__ import annotations

import logging
from typing import Union

from fastapi import APIRouter, Request
from fastapi.responses import Response

from ...identity_access.domain import RoleTag
from ...identity_access.policy import STUDENTS_MANAGE, USERS_MANAGE, can
from ...records.ports import RecordStoreError
from ..messages import error_message
from .guards import FormContext, _forbidden, _see_other, guard_form


users_router = APIRouter(tags=["Users"])
logger = logging.getLogger("portal.web")

_ALL_ROLES = frozenset(RoleTag)
_STUDENT_ONLY = frozenset({RoleTag.STUDENT})


def _profiles():
    from .. import main

    return main.SERVICES.profiles


def _allowed_roles(ctx: FormContext) -> frozenset:
    if can(ctx.selection, USERS_MANAGE):
        return _ALL_ROLES
    if can(ctx.selection, STUDENTS_MANAGE):
        return _STUDENT_ONLY
    return frozenset()


async def _guard(request: Request) -> Union[FormContext, Response]:
    # Either capability opens the route; the role set narrows what it may touch.
    return await guard_form(request, STUDENTS_MANAGE, USERS_MANAGE)


def _back(ctx: FormContext, edit: str = ""):
    tab = ctx.panel.resolve_tab(str(ctx.form.get("return_tab") or "students"))
    suffix = f"&edit={edit}" if edit else ""
    return _see_other(f"/?tab={tab}{suffix}")


def _profile_fields(form) -> dict:
    keys = ("name", "email", "role", "registration_number", "department", "password")
    return {k: form.get(k) for k in keys if form.get(k) is not None}


@users_router.post("/users")
async def create_user(request: Request):
    ctx = await _guard(request)
    if not isinstance(ctx, FormContext):
        return ctx
    try:
        created = _profiles().create(_profile_fields(ctx.form), allowed_roles=_allowed_roles(ctx))
    except (ValueError, PermissionError) as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _back(ctx)
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _back(ctx)
    logger.info("Profile %s (%s) created by %s", created.get("id"), created.get("role"), ctx.selection.subject_id)
    ctx.panel.flash("success", "User added successfully.")
    return _back(ctx)


@users_router.post("/users/{profile_id}")
async def update_user(request: Request, profile_id: str):
    ctx = await _guard(request)
    if not isinstance(ctx, FormContext):
        return ctx
    try:
        _profiles().update(profile_id, _profile_fields(ctx.form), allowed_roles=_allowed_roles(ctx))
    except PermissionError as exc:
        logger.warning("Profile update refused for %s: %s", profile_id, exc)
        return _forbidden(str(exc))
    except (ValueError, LookupError) as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _back(ctx, edit=profile_id)
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _back(ctx)
    ctx.panel.flash("success", "User updated successfully.")
    return _back(ctx)


@users_router.post("/users/{profile_id}/delete")
async def delete_user(request: Request, profile_id: str):
    ctx = await _guard(request)
    if not isinstance(ctx, FormContext):
        return ctx
    if profile_id == ctx.selection.subject_id:
        ctx.panel.flash("error", error_message("cannot_delete_self"))
        return _back(ctx)
    try:
        _profiles().delete(profile_id, allowed_roles=_allowed_roles(ctx))
    except PermissionError as exc:
        logger.warning("Profile delete refused for %s: %s", profile_id, exc)
        return _forbidden(str(exc))
    except (ValueError, LookupError) as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _back(ctx)
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _back(ctx)
    logger.info("Profile %s deleted by %s", profile_id, ctx.selection.subject_id)
    ctx.panel.flash("success", "User deleted.")
    return _back(ctx)


__all__ = ["users_router"]
