"""
Company listing routes (staff, admin and super-admin panels; student apply).

Why:
    Company postings are shared state: staff-side panels create, edit and
    delete them, students apply to them. Every mutation goes through the
    `CompanyService`/`ApplicationService` and surfaces the outcome as a
    one-shot flash on the mounted panel (Post/Redirect/Get).

Permissions:
    - POST /companies, /companies/{id}, /companies/{id}/delete require the
      `companies:write` capability of the selected panel.
    - POST /companies/{id}/apply requires `applications:create`; the student
      id comes from the selection, never from the form.
    - GET /api/companies requires `companies:read`.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from ...identity_access.policy import APPLICATIONS_CREATE, COMPANIES_READ, COMPANIES_WRITE, can
from ...records.ports import RecordStoreError
from ..messages import error_message
from .guards import FormContext, _json_private, _see_other, guard_form


companies_router = APIRouter(tags=["Companies"])
logger = logging.getLogger("portal.web")


def _services():
    from .. import main

    return main.SERVICES


def _back(ctx: FormContext, default: str = "companies"):
    tab = ctx.panel.resolve_tab(str(ctx.form.get("return_tab") or default))
    return _see_other(f"/?tab={tab}")


def _company_fields(form) -> dict:
    keys = ("name", "description", "location", "deadline", "positions", "requirements", "industry", "website")
    return {k: form.get(k) for k in keys if form.get(k) is not None}


@companies_router.get("/api/companies")
async def api_list_companies(request: Request, q: str = ""):
    portal = getattr(request.state, "portal", None)
    selection = portal.router.selection if portal is not None else None
    if selection is None or not can(selection, COMPANIES_READ):
        return _json_private({"error": "forbidden"}, status_code=403)
    return _json_private(_services().companies.list(q))


@companies_router.post("/companies")
async def create_company(request: Request):
    ctx = await guard_form(request, COMPANIES_WRITE)
    if not isinstance(ctx, FormContext):
        return ctx
    posted_by = ctx.panel.display_name or ctx.selection.subject_id or ""
    try:
        created = _services().companies.create(_company_fields(ctx.form), posted_by=posted_by)
    except (ValueError, LookupError) as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _back(ctx)
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _back(ctx)
    logger.info("Company %s created by %s", created.get("id"), ctx.selection.subject_id)
    ctx.panel.flash("success", "Company added successfully.")
    return _back(ctx)


@companies_router.post("/companies/{company_id}")
async def update_company(request: Request, company_id: str):
    ctx = await guard_form(request, COMPANIES_WRITE)
    if not isinstance(ctx, FormContext):
        return ctx
    try:
        _services().companies.update(company_id, _company_fields(ctx.form))
    except (ValueError, LookupError) as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        tab = ctx.panel.resolve_tab(str(ctx.form.get("return_tab") or "companies"))
        return _see_other(f"/?tab={tab}&edit={company_id}")
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _back(ctx)
    ctx.panel.flash("success", "Company updated successfully.")
    return _back(ctx)


@companies_router.post("/companies/{company_id}/delete")
async def delete_company(request: Request, company_id: str):
    ctx = await guard_form(request, COMPANIES_WRITE)
    if not isinstance(ctx, FormContext):
        return ctx
    try:
        _services().companies.delete(company_id)
    except LookupError as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _back(ctx)
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _back(ctx)
    logger.info("Company %s deleted by %s", company_id, ctx.selection.subject_id)
    ctx.panel.flash("success", "Company deleted.")
    return _back(ctx)


@companies_router.post("/companies/{company_id}/apply")
async def apply_to_company(request: Request, company_id: str):
    ctx = await guard_form(request, APPLICATIONS_CREATE)
    if not isinstance(ctx, FormContext):
        return ctx
    try:
        _services().applications.apply(ctx.selection.subject_id or "", company_id)
    except (ValueError, LookupError) as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _back(ctx)
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _back(ctx)
    ctx.panel.flash("success", "Application submitted.")
    return _back(ctx)


__all__ = ["companies_router"]
