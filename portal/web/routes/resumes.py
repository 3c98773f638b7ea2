"""
Resume routes: student upload and staff review.

Security:
    - Upload writes only to the signed-in student's own record; the student id
      is taken from the panel selection.
    - Uploads are read with a hard cap one byte above the configured limit so
      oversized files are rejected without buffering them completely.
    - Review requires the `resumes:review` capability (staff and admin panels).
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from ...identity_access.policy import RESUME_UPLOAD, RESUMES_REVIEW
from ...records.config import get_max_resume_bytes
from ...records.ports import RecordStoreError
from ..messages import error_message
from .guards import FormContext, _see_other, guard_form


resumes_router = APIRouter(tags=["Resumes"])
logger = logging.getLogger("portal.web")


def _resumes():
    from .. import main

    return main.SERVICES.resumes


@resumes_router.post("/resume")
async def upload_resume(request: Request):
    ctx = await guard_form(request, RESUME_UPLOAD)
    if not isinstance(ctx, FormContext):
        return ctx
    upload = ctx.form.get("resume")
    if not isinstance(upload, UploadFile) or not upload.filename:
        ctx.panel.flash("error", error_message("missing_file"))
        return _see_other("/?tab=resume")
    data = await upload.read(get_max_resume_bytes() + 1)
    try:
        _resumes().upload(
            ctx.selection.subject_id or "",
            filename=upload.filename,
            data=data,
            content_type=upload.content_type or "",
        )
    except ValueError as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _see_other("/?tab=resume")
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _see_other("/?tab=resume")
    except RuntimeError as exc:
        logger.warning("Resume upload failed for %s: %s", ctx.selection.subject_id, exc)
        ctx.panel.flash("error", error_message("upload_failed"))
        return _see_other("/?tab=resume")
    finally:
        await upload.close()
    ctx.panel.flash("success", "Resume uploaded successfully. It will be reviewed by staff.")
    return _see_other("/?tab=resume")


@resumes_router.post("/resumes/{student_id}/review")
async def review_resume(request: Request, student_id: str):
    ctx = await guard_form(request, RESUMES_REVIEW)
    if not isinstance(ctx, FormContext):
        return ctx
    tab = ctx.panel.resolve_tab("resumes")
    try:
        _resumes().review(
            student_id,
            status=str(ctx.form.get("status") or ""),
            notes=str(ctx.form.get("notes") or ""),
        )
    except (ValueError, LookupError) as exc:
        ctx.panel.flash("error", error_message(str(exc)))
        return _see_other(f"/?tab={tab}")
    except RecordStoreError as exc:
        ctx.panel.flash("error", error_message(exc.code))
        return _see_other(f"/?tab={tab}")
    logger.info("Resume of %s reviewed by %s", student_id, ctx.selection.subject_id)
    ctx.panel.flash("success", "Resume status updated.")
    return _see_other(f"/?tab={tab}")


__all__ = ["resumes_router"]
