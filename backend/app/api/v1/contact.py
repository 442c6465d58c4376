# backend/app/api/v1/contact.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import require_feature
from app.core.errors import Conflict, NotFound
from app.core.features import SiteFeatureName
from app.crud.contact import (
    add_form_fields,
    contact_form_out,
    delete_submission,
    get_contact_form,
    page_submissions,
    replace_form_fields,
    submissions_out,
)
from app.db.session import get_db
from app.models.contact_form import ContactForm
from app.models.contact_submission import ContactSubmission
from app.models.site import Site
from app.schemas.base import MessageOut, Pagination
from app.schemas.contact import (
    ContactFormIn,
    ContactFormOut,
    ContactSubmissionList,
    ContactSubmissionOut,
    ContactSubmissionUpdate,
)

router = APIRouter(prefix="/sites/{site_id}", tags=["contact"])

contact_site = require_feature(SiteFeatureName.CONTACT_MANAGEMENT)


# =========================================================
# Form definition
# =========================================================
@router.get("/contact-form", response_model=Optional[ContactFormOut])
async def get_form(
    site: Site = Depends(contact_site),
    db: AsyncSession = Depends(get_db),
):
    form = await get_contact_form(db, site.id)
    if form is None:
        return None
    return await contact_form_out(db, form)


@router.post("/contact-form", response_model=ContactFormOut, status_code=status.HTTP_201_CREATED)
async def create_form(
    payload: ContactFormIn,
    site: Site = Depends(contact_site),
    db: AsyncSession = Depends(get_db),
):
    if await get_contact_form(db, site.id) is not None:
        raise Conflict("Contact form already exists for this site")

    form = ContactForm(
        site_id=site.id,
        name=payload.name,
        description=payload.description,
        is_active=payload.is_active,
    )
    db.add(form)
    await db.flush()
    add_form_fields(db, form.id, payload.fields)
    await db.commit()
    return await contact_form_out(db, form)


@router.put("/contact-form", response_model=ContactFormOut)
async def update_form(
    payload: ContactFormIn,
    site: Site = Depends(contact_site),
    db: AsyncSession = Depends(get_db),
):
    form = await get_contact_form(db, site.id)
    if form is None:
        raise NotFound("Contact form not found")

    form.name = payload.name
    form.description = payload.description
    form.is_active = payload.is_active
    await replace_form_fields(db, form, payload.fields)
    await db.commit()
    return await contact_form_out(db, form)


# =========================================================
# Submissions
# =========================================================
async def _get_submission_or_404(db: AsyncSession, site_id: uuid.UUID, submission_id: uuid.UUID) -> ContactSubmission:
    stmt = select(ContactSubmission).where(
        ContactSubmission.id == submission_id,
        ContactSubmission.site_id == site_id,
    )
    submission = (await db.execute(stmt)).scalars().first()
    if not submission:
        raise NotFound("Submission not found")
    return submission


@router.get("/contact-submissions", response_model=ContactSubmissionList)
async def list_submissions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    is_read: Optional[bool] = Query(None, alias="isRead"),
    is_archived: Optional[bool] = Query(None, alias="isArchived"),
    site: Site = Depends(contact_site),
    db: AsyncSession = Depends(get_db),
):
    filters = [ContactSubmission.site_id == site.id]
    if is_read is not None:
        filters.append(ContactSubmission.is_read.is_(is_read))
    if is_archived is not None:
        filters.append(ContactSubmission.is_archived.is_(is_archived))

    submissions, total = await page_submissions(db, filters, page=page, limit=limit)

    return ContactSubmissionList(
        submissions=await submissions_out(db, submissions),
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.put("/contact-submissions/{submission_id}", response_model=ContactSubmissionOut)
async def update_submission(
    submission_id: uuid.UUID,
    payload: ContactSubmissionUpdate,
    site: Site = Depends(contact_site),
    db: AsyncSession = Depends(get_db),
):
    submission = await _get_submission_or_404(db, site.id, submission_id)

    if payload.is_read is not None:
        submission.is_read = payload.is_read
    if payload.is_archived is not None:
        submission.is_archived = payload.is_archived

    await db.commit()
    return (await submissions_out(db, [submission]))[0]


@router.delete("/contact-submissions/{submission_id}", response_model=MessageOut)
async def remove_submission(
    submission_id: uuid.UUID,
    site: Site = Depends(contact_site),
    db: AsyncSession = Depends(get_db),
):
    submission = await _get_submission_or_404(db, site.id, submission_id)
    await delete_submission(db, submission)
    await db.commit()
    return MessageOut(message="Submission deleted successfully")
