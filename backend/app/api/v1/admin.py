# backend/app/api/v1/admin.py
"""
Dashboard-wide views that span several sites.

Each view is limited to the caller's reachable sites: SUPERADMIN sees every
site, ADMIN only the sites they belong to.
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.permissions import require_site_creator
from app.crud.contact import inbox_sites, page_submissions, submission_counts, submissions_out
from app.db.session import get_db
from app.models.contact_submission import ContactSubmission
from app.models.user import User
from app.schemas.base import Pagination
from app.schemas.contact import ContactInboxOut, InboxSiteOut, InboxSubmissionOut

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/contact-submissions", response_model=ContactInboxOut)
async def contact_inbox(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    site_id: Optional[uuid.UUID] = Query(None, alias="siteId"),
    is_read: Optional[bool] = Query(None, alias="isRead"),
    user: User = Depends(require_site_creator),
    db: AsyncSession = Depends(get_db),
):
    sites = await inbox_sites(db, user)
    names = {s.id: s.name for s in sites}

    # a siteId outside the caller's inbox narrows to nothing
    scope = [s.id for s in sites if site_id is None or s.id == site_id]
    filters = [ContactSubmission.site_id.in_(scope)]
    if is_read is not None:
        filters.append(ContactSubmission.is_read.is_(is_read))

    submissions, total = await page_submissions(db, filters, page=page, limit=limit)
    counts = await submission_counts(db, list(names))

    return ContactInboxOut(
        submissions=[
            InboxSubmissionOut(**item.model_dump(), site_name=names[item.site_id])
            for item in await submissions_out(db, submissions)
        ],
        sites=[
            InboxSiteOut(id=s.id, name=s.name, domain=s.domain, submission_count=counts.get(s.id, 0))
            for s in sites
        ],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )
