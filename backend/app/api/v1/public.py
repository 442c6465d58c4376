# backend/app/api/v1/public.py
"""
Unauthenticated, read-mostly projections for embedding on third-party pages.

Every route resolves the site first (404) and then the feature (403). CORS
for /api/public/* is handled by PublicCORSMiddleware in app.main.
"""

from __future__ import annotations

import uuid
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import public_site_with_feature
from app.core.errors import NotFound, ValidationFailed
from app.core.features import SiteFeatureName
from app.core.logging import get_logger
from app.crud.contact import get_contact_form, list_form_fields
from app.crud.job_board import board_filters, search_listings
from app.crud.social_media import stats_by_channel
from app.db.session import get_db
from app.models.contact_form import ContactForm
from app.models.contact_submission import ContactSubmission, ContactSubmissionData
from app.models.site import Site
from app.models.site_feature import SiteFeature
from app.models.social_media import SocialMediaChannel
from app.models.sponsor import Sponsor
from app.schemas.contact import (
    ContactFormFieldOut,
    ContactSubmissionCreated,
    ContactSubmissionIn,
    PublicContactFormOut,
)
from app.schemas.job_board import ExperienceLevel, JobType, PublicJobBoardOut, RemoteWorkType
from app.schemas.public import PublicFeatureOut, PublicSiteOut
from app.schemas.social_media import PublicChannelOut, PublicStatOut
from app.schemas.sponsor import PublicSponsorOut
from app.services.social_stats import format_number, refresh_stale_stats
from app.services.youtube import YouTubeClient, get_youtube_client

logger = get_logger(__name__)

router = APIRouter(prefix="/public", tags=["public"])

CACHE_PUBLIC = "public, max-age=300, stale-while-revalidate=60"
CACHE_DIRECTORY = "public, max-age=600"
CACHE_NONE = "no-store"

# column widths of contact_submissions, and the per-value cap on public input
MAX_IP_LENGTH = 100
MAX_USER_AGENT_LENGTH = 1000
MAX_VALUE_LENGTH = 5000


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


# =========================================================
# Site directory
# =========================================================
@router.get("/sites", response_model=List[PublicSiteOut])
async def list_public_sites(response: Response, db: AsyncSession = Depends(get_db)):
    sites = (await db.execute(select(Site).order_by(Site.name.asc()))).scalars().all()
    features = (
        await db.execute(
            select(SiteFeature)
            .where(SiteFeature.is_enabled.is_(True))
            .order_by(SiteFeature.feature.asc())
        )
    ).scalars().all()

    by_site: dict[uuid.UUID, list[PublicFeatureOut]] = {}
    for f in features:
        by_site.setdefault(f.site_id, []).append(PublicFeatureOut.model_validate(f))

    out = []
    for s in sites:
        item = PublicSiteOut.model_validate(s)
        item.features = by_site.get(s.id, [])
        out.append(item)

    response.headers["Cache-Control"] = CACHE_DIRECTORY
    return out


# =========================================================
# Sponsors
# =========================================================
@router.get("/sites/{site_id}/sponsors", response_model=List[PublicSponsorOut])
async def public_sponsors(
    response: Response,
    site: Site = Depends(public_site_with_feature(SiteFeatureName.SPONSORS)),
    db: AsyncSession = Depends(get_db),
):
    stmt = (
        select(Sponsor)
        .where(Sponsor.site_id == site.id, Sponsor.active.is_(True))
        .order_by(Sponsor.name.asc())
    )
    sponsors = (await db.execute(stmt)).scalars().all()
    response.headers["Cache-Control"] = CACHE_PUBLIC
    return sponsors


# =========================================================
# Job board
# =========================================================
@router.get("/sites/{site_id}/job-board", response_model=PublicJobBoardOut)
async def public_job_board(
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=200),
    job_type: Optional[JobType] = Query(None, alias="jobType"),
    experience_level: Optional[ExperienceLevel] = Query(None, alias="experienceLevel"),
    remote_type: Optional[RemoteWorkType] = Query(None, alias="remoteType"),
    location: Optional[str] = Query(None, max_length=200),
    company: Optional[uuid.UUID] = Query(None),
    salary_min: Optional[int] = Query(None, alias="salaryMin", ge=0),
    salary_max: Optional[int] = Query(None, alias="salaryMax", ge=0),
    site: Site = Depends(public_site_with_feature(SiteFeatureName.JOB_BOARD)),
    db: AsyncSession = Depends(get_db),
):
    items, pagination = await search_listings(
        db,
        site.id,
        page=page,
        limit=limit,
        status="ACTIVE",
        company_id=company,
        job_type=job_type.value if job_type else None,
        experience_level=experience_level.value if experience_level else None,
        remote_work_type=remote_type.value if remote_type else None,
        location=location,
        search=search,
        salary_min=salary_min,
        salary_max=salary_max,
        active_companies_only=True,
    )
    filters = await board_filters(db, site.id)

    response.headers["Cache-Control"] = CACHE_PUBLIC
    return PublicJobBoardOut(job_listings=items, pagination=pagination, filters=filters)


# =========================================================
# Social media
# =========================================================
@router.get("/sites/{site_id}/social-media", response_model=List[PublicChannelOut])
async def public_social_media(
    response: Response,
    site: Site = Depends(public_site_with_feature(SiteFeatureName.SOCIAL_MEDIA_INTEGRATION)),
    db: AsyncSession = Depends(get_db),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    stmt = (
        select(SocialMediaChannel)
        .where(SocialMediaChannel.site_id == site.id, SocialMediaChannel.is_active.is_(True))
        .order_by(SocialMediaChannel.display_order.asc(), SocialMediaChannel.created_at.asc())
    )
    channels = (await db.execute(stmt)).scalars().all()
    stats = await stats_by_channel(db, [c.id for c in channels])

    refreshed = 0
    for channel in channels:
        refreshed += await refresh_stale_stats(db, channel, stats.get(channel.id, []), youtube)
    if refreshed:
        await db.commit()

    out = []
    for channel in channels:
        item = PublicChannelOut.model_validate(channel)
        item.stats = {
            s.stat_type: PublicStatOut(
                value=s.value,
                display_value=format_number(s.value),
                last_updated=s.last_updated,
            )
            for s in stats.get(channel.id, [])
        }
        out.append(item)

    response.headers["Cache-Control"] = CACHE_PUBLIC
    return out


# =========================================================
# Contact
# =========================================================
async def _active_form_or_404(db: AsyncSession, site_id: uuid.UUID) -> ContactForm:
    form = await get_contact_form(db, site_id)
    if form is None or not form.is_active:
        raise NotFound("Contact form not found")
    return form


@router.get("/sites/{site_id}/contact", response_model=PublicContactFormOut)
async def public_contact_form(
    response: Response,
    site: Site = Depends(public_site_with_feature(SiteFeatureName.CONTACT_MANAGEMENT)),
    db: AsyncSession = Depends(get_db),
):
    form = await _active_form_or_404(db, site.id)
    out = PublicContactFormOut.model_validate(form)
    out.fields = [
        ContactFormFieldOut.model_validate(f)
        for f in await list_form_fields(db, form.id, active_only=True)
    ]
    response.headers["Cache-Control"] = CACHE_PUBLIC
    return out


@router.post(
    "/sites/{site_id}/contact",
    response_model=ContactSubmissionCreated,
    status_code=status.HTTP_201_CREATED,
)
async def submit_contact_form(
    payload: ContactSubmissionIn,
    request: Request,
    response: Response,
    site: Site = Depends(public_site_with_feature(SiteFeatureName.CONTACT_MANAGEMENT)),
    db: AsyncSession = Depends(get_db),
):
    form = await _active_form_or_404(db, site.id)
    fields = await list_form_fields(db, form.id, active_only=True)

    values = {
        f.field_name: _as_text(payload.data.get(f.field_name)).strip()[:MAX_VALUE_LENGTH]
        for f in fields
    }
    missing = [f.field_label for f in fields if f.is_required and not values[f.field_name]]
    if missing:
        raise ValidationFailed("Missing required fields", missingFields=missing)

    submission = ContactSubmission(
        site_id=site.id,
        contact_form_id=form.id,
        ip_address=client_ip(request)[:MAX_IP_LENGTH],
        user_agent=(request.headers.get("user-agent") or "")[:MAX_USER_AGENT_LENGTH] or None,
    )
    db.add(submission)
    await db.flush()

    for f in fields:
        if not values[f.field_name]:
            continue
        db.add(
            ContactSubmissionData(
                submission_id=submission.id,
                field_id=f.id,
                field_name=f.field_name,
                field_label=f.field_label,
                value=values[f.field_name],
            )
        )

    await db.commit()
    logger.info("contact_submission_received", site_id=str(site.id), submission_id=str(submission.id))

    response.headers["Cache-Control"] = CACHE_NONE
    return ContactSubmissionCreated(submission_id=submission.id)
