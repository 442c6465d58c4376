# app/crud/site.py
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blog_post import BlogPost
from app.models.company import Company
from app.models.contact_form import ContactForm, ContactFormField
from app.models.contact_submission import ContactSubmission, ContactSubmissionData
from app.models.job_listing import JobListing
from app.models.media_file import MediaFile
from app.models.page import Page
from app.models.site import Site
from app.models.site_feature import SiteFeature
from app.models.site_membership import SiteMembership
from app.models.social_media import SocialMediaChannel, SocialMediaChannelStat
from app.models.sponsor import Sponsor
from app.models.user import User


async def get_site_by_name(db: AsyncSession, name: str) -> Optional[Site]:
    stmt = select(Site).where(func.lower(Site.name) == name.strip().lower())
    return (await db.execute(stmt)).scalar_one_or_none()


async def get_site_by_domain(db: AsyncSession, domain: str) -> Optional[Site]:
    stmt = select(Site).where(Site.domain == domain)
    return (await db.execute(stmt)).scalar_one_or_none()


async def _count(db: AsyncSession, model, site_id: uuid.UUID) -> int:
    res = await db.execute(select(func.count()).select_from(model).where(model.site_id == site_id))
    return int(res.scalar() or 0)


async def count_site_resources(db: AsyncSession, site_id: uuid.UUID) -> dict[str, int]:
    return {
        "pages": await _count(db, Page, site_id),
        "blog_posts": await _count(db, BlogPost, site_id),
        "media_files": await _count(db, MediaFile, site_id),
        "users": await _count(db, SiteMembership, site_id),
    }


def _delete(stmt):
    return stmt.execution_options(synchronize_session=False)


async def delete_site_cascade(db: AsyncSession, site: Site) -> None:
    """
    Remove a site and every row it owns, children first, so the result is
    the same whether or not the database enforces ON DELETE CASCADE.
    Does not commit.
    """
    site_id = site.id

    form_ids = select(ContactForm.id).where(ContactForm.site_id == site_id)
    submission_ids = select(ContactSubmission.id).where(ContactSubmission.site_id == site_id)
    channel_ids = select(SocialMediaChannel.id).where(SocialMediaChannel.site_id == site_id)

    await db.execute(_delete(delete(ContactSubmissionData).where(ContactSubmissionData.submission_id.in_(submission_ids))))
    await db.execute(_delete(delete(ContactSubmission).where(ContactSubmission.site_id == site_id)))
    await db.execute(_delete(delete(ContactFormField).where(ContactFormField.contact_form_id.in_(form_ids))))
    await db.execute(_delete(delete(ContactForm).where(ContactForm.site_id == site_id)))

    await db.execute(_delete(delete(SocialMediaChannelStat).where(SocialMediaChannelStat.channel_id.in_(channel_ids))))
    await db.execute(_delete(delete(SocialMediaChannel).where(SocialMediaChannel.site_id == site_id)))

    await db.execute(_delete(delete(JobListing).where(JobListing.site_id == site_id)))
    await db.execute(_delete(delete(Company).where(Company.site_id == site_id)))

    for model in (Page, BlogPost, MediaFile, Sponsor, SiteFeature, SiteMembership):
        await db.execute(_delete(delete(model).where(model.site_id == site_id)))

    # current_site_id is only a UI pointer; drop dangling ones
    await db.execute(
        update(User)
        .where(User.current_site_id == site_id)
        .values(current_site_id=None)
        .execution_options(synchronize_session=False)
    )

    await db.delete(site)
    await db.flush()
