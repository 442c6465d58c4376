# app/crud/job_board.py
from __future__ import annotations

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.company import Company
from app.models.job_listing import JobListing
from app.schemas.base import Pagination
from app.schemas.job_board import CompanyOut, CompanyRef, JobBoardFilters, JobListingOut


async def listing_counts(db: AsyncSession, company_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not company_ids:
        return {}
    stmt = (
        select(JobListing.company_id, func.count(JobListing.id))
        .where(JobListing.company_id.in_(company_ids))
        .group_by(JobListing.company_id)
    )
    return {cid: int(n) for cid, n in (await db.execute(stmt)).all()}


async def companies_out(db: AsyncSession, companies: Sequence[Company]) -> list[CompanyOut]:
    counts = await listing_counts(db, [c.id for c in companies])
    out = []
    for c in companies:
        item = CompanyOut.model_validate(c)
        item.job_listing_count = counts.get(c.id, 0)
        out.append(item)
    return out


def listing_out(listing: JobListing, company: Optional[Company]) -> JobListingOut:
    item = JobListingOut.model_validate(listing)
    item.company = CompanyRef.model_validate(company) if company is not None else None
    return item


async def search_listings(
    db: AsyncSession,
    site_id: uuid.UUID,
    *,
    page: int,
    limit: int,
    status: Optional[str] = None,
    company_id: Optional[uuid.UUID] = None,
    job_type: Optional[str] = None,
    experience_level: Optional[str] = None,
    remote_work_type: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    salary_min: Optional[int] = None,
    salary_max: Optional[int] = None,
    active_companies_only: bool = False,
) -> tuple[list[JobListingOut], Pagination]:
    """
    One page of listings joined with their company, newest first.
    """
    filters: list[Any] = [JobListing.site_id == site_id]
    if status:
        filters.append(JobListing.status == status)
    if company_id:
        filters.append(JobListing.company_id == company_id)
    if job_type:
        filters.append(JobListing.job_type == job_type)
    if experience_level:
        filters.append(JobListing.experience_level == experience_level)
    if remote_work_type:
        filters.append(JobListing.remote_work_type == remote_work_type)
    if location:
        filters.append(
            func.lower(JobListing.location).contains(location.strip().lower(), autoescape=True)
        )
    if search:
        term = search.strip().lower()
        filters.append(
            or_(
                func.lower(JobListing.title).contains(term, autoescape=True),
                func.lower(JobListing.description).contains(term, autoescape=True),
                func.lower(Company.name).contains(term, autoescape=True),
            )
        )
    # salary range overlap; a one-sided range counts as both ends
    if salary_min is not None:
        filters.append(func.coalesce(JobListing.salary_max, JobListing.salary_min) >= salary_min)
    if salary_max is not None:
        filters.append(func.coalesce(JobListing.salary_min, JobListing.salary_max) <= salary_max)
    if active_companies_only:
        filters.append(Company.is_active.is_(True))

    base = select(JobListing, Company).join(Company, Company.id == JobListing.company_id).where(*filters)

    total_stmt = (
        select(func.count(JobListing.id))
        .select_from(JobListing)
        .join(Company, Company.id == JobListing.company_id)
        .where(*filters)
    )
    total = int((await db.execute(total_stmt)).scalar() or 0)

    rows = (
        await db.execute(
            base.order_by(JobListing.created_at.desc()).offset((page - 1) * limit).limit(limit)
        )
    ).all()

    items = [listing_out(listing, company) for listing, company in rows]
    return items, Pagination.build(page=page, limit=limit, total=total)


async def board_filters(db: AsyncSession, site_id: uuid.UUID) -> JobBoardFilters:
    """Distinct facet values across the site's public listings."""
    visible = (
        select(JobListing, Company)
        .join(Company, Company.id == JobListing.company_id)
        .where(
            JobListing.site_id == site_id,
            JobListing.status == "ACTIVE",
            Company.is_active.is_(True),
        )
    )
    rows = (await db.execute(visible)).all()

    job_types: set[str] = set()
    levels: set[str] = set()
    remote: set[str] = set()
    locations: set[str] = set()
    companies: dict[uuid.UUID, Company] = {}

    for listing, company in rows:
        job_types.add(listing.job_type)
        if listing.experience_level:
            levels.add(listing.experience_level)
        if listing.remote_work_type:
            remote.add(listing.remote_work_type)
        if listing.location:
            locations.add(listing.location)
        companies[company.id] = company

    return JobBoardFilters(
        job_types=sorted(job_types),
        experience_levels=sorted(levels),
        remote_work_types=sorted(remote),
        locations=sorted(locations),
        companies=[
            CompanyRef.model_validate(c) for c in sorted(companies.values(), key=lambda c: c.name.lower())
        ],
    )
