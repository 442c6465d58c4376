# backend/app/api/v1/job_listings.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import require_feature
from app.core.errors import NotFound, ValidationFailed
from app.core.features import SiteFeatureName
from app.crud.job_board import listing_out, search_listings
from app.db.session import get_db
from app.models.company import Company
from app.models.job_listing import JobListing
from app.models.site import Site
from app.schemas.base import MessageOut
from app.schemas.job_board import (
    JobListingCreate,
    JobListingList,
    JobListingOut,
    JobListingUpdate,
    JobStatus,
)

router = APIRouter(prefix="/sites/{site_id}/job-listings", tags=["job-board"])

job_board_site = require_feature(SiteFeatureName.JOB_BOARD)

_ENUM_FIELDS = ("job_type", "experience_level", "remote_work_type", "status")
_NOT_NULL = {"company_id", "title", "description", "job_type", "status", "salary_currency"}


async def _get_listing_or_404(db: AsyncSession, site_id: uuid.UUID, listing_id: uuid.UUID) -> JobListing:
    stmt = select(JobListing).where(JobListing.id == listing_id, JobListing.site_id == site_id)
    listing = (await db.execute(stmt)).scalars().first()
    if not listing:
        raise NotFound("Job listing not found")
    return listing


async def _usable_company(db: AsyncSession, site_id: uuid.UUID, company_id: uuid.UUID) -> Company:
    stmt = select(Company).where(Company.id == company_id, Company.site_id == site_id)
    company = (await db.execute(stmt)).scalars().first()
    if not company or not company.is_active:
        raise ValidationFailed("Company not found or inactive")
    return company


def _plain(data: dict) -> dict:
    for key in _ENUM_FIELDS:
        if data.get(key) is not None:
            data[key] = data[key].value
    if data.get("salary_currency"):
        data["salary_currency"] = data["salary_currency"].upper()
    return data


@router.get("", response_model=JobListingList)
async def list_job_listings(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[JobStatus] = Query(None, alias="status"),
    company_id: Optional[uuid.UUID] = Query(None, alias="companyId"),
    search: Optional[str] = Query(None, max_length=200),
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    items, pagination = await search_listings(
        db,
        site.id,
        page=page,
        limit=limit,
        status=status_filter.value if status_filter else None,
        company_id=company_id,
        search=search,
    )
    return JobListingList(job_listings=items, pagination=pagination)


@router.post("", response_model=JobListingOut, status_code=status.HTTP_201_CREATED)
async def create_job_listing(
    payload: JobListingCreate,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    company = await _usable_company(db, site.id, payload.company_id)

    listing = JobListing(site_id=site.id, **_plain(payload.model_dump()))
    db.add(listing)
    await db.commit()
    return listing_out(listing, company)


@router.get("/{listing_id}", response_model=JobListingOut)
async def get_job_listing(
    listing_id: uuid.UUID,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    listing = await _get_listing_or_404(db, site.id, listing_id)
    return listing_out(listing, await db.get(Company, listing.company_id))


@router.put("/{listing_id}", response_model=JobListingOut)
async def update_job_listing(
    listing_id: uuid.UUID,
    payload: JobListingUpdate,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    listing = await _get_listing_or_404(db, site.id, listing_id)
    data = _plain(payload.model_dump(exclude_unset=True))

    if data.get("company_id") is not None and data["company_id"] != listing.company_id:
        await _usable_company(db, site.id, data["company_id"])

    lo = data.get("salary_min", listing.salary_min)
    hi = data.get("salary_max", listing.salary_max)
    if lo is not None and hi is not None and lo > hi:
        raise ValidationFailed("salaryMin cannot exceed salaryMax")

    for field, value in data.items():
        if value is None and field in _NOT_NULL:
            continue
        setattr(listing, field, value)

    await db.commit()
    return listing_out(listing, await db.get(Company, listing.company_id))


@router.delete("/{listing_id}", response_model=MessageOut)
async def delete_job_listing(
    listing_id: uuid.UUID,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    listing = await _get_listing_or_404(db, site.id, listing_id)
    await db.delete(listing)
    await db.commit()
    return MessageOut(message="Job listing deleted successfully")
