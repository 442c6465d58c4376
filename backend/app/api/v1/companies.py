# backend/app/api/v1/companies.py
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import require_feature
from app.core.errors import Conflict, InvalidState, NotFound
from app.core.features import SiteFeatureName
from app.crud.job_board import companies_out, listing_counts
from app.db.session import get_db
from app.models.company import Company
from app.models.site import Site
from app.schemas.base import MessageOut
from app.schemas.job_board import CompanyCreate, CompanyOut, CompanyUpdate

router = APIRouter(prefix="/sites/{site_id}/companies", tags=["job-board"])

job_board_site = require_feature(SiteFeatureName.JOB_BOARD)


async def _get_company_or_404(db: AsyncSession, site_id: uuid.UUID, company_id: uuid.UUID) -> Company:
    stmt = select(Company).where(Company.id == company_id, Company.site_id == site_id)
    company = (await db.execute(stmt)).scalars().first()
    if not company:
        raise NotFound("Company not found")
    return company


async def _name_taken(db: AsyncSession, site_id: uuid.UUID, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
    stmt = select(Company.id).where(Company.site_id == site_id, func.lower(Company.name) == name.strip().lower())
    if exclude_id is not None:
        stmt = stmt.where(Company.id != exclude_id)
    return (await db.execute(stmt)).first() is not None


@router.get("", response_model=List[CompanyOut])
async def list_companies(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Company).where(Company.site_id == site.id)
    if is_active is not None:
        stmt = stmt.where(Company.is_active.is_(is_active))
    companies = (await db.execute(stmt.order_by(Company.name.asc()))).scalars().all()
    return await companies_out(db, companies)


@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
async def create_company(
    payload: CompanyCreate,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    if await _name_taken(db, site.id, payload.name):
        raise Conflict("A company with this name already exists")

    data = payload.model_dump()
    data["name"] = payload.name.strip()
    company = Company(site_id=site.id, **data)
    db.add(company)
    await db.commit()
    return (await companies_out(db, [company]))[0]


@router.get("/{company_id}", response_model=CompanyOut)
async def get_company(
    company_id: uuid.UUID,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    company = await _get_company_or_404(db, site.id, company_id)
    return (await companies_out(db, [company]))[0]


@router.put("/{company_id}", response_model=CompanyOut)
async def update_company(
    company_id: uuid.UUID,
    payload: CompanyUpdate,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    company = await _get_company_or_404(db, site.id, company_id)
    data = payload.model_dump(exclude_unset=True)

    if data.get("name") is not None:
        data["name"] = data["name"].strip()
        if await _name_taken(db, site.id, data["name"], exclude_id=company.id):
            raise Conflict("A company with this name already exists")

    for field, value in data.items():
        if value is None and field in {"name", "is_active"}:
            continue
        setattr(company, field, value)

    await db.commit()
    return (await companies_out(db, [company]))[0]


@router.delete("/{company_id}", response_model=MessageOut)
async def delete_company(
    company_id: uuid.UUID,
    site: Site = Depends(job_board_site),
    db: AsyncSession = Depends(get_db),
):
    company = await _get_company_or_404(db, site.id, company_id)

    if (await listing_counts(db, [company.id])).get(company.id, 0) > 0:
        raise InvalidState("Cannot delete a company that still has job listings")

    await db.delete(company)
    await db.commit()
    return MessageOut(message="Company deleted successfully")
