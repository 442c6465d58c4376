# backend/app/api/v1/sponsors.py
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import require_feature
from app.core.errors import NotFound
from app.core.features import SiteFeatureName
from app.db.session import get_db
from app.models.site import Site
from app.models.sponsor import Sponsor
from app.schemas.base import MessageOut
from app.schemas.sponsor import SponsorCreate, SponsorOut, SponsorUpdate

router = APIRouter(prefix="/sites/{site_id}/sponsors", tags=["sponsors"])

sponsors_site = require_feature(SiteFeatureName.SPONSORS)


async def _get_sponsor_or_404(db: AsyncSession, site_id: uuid.UUID, sponsor_id: uuid.UUID) -> Sponsor:
    stmt = select(Sponsor).where(Sponsor.id == sponsor_id, Sponsor.site_id == site_id)
    sponsor = (await db.execute(stmt)).scalars().first()
    if not sponsor:
        raise NotFound("Sponsor not found")
    return sponsor


@router.get("", response_model=List[SponsorOut])
async def list_sponsors(
    site: Site = Depends(sponsors_site),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Sponsor).where(Sponsor.site_id == site.id).order_by(Sponsor.created_at.desc())
    return (await db.execute(stmt)).scalars().all()


@router.post("", response_model=SponsorOut, status_code=status.HTTP_201_CREATED)
async def create_sponsor(
    payload: SponsorCreate,
    site: Site = Depends(sponsors_site),
    db: AsyncSession = Depends(get_db),
):
    sponsor = Sponsor(site_id=site.id, **payload.model_dump())
    db.add(sponsor)
    await db.commit()
    return sponsor


@router.get("/{sponsor_id}", response_model=SponsorOut)
async def get_sponsor(
    sponsor_id: uuid.UUID,
    site: Site = Depends(sponsors_site),
    db: AsyncSession = Depends(get_db),
):
    return await _get_sponsor_or_404(db, site.id, sponsor_id)


@router.put("/{sponsor_id}", response_model=SponsorOut)
async def update_sponsor(
    sponsor_id: uuid.UUID,
    payload: SponsorUpdate,
    site: Site = Depends(sponsors_site),
    db: AsyncSession = Depends(get_db),
):
    sponsor = await _get_sponsor_or_404(db, site.id, sponsor_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field in {"name", "active"}:
            continue
        setattr(sponsor, field, value)

    await db.commit()
    return sponsor


@router.delete("/{sponsor_id}", response_model=MessageOut)
async def delete_sponsor(
    sponsor_id: uuid.UUID,
    site: Site = Depends(sponsors_site),
    db: AsyncSession = Depends(get_db),
):
    sponsor = await _get_sponsor_or_404(db, site.id, sponsor_id)
    await db.delete(sponsor)
    await db.commit()
    return MessageOut(message="Sponsor deleted successfully")
