# backend/app/api/v1/sites.py
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.permissions import require_site_creator, require_superadmin
from app.api.deps.site import get_accessible_site, get_site_or_404
from app.api.v1.auth import get_current_user
from app.auth.permissions import is_superadmin
from app.core.errors import Conflict, NotFound
from app.core.logging import get_logger
from app.crud.site import count_site_resources, delete_site_cascade, get_site_by_domain, get_site_by_name
from app.crud.site_feature import list_site_features
from app.crud.site_membership import add_site_member, get_site_membership, list_site_members
from app.db.session import get_db
from app.models.site import Site
from app.models.site_membership import SiteMembership
from app.models.user import User
from app.schemas.base import MessageOut
from app.schemas.site import (
    SiteCounts,
    SiteCreate,
    SiteDetailOut,
    SiteFeatureOut,
    SiteMemberAdd,
    SiteMemberOut,
    SiteSummaryOut,
    SiteUpdate,
)

router = APIRouter(prefix="/sites", tags=["sites"])
logger = get_logger(__name__)


async def _summary(db: AsyncSession, site: Site, *, enabled_only: bool = True) -> SiteSummaryOut:
    out = SiteSummaryOut.model_validate(site)
    features = await list_site_features(db, site.id, enabled_only=enabled_only)
    out.features = [SiteFeatureOut.model_validate(f) for f in features]
    out.counts = SiteCounts(**await count_site_resources(db, site.id))
    return out


async def _ensure_unique(
    db: AsyncSession,
    *,
    name: Optional[str],
    domain: Optional[str],
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    if name:
        clash = await get_site_by_name(db, name)
        if clash is not None and clash.id != exclude_id:
            raise Conflict("Site name already exists")
    if domain:
        clash = await get_site_by_domain(db, domain)
        if clash is not None and clash.id != exclude_id:
            raise Conflict("Domain already in use")


# =========================================================
# Sites
# =========================================================
@router.get("", response_model=List[SiteSummaryOut])
async def list_sites(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> List[SiteSummaryOut]:
    stmt = select(Site).order_by(Site.created_at.desc())
    if not is_superadmin(user.role):
        stmt = stmt.join(SiteMembership, SiteMembership.site_id == Site.id).where(SiteMembership.user_id == user.id)

    sites = (await db.execute(stmt)).scalars().all()
    return [await _summary(db, s) for s in sites]


@router.post("", response_model=SiteSummaryOut, status_code=status.HTTP_201_CREATED)
async def create_site(
    payload: SiteCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_site_creator),
) -> SiteSummaryOut:
    await _ensure_unique(db, name=payload.name, domain=payload.domain)

    site = Site(name=payload.name, domain=payload.domain, description=payload.description)
    db.add(site)
    try:
        await db.flush()
        await add_site_member(db, site.id, user.id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Site name or domain already exists")

    logger.info("site_created", site_id=str(site.id), created_by=str(user.id))
    return await _summary(db, site)


@router.get("/{site_id}", response_model=SiteDetailOut)
async def get_site(
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
) -> SiteDetailOut:
    summary = await _summary(db, site, enabled_only=False)
    out = SiteDetailOut(**summary.model_dump())
    out.users = [SiteMemberOut.model_validate(u) for u in await list_site_members(db, site.id)]
    return out


@router.put("/{site_id}", response_model=SiteSummaryOut)
async def update_site(
    site_id: uuid.UUID,
    payload: SiteUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_superadmin),
) -> SiteSummaryOut:
    site = await get_site_or_404(db, site_id)

    data = payload.model_dump(exclude_unset=True)
    await _ensure_unique(db, name=data.get("name"), domain=data.get("domain"), exclude_id=site.id)

    for k, v in data.items():
        if k == "name" and v is None:
            continue
        setattr(site, k, v)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Site name or domain already exists")
    return await _summary(db, site)


@router.delete("/{site_id}", response_model=MessageOut)
async def delete_site(
    site_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_superadmin),
) -> MessageOut:
    site = await get_site_or_404(db, site_id)
    await delete_site_cascade(db, site)
    await db.commit()

    logger.info("site_deleted", site_id=str(site_id), deleted_by=str(user.id))
    return MessageOut(message="Site deleted successfully")


# =========================================================
# Members
# =========================================================
@router.get("/{site_id}/users", response_model=List[SiteMemberOut])
async def list_members(
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
) -> List[SiteMemberOut]:
    return [SiteMemberOut.model_validate(u) for u in await list_site_members(db, site.id)]


@router.post("/{site_id}/users", response_model=SiteMemberOut, status_code=status.HTTP_201_CREATED)
async def add_member(
    site_id: uuid.UUID,
    payload: SiteMemberAdd,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_superadmin),
) -> SiteMemberOut:
    site = await get_site_or_404(db, site_id)
    member = await db.get(User, payload.user_id)
    if not member:
        raise NotFound("User not found")

    if await get_site_membership(db, site.id, member.id) is not None:
        raise Conflict("User is already a member of this site")

    try:
        await add_site_member(db, site.id, member.id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("User is already a member of this site")
    return SiteMemberOut.model_validate(member)


@router.delete("/{site_id}/users/{user_id}", response_model=MessageOut)
async def remove_member(
    site_id: uuid.UUID,
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_superadmin),
) -> MessageOut:
    site = await get_site_or_404(db, site_id)
    membership = await get_site_membership(db, site.id, user_id)
    if membership is None:
        raise NotFound("User is not a member of this site")

    await db.delete(membership)
    await db.commit()
    return MessageOut(message="User removed from site")
