# backend/app/api/v1/users.py
from __future__ import annotations

import uuid
from collections import defaultdict
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.permissions import require_superadmin
from app.api.deps.site import get_site_or_404
from app.api.v1.auth import get_current_user
from app.core.errors import Forbidden, InvalidState, NotFound
from app.core.roles import UserRole
from app.crud.site_membership import user_can_access_site
from app.db.session import get_db
from app.models.site import Site
from app.models.site_membership import SiteMembership
from app.models.user import User
from app.schemas.user import CurrentSiteOut, CurrentSiteUpdate, SiteRef, UserOut, UserUpdate, UserWithSitesOut

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserWithSitesOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_superadmin),
) -> List[UserWithSitesOut]:
    users = (await db.execute(select(User).order_by(User.created_at.desc()))).scalars().all()

    rows = await db.execute(
        select(SiteMembership.user_id, Site)
        .join(Site, Site.id == SiteMembership.site_id)
        .order_by(Site.name.asc())
    )
    sites_by_user: dict[uuid.UUID, list[SiteRef]] = defaultdict(list)
    for user_id, site in rows.all():
        sites_by_user[user_id].append(SiteRef.model_validate(site))

    out = []
    for u in users:
        item = UserWithSitesOut.model_validate(u)
        item.sites = sites_by_user.get(u.id, [])
        out.append(item)
    return out


# =========================================================
# Current site pointer (UI convenience, not an auth boundary)
# =========================================================
@router.get("/current-site", response_model=CurrentSiteOut)
async def get_current_site(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> CurrentSiteOut:
    if user.current_site_id is None:
        return CurrentSiteOut(site=None)

    site = await db.get(Site, user.current_site_id)
    # membership may have been revoked since the pointer was stored
    if site is None or not await user_can_access_site(db, user, site.id):
        return CurrentSiteOut(site=None)
    return CurrentSiteOut(site=SiteRef.model_validate(site))


@router.put("/current-site", response_model=CurrentSiteOut)
async def set_current_site(
    payload: CurrentSiteUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> CurrentSiteOut:
    site = await get_site_or_404(db, payload.site_id)
    if not await user_can_access_site(db, user, site.id):
        raise Forbidden("You do not have access to this site")

    user.current_site_id = site.id
    await db.commit()
    return CurrentSiteOut(site=SiteRef.model_validate(site))


# =========================================================
# Admin edits
# =========================================================
@router.put("/{user_id}", response_model=UserOut)
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_superadmin),
) -> UserOut:
    target = await db.get(User, user_id)
    if not target:
        raise NotFound("User not found")

    if target.id == admin.id:
        if payload.role is not None and payload.role != UserRole.SUPERADMIN:
            raise InvalidState("You cannot change your own role")
        if payload.is_active is False:
            raise InvalidState("You cannot deactivate yourself")

    if payload.role is not None:
        target.role = payload.role.value
    if payload.is_active is not None:
        target.is_active = payload.is_active

    await db.commit()
    return UserOut.model_validate(target)
