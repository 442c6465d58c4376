# app/crud/site_membership.py
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.permissions import can_access_site, is_superadmin
from app.models.site_membership import SiteMembership
from app.models.user import User


async def get_site_membership(
    db: AsyncSession,
    site_id: uuid.UUID,
    user_id: uuid.UUID,
) -> Optional[SiteMembership]:
    stmt = select(SiteMembership).where(
        SiteMembership.site_id == site_id,
        SiteMembership.user_id == user_id,
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def is_site_member(db: AsyncSession, site_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    return await get_site_membership(db, site_id, user_id) is not None


async def user_can_access_site(db: AsyncSession, user: User, site_id: uuid.UUID) -> bool:
    """
    Database-backed wrapper around can_access_site(); SUPERADMIN skips the
    membership lookup entirely.
    """
    if is_superadmin(user.role):
        return True
    member = await is_site_member(db, site_id, user.id)
    return can_access_site(role=user.role, is_member=member)


async def member_site_ids(db: AsyncSession, user_id: uuid.UUID) -> list[uuid.UUID]:
    stmt = select(SiteMembership.site_id).where(SiteMembership.user_id == user_id)
    return list((await db.execute(stmt)).scalars().all())


async def list_site_members(db: AsyncSession, site_id: uuid.UUID) -> list[User]:
    stmt = (
        select(User)
        .join(SiteMembership, SiteMembership.user_id == User.id)
        .where(SiteMembership.site_id == site_id)
        .order_by(User.email.asc())
    )
    return list((await db.execute(stmt)).scalars().all())


async def add_site_member(db: AsyncSession, site_id: uuid.UUID, user_id: uuid.UUID) -> SiteMembership:
    """Caller checks for an existing membership; the unique constraint is the backstop."""
    m = SiteMembership(site_id=site_id, user_id=user_id)
    db.add(m)
    await db.flush()
    return m
