# app/crud/invite.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.invite import Invite


async def find_live_invite(db: AsyncSession, email: str, now: datetime) -> Optional[Invite]:
    """Unused and unexpired invite for an (already normalised) email."""
    stmt = (
        select(Invite)
        .where(Invite.email == email)
        .where(Invite.is_used.is_(False))
        .where(Invite.expires_at > now)
        .order_by(Invite.created_at.desc())
        .limit(1)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def purge_expired_invites(db: AsyncSession, email: str, now: datetime) -> int:
    """Expired, never-used invites for an email carry no history worth keeping."""
    res = await db.execute(
        delete(Invite)
        .where(Invite.email == email)
        .where(Invite.is_used.is_(False))
        .where(Invite.expires_at <= now)
        .execution_options(synchronize_session=False)
    )
    return int(res.rowcount or 0)


async def consume_invite(db: AsyncSession, invite_id: uuid.UUID, now: datetime) -> bool:
    """
    Mark an invite used in a single conditional UPDATE. Exactly one caller
    can win; everybody else sees rowcount 0 and must deny.
    """
    res = await db.execute(
        update(Invite)
        .where(Invite.id == invite_id)
        .where(Invite.is_used.is_(False))
        .where(Invite.expires_at > now)
        .values(is_used=True, used_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    return res.rowcount == 1
