# backend/app/api/v1/invites.py
from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.permissions import require_superadmin
from app.core.config import settings
from app.core.errors import Conflict, InvalidState, NotFound
from app.core.logging import get_logger
from app.crud.invite import find_live_invite, purge_expired_invites
from app.db.session import get_db
from app.models.invite import Invite
from app.models.user import User
from app.schemas.base import MessageOut
from app.schemas.invite import InviteCreate, InviteOut, InviterOut, InviteUpdate

router = APIRouter(prefix="/invites", tags=["invites"])
logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_token() -> str:
    # 48 random bytes -> 384 bits
    return secrets.token_urlsafe(48)


def _invite_out(invite: Invite, inviter: Optional[User]) -> InviteOut:
    out = InviteOut.model_validate(invite)
    if inviter is not None:
        out.invited_by = InviterOut.model_validate(inviter)
    return out


async def _get_invite_or_404(db: AsyncSession, invite_id: uuid.UUID) -> Invite:
    invite = await db.get(Invite, invite_id)
    if not invite:
        raise NotFound("Invite not found")
    return invite


# =========================================================
# Create + list
# =========================================================
@router.post("", response_model=InviteOut, status_code=status.HTTP_201_CREATED)
async def create_invite(
    payload: InviteCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_superadmin),
) -> InviteOut:
    now = _utcnow()
    email = User.normalize_email(payload.email)

    existing_user = (await db.execute(select(User.id).where(User.email == email))).scalar_one_or_none()
    if existing_user is not None:
        raise Conflict("User already exists")

    await purge_expired_invites(db, email, now)
    if await find_live_invite(db, email, now) is not None:
        raise Conflict("Invite already sent to this email")

    invite = Invite(
        email=email,
        role=payload.role.value,
        token=generate_token(),
        invited_by_id=user.id,
        expires_at=now + timedelta(days=settings.INVITE_EXPIRY_DAYS),
    )
    db.add(invite)
    try:
        await db.commit()
    except IntegrityError:
        # a concurrent request won the unique index on unused invites
        await db.rollback()
        raise Conflict("Invite already sent to this email")

    logger.info("invite_created", invite_id=str(invite.id), role=invite.role, invited_by=str(user.id))
    return _invite_out(invite, user)


@router.get("", response_model=List[InviteOut])
async def list_invites(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_superadmin),
) -> List[InviteOut]:
    stmt = (
        select(Invite, User)
        .outerjoin(User, User.id == Invite.invited_by_id)
        .order_by(Invite.created_at.desc())
    )
    rows = (await db.execute(stmt)).all()
    return [_invite_out(invite, inviter) for invite, inviter in rows]


# =========================================================
# Single invite
# =========================================================
@router.get("/{invite_id}", response_model=InviteOut)
async def get_invite(
    invite_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_superadmin),
) -> InviteOut:
    invite = await _get_invite_or_404(db, invite_id)
    inviter = await db.get(User, invite.invited_by_id)
    return _invite_out(invite, inviter)


@router.put("/{invite_id}", response_model=InviteOut)
async def update_invite_role(
    invite_id: uuid.UUID,
    payload: InviteUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_superadmin),
) -> InviteOut:
    invite = await _get_invite_or_404(db, invite_id)
    if invite.is_used:
        raise InvalidState("Cannot update used invite")

    invite.role = payload.role.value
    await db.commit()
    inviter = await db.get(User, invite.invited_by_id)
    return _invite_out(invite, inviter)


@router.delete("/{invite_id}", response_model=MessageOut)
async def delete_invite(
    invite_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_superadmin),
) -> MessageOut:
    invite = await _get_invite_or_404(db, invite_id)
    if invite.is_used:
        raise InvalidState("Cannot delete used invite")

    await db.delete(invite)
    await db.commit()
    logger.info("invite_deleted", invite_id=str(invite_id), deleted_by=str(user.id))
    return MessageOut(message="Invite deleted successfully")
