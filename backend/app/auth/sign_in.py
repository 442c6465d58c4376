"""
Sign-in decision for identities asserted by the OAuth gateway.

Existing users are admitted with their stored role. Unknown emails are
admitted only by consuming a live invite, which also creates the user.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.security import IdentityAssertion
from app.crud.invite import consume_invite, find_live_invite
from app.models.user import User

logger = get_logger(__name__)


class SignInOutcome(str, enum.Enum):
    ADMIT = "ADMIT"
    DENY = "DENY"


@dataclass
class SignInResult:
    outcome: SignInOutcome
    user: Optional[User] = None
    via_invite: bool = False
    reason: Optional[str] = None

    @property
    def admitted(self) -> bool:
        return self.outcome is SignInOutcome.ADMIT


def _deny(email: str, reason: str) -> SignInResult:
    logger.info("sign_in_denied", email=email, reason=reason)
    return SignInResult(outcome=SignInOutcome.DENY, reason=reason)


async def sign_in(
    db: AsyncSession,
    identity: IdentityAssertion,
    *,
    now: Optional[datetime] = None,
) -> SignInResult:
    """
    Run the ADMIT/DENY procedure and commit its effects.

    Invite consumption is a conditional UPDATE (see consume_invite) done in
    the same transaction as the user insert, so two concurrent sign-ins for
    one invite cannot both create a user.
    """
    now = now or datetime.now(timezone.utc)
    email = User.normalize_email(identity.email)

    user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user is not None:
        user.last_login = now
        if identity.name and not user.name:
            user.name = User.normalize_name(identity.name)
        if identity.image and not user.image:
            user.image = identity.image
        await db.commit()
        logger.info("sign_in_admitted", user_id=str(user.id), path="existing_user")
        return SignInResult(outcome=SignInOutcome.ADMIT, user=user)

    invite = await find_live_invite(db, email, now)
    if invite is None:
        return _deny(email, "no_valid_invite")

    if not await consume_invite(db, invite.id, now):
        await db.rollback()
        return _deny(email, "invite_already_consumed")

    user = User(
        email=email,
        name=User.normalize_name(identity.name),
        image=identity.image,
        role=invite.role,
        is_active=True,
        is_invited=True,
        invited_by=invite.invited_by_id,
        invited_at=invite.created_at,
        last_login=now,
    )
    db.add(user)
    await db.commit()

    logger.info("sign_in_admitted", user_id=str(user.id), path="invite", invite_id=str(invite.id))
    return SignInResult(outcome=SignInOutcome.ADMIT, user=user, via_invite=True)
