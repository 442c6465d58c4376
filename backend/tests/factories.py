# tests/factories.py
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt

from app.core.config import settings
from app.core.features import SiteFeatureName
from app.core.roles import UserRole
from app.core.security import create_session_token
from app.models.invite import Invite
from app.models.site import Site
from app.models.site_feature import SiteFeature
from app.models.site_membership import SiteMembership
from app.models.user import User


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def create_user(
    db,
    email: Optional[str] = None,
    role: UserRole = UserRole.USER,
    is_active: bool = True,
) -> User:
    user = User(
        email=(email or f"user_{uuid.uuid4().hex[:8]}@example.com").lower().strip(),
        role=role.value,
        is_active=is_active,
    )
    db.add(user)
    await db.flush()
    return user


async def create_site(db, name: Optional[str] = None, domain: Optional[str] = None) -> Site:
    site = Site(name=name or f"Site {uuid.uuid4().hex[:8]}", domain=domain)
    db.add(site)
    await db.flush()
    return site


async def add_member(db, site_id: uuid.UUID, user_id: uuid.UUID) -> SiteMembership:
    m = SiteMembership(site_id=site_id, user_id=user_id)
    db.add(m)
    await db.flush()
    return m


async def set_feature(
    db,
    site_id: uuid.UUID,
    feature: SiteFeatureName,
    is_enabled: bool = True,
) -> SiteFeature:
    row = SiteFeature(site_id=site_id, feature=feature.value, is_enabled=is_enabled)
    db.add(row)
    await db.flush()
    return row


async def create_invite(
    db,
    inviter: User,
    email: str,
    role: UserRole = UserRole.USER,
    expires_in: timedelta = timedelta(days=30),
    is_used: bool = False,
) -> Invite:
    inv = Invite(
        email=email.lower().strip(),
        role=role.value,
        token=f"tok_{uuid.uuid4().hex}",
        invited_by_id=inviter.id,
        expires_at=utcnow() + expires_in,
        is_used=is_used,
        used_at=utcnow() if is_used else None,
    )
    db.add(inv)
    await db.flush()
    return inv


def auth_headers(user: User, *, auth_time: Optional[int] = None) -> dict[str, str]:
    token = create_session_token(
        user_id=str(user.id),
        role=user.role,
        is_active=user.is_active,
        auth_time=auth_time,
    )
    return {"Authorization": f"Bearer {token}"}


def make_assertion(
    email: str,
    *,
    name: Optional[str] = None,
    secret: Optional[str] = None,
    audience: Optional[str] = None,
    expires_in: timedelta = timedelta(minutes=5),
) -> str:
    """Identity assertion as the OAuth gateway would mint it."""
    now = utcnow()
    payload = {
        "email": email,
        "name": name,
        "provider": "google",
        "aud": audience or settings.OAUTH_ASSERTION_AUDIENCE,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(payload, secret or settings.OAUTH_ASSERTION_SECRET, algorithm="HS256")
