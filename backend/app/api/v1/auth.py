# backend/app/api/v1/auth.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.sign_in import sign_in
from app.core.errors import Forbidden, Unauthenticated
from app.core.security import (
    SessionClaims,
    bearer_scheme,
    create_session_token,
    decode_identity_assertion,
    decode_session_token,
    is_session_expired,
    refresh_session_token,
)
from app.db.session import get_db
from app.models.user import User
from app.schemas.auth import SessionInfo, SessionOut, SessionUser, SignInRequest

router = APIRouter(prefix="/auth", tags=["auth"])


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =========================================================
# Request gate
# =========================================================
async def get_session_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> SessionClaims:
    """Signed token that is neither flagged nor past the absolute window."""
    if credentials is None:
        raise Unauthenticated("Unauthorized")

    claims = decode_session_token(credentials.credentials)
    if claims.is_expired or is_session_expired(claims.auth_time):
        raise Unauthenticated("Session expired")
    return claims


async def _load_session_user(db: AsyncSession, claims: SessionClaims) -> User:
    try:
        user_id = uuid.UUID(claims.user_id)
    except ValueError:
        raise Unauthenticated("Invalid token")

    user = await db.get(User, user_id)
    if not user:
        raise Unauthenticated("User not found")
    if not user.is_active:
        raise Unauthenticated("User inactive")
    return user


async def get_current_user(
    claims: SessionClaims = Depends(get_session_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    return await _load_session_user(db, claims)


# =========================================================
# Sign-in / refresh
# =========================================================
def _session_out(token: str, claims: SessionClaims, user: User) -> SessionOut:
    return SessionOut(
        access_token=token,
        auth_time=claims.auth_time,
        expires_at=claims.expires_at,
        is_expired=claims.is_expired,
        user=SessionUser.model_validate(user),
    )


@router.post("/signin", response_model=SessionOut)
async def signin(payload: SignInRequest, db: AsyncSession = Depends(get_db)) -> SessionOut:
    identity = decode_identity_assertion(payload.assertion)

    result = await sign_in(db, identity, now=_utcnow())
    if not result.admitted or result.user is None:
        raise Forbidden("Access denied: no valid invite")

    user = result.user
    token = create_session_token(user_id=str(user.id), role=user.role, is_active=user.is_active)
    return _session_out(token, decode_session_token(token), user)


@router.post("/refresh", response_model=SessionOut)
async def refresh(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> SessionOut:
    """
    Re-issue the session with current role/is_active and the original
    auth_time. Past the window the new token carries is_expired=true.
    """
    if credentials is None:
        raise Unauthenticated("Unauthorized")

    claims = decode_session_token(credentials.credentials)
    user = await _load_session_user(db, claims)

    token, refreshed = refresh_session_token(claims, role=user.role, is_active=user.is_active)
    return _session_out(token, refreshed, user)


@router.get("/session", response_model=SessionInfo)
async def session_info(
    claims: SessionClaims = Depends(get_session_claims),
    user: User = Depends(get_current_user),
) -> SessionInfo:
    return SessionInfo(
        user=SessionUser.model_validate(user),
        auth_time=claims.auth_time,
        expires_at=claims.expires_at,
    )
