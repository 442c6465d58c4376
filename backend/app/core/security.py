from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi.security import HTTPBearer
from jose import JWTError, jwt

from app.core.config import settings
from app.core.errors import Unauthenticated

# Missing headers are turned into our own 401 by the request gate.
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    role: str
    is_active: bool
    auth_time: int
    is_expired: bool = False

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.auth_time, tz=timezone.utc) + session_window()


@dataclass(frozen=True)
class IdentityAssertion:
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    provider: Optional[str] = None


def _normalize_token(token: Optional[str]) -> str:
    """
    Make token decoding resilient to common Swagger / copy-paste issues:
    - Leading/trailing whitespace/newlines
    - Surrounding quotes
    - Accidentally including the 'Bearer ' prefix in the token field
    """
    if token is None:
        return ""

    t = token.strip()

    if (t.startswith('"') and t.endswith('"')) or (t.startswith("'") and t.endswith("'")):
        t = t[1:-1].strip()

    if t.lower().startswith("bearer "):
        t = t[7:].strip()

    return t


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def session_window() -> timedelta:
    return timedelta(hours=settings.SESSION_MAX_AGE_HOURS)


def is_session_expired(auth_time: int, now: Optional[datetime] = None) -> bool:
    """Absolute window measured from first authentication, never sliding."""
    age = _now(now).timestamp() - auth_time
    return age > session_window().total_seconds()


def _encode(claims: SessionClaims, now: datetime) -> str:
    to_encode: dict[str, Any] = {
        "sub": claims.user_id,
        "role": claims.role,
        "is_active": claims.is_active,
        "auth_time": claims.auth_time,
        "is_expired": claims.is_expired,
        "iat": int(now.timestamp()),
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_session_token(
    *,
    user_id: str,
    role: str,
    is_active: bool,
    auth_time: Optional[int] = None,
    now: Optional[datetime] = None,
) -> str:
    current = _now(now)
    claims = SessionClaims(
        user_id=str(user_id),
        role=role,
        is_active=is_active,
        auth_time=int(current.timestamp()) if auth_time is None else int(auth_time),
    )
    return _encode(claims, current)


def refresh_session_token(
    claims: SessionClaims,
    *,
    role: str,
    is_active: bool,
    now: Optional[datetime] = None,
) -> tuple[str, SessionClaims]:
    """
    Re-issue a session keeping the original auth_time. Once the window is
    exceeded the token is flagged is_expired; the request gate rejects it.
    """
    current = _now(now)
    refreshed = SessionClaims(
        user_id=claims.user_id,
        role=role,
        is_active=is_active,
        auth_time=claims.auth_time,
        is_expired=claims.is_expired or is_session_expired(claims.auth_time, current),
    )
    return _encode(refreshed, current), refreshed


def decode_session_token(token: Optional[str]) -> SessionClaims:
    """Verify the signature and shape of a session token (not its age)."""
    token = _normalize_token(token)
    if not token:
        raise Unauthenticated("Invalid token")

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require_sub": True, "require_iat": True},
        )
    except JWTError:
        # bad format, bad signature, wrong algorithm, ...
        raise Unauthenticated("Invalid token")

    auth_time = payload.get("auth_time")
    if not payload.get("sub") or not isinstance(auth_time, int):
        raise Unauthenticated("Invalid token")

    return SessionClaims(
        user_id=str(payload["sub"]),
        role=str(payload.get("role") or ""),
        is_active=bool(payload.get("is_active", False)),
        auth_time=auth_time,
        is_expired=bool(payload.get("is_expired", False)),
    )


def decode_identity_assertion(assertion: str) -> IdentityAssertion:
    """
    Verify an identity assertion minted by the OAuth gateway after it has
    completed the provider flow.
    """
    token = _normalize_token(assertion)
    if not token:
        raise Unauthenticated("Invalid assertion")

    try:
        payload = jwt.decode(
            token,
            settings.OAUTH_ASSERTION_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.OAUTH_ASSERTION_AUDIENCE,
            options={"require_exp": True, "require_aud": True},
        )
    except JWTError:
        raise Unauthenticated("Invalid assertion")

    email = (payload.get("email") or "").strip().lower()
    if not email:
        raise Unauthenticated("Invalid assertion")

    return IdentityAssertion(
        email=email,
        name=payload.get("name"),
        image=payload.get("image"),
        provider=payload.get("provider"),
    )
