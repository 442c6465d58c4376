from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import APIModel


class SignInRequest(APIModel):
    # HS256 JWT minted by the OAuth gateway: email, name, image, provider, aud, exp
    assertion: str = Field(..., min_length=1)


class SessionUser(APIModel):
    id: UUID
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: str
    is_active: bool
    current_site_id: Optional[UUID] = None


class SessionOut(APIModel):
    access_token: str
    token_type: str = "bearer"
    auth_time: int
    expires_at: datetime
    is_expired: bool = False
    user: SessionUser


class SessionInfo(APIModel):
    user: SessionUser
    auth_time: int
    expires_at: datetime
