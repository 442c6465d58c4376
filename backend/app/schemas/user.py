from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from app.core.roles import UserRole
from app.schemas.base import APIModel


class SiteRef(APIModel):
    id: UUID
    name: str
    domain: Optional[str] = None


class UserOut(APIModel):
    id: UUID
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: str
    is_active: bool
    is_invited: bool
    invited_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    created_at: datetime


class UserWithSitesOut(UserOut):
    sites: List[SiteRef] = []


class UserUpdate(APIModel):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class CurrentSiteUpdate(APIModel):
    site_id: UUID


class CurrentSiteOut(APIModel):
    site: Optional[SiteRef] = None
