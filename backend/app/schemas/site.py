from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from app.core.features import SiteFeatureName
from app.schemas.base import APIModel

_DOMAIN_RE = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)(\.(?!-)[a-z0-9-]{1,63}(?<!-))+$")


def _clean_domain(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip().lower()
    if not v:
        return None
    if not _DOMAIN_RE.match(v):
        raise ValueError("domain must be a host name like example.com")
    return v


class SiteCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=200)
    domain: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = " ".join(v.split())
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("domain")
    @classmethod
    def _domain(cls, v: Optional[str]) -> Optional[str]:
        return _clean_domain(v)


class SiteUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    domain: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    logo: Optional[str] = Field(None, max_length=1000)
    cover_image: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = " ".join(v.split())
        if not v:
            raise ValueError("name cannot be blank")
        return v

    @field_validator("domain")
    @classmethod
    def _domain(cls, v: Optional[str]) -> Optional[str]:
        return _clean_domain(v)


# -----------------------------
# Features
# -----------------------------
class SiteFeatureCreate(APIModel):
    # free-form here so unknown names come back as a plain 400
    feature: str
    is_enabled: bool = True
    display_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    config: Optional[Dict[str, Any]] = None


class SiteFeatureUpdate(APIModel):
    is_enabled: Optional[bool] = None
    display_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    config: Optional[Dict[str, Any]] = None


class SiteFeatureOut(APIModel):
    id: UUID
    site_id: UUID
    feature: str
    is_enabled: bool
    display_name: Optional[str] = None
    description: Optional[str] = None
    config: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class FeatureDefinitionOut(APIModel):
    value: SiteFeatureName
    label: str
    description: str


# -----------------------------
# Sites
# -----------------------------
class SiteCounts(APIModel):
    pages: int = 0
    blog_posts: int = 0
    media_files: int = 0
    users: int = 0


class SiteMemberOut(APIModel):
    id: UUID
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: str
    is_active: bool


class SiteOut(APIModel):
    id: UUID
    name: str
    domain: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    cover_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SiteSummaryOut(SiteOut):
    features: List[SiteFeatureOut] = []
    counts: SiteCounts = Field(default_factory=SiteCounts)


class SiteDetailOut(SiteSummaryOut):
    users: List[SiteMemberOut] = []


class SiteMemberAdd(APIModel):
    user_id: UUID
