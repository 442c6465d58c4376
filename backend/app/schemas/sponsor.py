from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import APIModel


class SponsorCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=200)
    url: Optional[str] = Field(None, max_length=1000)
    logo: Optional[str] = Field(None, max_length=1000)
    active: bool = True


class SponsorUpdate(APIModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    url: Optional[str] = Field(None, max_length=1000)
    logo: Optional[str] = Field(None, max_length=1000)
    active: Optional[bool] = None


class SponsorOut(APIModel):
    id: UUID
    site_id: UUID
    name: str
    url: Optional[str] = None
    logo: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: datetime


class PublicSponsorOut(APIModel):
    id: UUID
    name: str
    url: Optional[str] = None
    logo: Optional[str] = None
