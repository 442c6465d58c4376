from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from app.schemas.base import APIModel


class PublicFeatureOut(APIModel):
    feature: str
    display_name: Optional[str] = None
    description: Optional[str] = None


class PublicSiteOut(APIModel):
    id: UUID
    name: str
    domain: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    cover_image: Optional[str] = None
    features: List[PublicFeatureOut] = []
