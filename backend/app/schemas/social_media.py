from __future__ import annotations

import enum
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import APIModel


class SocialPlatform(str, enum.Enum):
    YOUTUBE = "YOUTUBE"
    INSTAGRAM = "INSTAGRAM"
    TWITTER = "TWITTER"
    FACEBOOK = "FACEBOOK"
    LINKEDIN = "LINKEDIN"
    TIKTOK = "TIKTOK"


class StatType(str, enum.Enum):
    SUBSCRIBERS = "SUBSCRIBERS"
    VIDEOS = "VIDEOS"
    VIEWS = "VIEWS"
    FOLLOWERS = "FOLLOWERS"
    POSTS = "POSTS"
    LIKES = "LIKES"


DEFAULT_STAT_TYPES = (StatType.SUBSCRIBERS, StatType.VIDEOS, StatType.VIEWS)


class SocialChannelCreate(APIModel):
    platform: SocialPlatform
    channel_id: str = Field(..., min_length=1, max_length=200)
    channel_name: Optional[str] = Field(None, max_length=300)
    channel_url: Optional[str] = Field(None, max_length=1000)
    display_order: int = 0


class SocialStatUpdate(APIModel):
    stat_type: StatType
    value: str = Field(..., max_length=50)


class SocialChannelUpdate(APIModel):
    channel_name: Optional[str] = Field(None, min_length=1, max_length=300)
    is_active: Optional[bool] = None
    display_order: Optional[int] = None
    # manual overrides for platforms without an API refresh
    stats: Optional[List[SocialStatUpdate]] = None


class SocialStatOut(APIModel):
    id: UUID
    stat_type: str
    value: str
    last_updated: Optional[datetime] = None


class SocialChannelOut(APIModel):
    id: UUID
    site_id: UUID
    platform: str
    channel_id: str
    channel_name: str
    channel_url: str
    thumbnail_url: Optional[str] = None
    is_active: bool
    display_order: int
    created_at: datetime
    updated_at: datetime
    stats: List[SocialStatOut] = []


class PublicStatOut(APIModel):
    value: str
    display_value: str
    last_updated: Optional[datetime] = None


class PublicChannelOut(APIModel):
    id: UUID
    platform: str
    channel_id: str
    channel_name: str
    channel_url: str
    thumbnail_url: Optional[str] = None
    display_order: int
    stats: dict[str, PublicStatOut] = {}
