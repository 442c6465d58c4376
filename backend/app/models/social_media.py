# backend/app/models/social_media.py

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin, UUIDPrimaryKey


class SocialMediaChannel(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "social_media_channels"
    __table_args__ = (
        UniqueConstraint("site_id", "platform", "channel_id", name="uq_social_channels_site_platform_channel"),
    )

    site_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # YOUTUBE | INSTAGRAM | TWITTER | FACEBOOK | LINKEDIN | TIKTOK
    platform: Mapped[str] = mapped_column(String(20), nullable=False)
    # the platform's own id for the channel
    channel_id: Mapped[str] = mapped_column(String(200), nullable=False)
    channel_name: Mapped[str] = mapped_column(String(300), nullable=False)
    channel_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class SocialMediaChannelStat(UUIDPrimaryKey, TimestampMixin, Base):
    __tablename__ = "social_media_channel_stats"
    __table_args__ = (
        UniqueConstraint("channel_id", "stat_type", name="uq_social_stats_channel_type"),
    )

    channel_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("social_media_channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # SUBSCRIBERS | VIDEOS | VIEWS | FOLLOWERS | POSTS | LIKES
    stat_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # cached upstream value, kept as text ("12345")
    value: Mapped[str] = mapped_column(String(50), nullable=False, default="0")
    # None until the first successful refresh
    last_updated: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
