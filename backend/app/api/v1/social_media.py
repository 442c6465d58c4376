# backend/app/api/v1/social_media.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import require_feature
from app.core.errors import Conflict, NotFound, ValidationFailed
from app.core.features import SiteFeatureName
from app.core.logging import get_logger
from app.crud.social_media import channels_out, delete_channel, stats_by_channel
from app.db.session import get_db
from app.models.site import Site
from app.models.social_media import SocialMediaChannel, SocialMediaChannelStat
from app.schemas.base import MessageOut
from app.schemas.social_media import (
    DEFAULT_STAT_TYPES,
    SocialChannelCreate,
    SocialChannelOut,
    SocialChannelUpdate,
    SocialPlatform,
)
from app.services.youtube import YouTubeClient, get_youtube_client

logger = get_logger(__name__)

router = APIRouter(prefix="/sites/{site_id}/social-media", tags=["social-media"])

social_site = require_feature(SiteFeatureName.SOCIAL_MEDIA_INTEGRATION)


async def _get_channel_or_404(db: AsyncSession, site_id: uuid.UUID, channel_pk: uuid.UUID) -> SocialMediaChannel:
    stmt = select(SocialMediaChannel).where(
        SocialMediaChannel.id == channel_pk,
        SocialMediaChannel.site_id == site_id,
    )
    channel = (await db.execute(stmt)).scalars().first()
    if not channel:
        raise NotFound("Social media channel not found")
    return channel


@router.get("", response_model=List[SocialChannelOut])
async def list_channels(
    site: Site = Depends(social_site),
    db: AsyncSession = Depends(get_db),
):
    stmt = (
        select(SocialMediaChannel)
        .where(SocialMediaChannel.site_id == site.id)
        .order_by(SocialMediaChannel.display_order.asc(), SocialMediaChannel.created_at.asc())
    )
    return await channels_out(db, (await db.execute(stmt)).scalars().all())


@router.post("", response_model=SocialChannelOut, status_code=status.HTTP_201_CREATED)
async def create_channel(
    payload: SocialChannelCreate,
    site: Site = Depends(social_site),
    db: AsyncSession = Depends(get_db),
    youtube: YouTubeClient = Depends(get_youtube_client),
):
    channel_id = payload.channel_id.strip()

    dup = await db.execute(
        select(SocialMediaChannel.id).where(
            SocialMediaChannel.site_id == site.id,
            SocialMediaChannel.platform == payload.platform.value,
            SocialMediaChannel.channel_id == channel_id,
        )
    )
    if dup.first() is not None:
        raise Conflict("This channel is already connected to the site")

    channel = SocialMediaChannel(
        site_id=site.id,
        platform=payload.platform.value,
        channel_id=channel_id,
        display_order=payload.display_order,
    )
    initial: dict[str, str] = {}

    if payload.platform == SocialPlatform.YOUTUBE:
        if not youtube.configured:
            raise ValidationFailed("YouTube integration is not configured")
        # UpstreamError propagates as 500
        info = await youtube.get_channel_stats(channel_id)
        if info is None:
            raise ValidationFailed("YouTube channel not found")
        channel.channel_name = payload.channel_name or info.channel_name
        channel.channel_url = payload.channel_url or info.channel_url
        channel.thumbnail_url = info.thumbnail_url or None
        initial = {
            "SUBSCRIBERS": info.subscriber_count,
            "VIDEOS": info.video_count,
            "VIEWS": info.view_count,
        }
    else:
        if not payload.channel_name or not payload.channel_url:
            raise ValidationFailed("channelName and channelUrl are required for this platform")
        channel.channel_name = payload.channel_name
        channel.channel_url = payload.channel_url

    db.add(channel)
    await db.flush()

    now = datetime.now(timezone.utc)
    for stat_type in DEFAULT_STAT_TYPES:
        value = initial.get(stat_type.value)
        db.add(
            SocialMediaChannelStat(
                channel_id=channel.id,
                stat_type=stat_type.value,
                value=value if value is not None else "0",
                last_updated=now if value is not None else None,
            )
        )

    await db.commit()
    logger.info("social_channel_created", site_id=str(site.id), platform=channel.platform, channel=channel_id)
    return (await channels_out(db, [channel]))[0]


@router.get("/{channel_pk}", response_model=SocialChannelOut)
async def get_channel(
    channel_pk: uuid.UUID,
    site: Site = Depends(social_site),
    db: AsyncSession = Depends(get_db),
):
    channel = await _get_channel_or_404(db, site.id, channel_pk)
    return (await channels_out(db, [channel]))[0]


@router.put("/{channel_pk}", response_model=SocialChannelOut)
async def update_channel(
    channel_pk: uuid.UUID,
    payload: SocialChannelUpdate,
    site: Site = Depends(social_site),
    db: AsyncSession = Depends(get_db),
):
    channel = await _get_channel_or_404(db, site.id, channel_pk)

    if payload.channel_name is not None:
        channel.channel_name = payload.channel_name
    if payload.is_active is not None:
        channel.is_active = payload.is_active
    if payload.display_order is not None:
        channel.display_order = payload.display_order

    if payload.stats:
        existing = {s.stat_type: s for s in (await stats_by_channel(db, [channel.id])).get(channel.id, [])}
        now = datetime.now(timezone.utc)
        for item in payload.stats:
            stat = existing.get(item.stat_type.value)
            if stat is None:
                stat = SocialMediaChannelStat(channel_id=channel.id, stat_type=item.stat_type.value)
                db.add(stat)
            stat.value = item.value
            stat.last_updated = now

    await db.commit()
    return (await channels_out(db, [channel]))[0]


@router.delete("/{channel_pk}", response_model=MessageOut)
async def remove_channel(
    channel_pk: uuid.UUID,
    site: Site = Depends(social_site),
    db: AsyncSession = Depends(get_db),
):
    channel = await _get_channel_or_404(db, site.id, channel_pk)
    await delete_channel(db, channel)
    await db.commit()
    return MessageOut(message="Social media channel deleted successfully")
