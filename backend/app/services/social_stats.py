"""
services/social_stats.py
------------------------
Lazy, read-triggered refresh of cached social media statistics.

A stat is FRESH while younger than STAT_TTL_MINUTES and STALE otherwise
(or when it was never fetched). Reading a channel refreshes its stale stats
from the platform; if the platform call fails the cached values are served
as they are.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import UpstreamError
from app.core.logging import get_logger
from app.db.base import as_utc
from app.models.social_media import SocialMediaChannel, SocialMediaChannelStat
from app.schemas.social_media import SocialPlatform, StatType
from app.services.youtube import YouTubeChannelStats, YouTubeClient

logger = get_logger(__name__)

_YOUTUBE_STAT_FIELDS = {
    StatType.SUBSCRIBERS.value: "subscriber_count",
    StatType.VIDEOS.value: "video_count",
    StatType.VIEWS.value: "view_count",
}


def stat_ttl() -> timedelta:
    return timedelta(minutes=settings.STAT_TTL_MINUTES)


def is_stale(stat: SocialMediaChannelStat, now: datetime, ttl: Optional[timedelta] = None) -> bool:
    last = as_utc(stat.last_updated)
    if last is None:
        return True
    return now - last >= (ttl or stat_ttl())


def format_number(value: str | int | None) -> str:
    """12345 -> '12.3K', 2500000 -> '2.5M'. Non-numeric input comes back as-is."""
    if value is None:
        return "0"
    try:
        n = int(str(value).strip())
    except ValueError:
        return str(value)
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(n)


async def _fetch_youtube(client: YouTubeClient, channel: SocialMediaChannel) -> Optional[YouTubeChannelStats]:
    try:
        return await client.get_channel_stats(channel.channel_id)
    except UpstreamError as exc:
        logger.warning(
            "social_stat_refresh_failed",
            channel_id=str(channel.id),
            platform=channel.platform,
            error=str(exc),
        )
        return None


async def refresh_stale_stats(
    db: AsyncSession,
    channel: SocialMediaChannel,
    stats: Sequence[SocialMediaChannelStat],
    client: YouTubeClient,
    *,
    now: Optional[datetime] = None,
) -> int:
    """
    Refresh every stale stat of one channel with at most one upstream call.
    Returns how many stats were updated. Never raises for upstream trouble.
    Does not commit.
    """
    now = now or datetime.now(timezone.utc)
    stale = [s for s in stats if is_stale(s, now)]
    if not stale:
        return 0

    # only YouTube has a refresh source; other platforms are edited by hand
    if channel.platform != SocialPlatform.YOUTUBE.value or not client.configured:
        return 0

    fresh = await _fetch_youtube(client, channel)
    if fresh is None:
        return 0

    updated = 0
    for stat in stale:
        attr = _YOUTUBE_STAT_FIELDS.get(stat.stat_type)
        if attr is None:
            continue
        stat.value = getattr(fresh, attr)
        stat.last_updated = now
        updated += 1

    if updated:
        await db.flush()
        logger.info("social_stats_refreshed", channel_id=str(channel.id), updated=updated)
    return updated
