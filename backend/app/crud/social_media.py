# app/crud/social_media.py
from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.social_media import SocialMediaChannel, SocialMediaChannelStat
from app.schemas.social_media import SocialChannelOut, SocialStatOut


async def stats_by_channel(
    db: AsyncSession,
    channel_ids: Sequence[uuid.UUID],
) -> dict[uuid.UUID, list[SocialMediaChannelStat]]:
    grouped: dict[uuid.UUID, list[SocialMediaChannelStat]] = defaultdict(list)
    if not channel_ids:
        return grouped
    stmt = (
        select(SocialMediaChannelStat)
        .where(SocialMediaChannelStat.channel_id.in_(channel_ids))
        .order_by(SocialMediaChannelStat.stat_type.asc())
    )
    for stat in (await db.execute(stmt)).scalars().all():
        grouped[stat.channel_id].append(stat)
    return grouped


async def channels_out(db: AsyncSession, channels: Sequence[SocialMediaChannel]) -> list[SocialChannelOut]:
    stats = await stats_by_channel(db, [c.id for c in channels])
    out = []
    for c in channels:
        item = SocialChannelOut.model_validate(c)
        item.stats = [SocialStatOut.model_validate(s) for s in stats.get(c.id, [])]
        out.append(item)
    return out


async def delete_channel(db: AsyncSession, channel: SocialMediaChannel) -> None:
    await db.execute(
        delete(SocialMediaChannelStat)
        .where(SocialMediaChannelStat.channel_id == channel.id)
        .execution_options(synchronize_session=False)
    )
    await db.delete(channel)
    await db.flush()
