"""
services/youtube.py
-------------------
Thin async client for the YouTube Data API v3 (channel lookups only).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.errors import UpstreamError
from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class YouTubeChannelStats:
    channel_id: str
    channel_name: str
    subscriber_count: str
    view_count: str
    video_count: str
    thumbnail_url: str
    channel_url: str
    custom_url: Optional[str] = None
    description: Optional[str] = None
    published_at: Optional[str] = None


def _parse_channel(item: dict[str, Any]) -> YouTubeChannelStats:
    snippet = item.get("snippet") or {}
    statistics = item.get("statistics") or {}
    thumbnails = snippet.get("thumbnails") or {}
    channel_id = item["id"]
    return YouTubeChannelStats(
        channel_id=channel_id,
        channel_name=snippet.get("title") or channel_id,
        subscriber_count=str(statistics.get("subscriberCount") or "0"),
        view_count=str(statistics.get("viewCount") or "0"),
        video_count=str(statistics.get("videoCount") or "0"),
        thumbnail_url=(thumbnails.get("default") or {}).get("url") or "",
        channel_url=f"https://www.youtube.com/channel/{channel_id}",
        custom_url=snippet.get("customUrl"),
        description=snippet.get("description"),
        published_at=snippet.get("publishedAt"),
    )


class YouTubeClient:
    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://www.googleapis.com/youtube/v3",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def get_channel_stats(self, channel_id: str) -> Optional[YouTubeChannelStats]:
        """
        Snippet + statistics for one channel. None when YouTube does not know
        the id; UpstreamError for transport failures, non-2xx answers and
        bodies that do not look like a channels response.
        """
        if not self.configured:
            raise UpstreamError("YouTube API key is not configured")

        params = {"part": "snippet,statistics", "id": channel_id, "key": self.api_key}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get("/channels", params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(f"YouTube API error: {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamError(f"YouTube API request failed: {exc}") from exc

        if not isinstance(data, dict):
            raise UpstreamError("YouTube API returned an unexpected body")
        items = data.get("items") or []
        if not items:
            return None
        try:
            return _parse_channel(items[0])
        except (KeyError, TypeError, AttributeError) as exc:
            raise UpstreamError(f"YouTube API returned a malformed channel: {exc!r}") from exc


@lru_cache(maxsize=1)
def get_youtube_client() -> YouTubeClient:
    """Process-wide client handle (FastAPI dependency; override in tests)."""
    if not settings.YOUTUBE_API_KEY:
        logger.warning("youtube_api_key_missing")
    return YouTubeClient(
        settings.YOUTUBE_API_KEY,
        base_url=settings.YOUTUBE_API_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
    )
