"""
services/media_storage.py
-------------------------
Object-store boundary for media files.

Files are uploaded straight to the bucket by the dashboard; the API only keeps
their metadata rows and asks the bucket to drop an object when its row goes.
Objects are addressed as ``{MEDIA_STORAGE_URL}/{key}`` and removed with an
authenticated HTTP DELETE on that same address.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

import httpx

from app.core.config import settings
from app.core.errors import UpstreamError


class MediaStorage:
    def __init__(
        self,
        base_url: Optional[str],
        *,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def key_for(self, url: str) -> Optional[str]:
        """Object key for a URL that lives in this bucket, else None."""
        if not self.configured:
            return None
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    async def delete(self, key: str) -> None:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.delete(f"/{key}", headers=headers)
                # already gone is fine
                if response.status_code != 404:
                    response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(f"Media storage error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Media storage request failed: {exc}") from exc


@lru_cache(maxsize=1)
def get_media_storage() -> MediaStorage:
    """Process-wide storage handle (FastAPI dependency; override in tests)."""
    return MediaStorage(
        settings.MEDIA_STORAGE_URL,
        token=settings.MEDIA_STORAGE_TOKEN,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
    )
