# backend/app/api/v1/media.py
from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import require_feature
from app.core.errors import NotFound, UpstreamError
from app.core.features import SiteFeatureName
from app.core.logging import get_logger
from app.db.session import get_db
from app.models.media_file import MediaFile
from app.models.site import Site
from app.schemas.base import MessageOut
from app.schemas.media import MediaFileOut, MediaLibraryOut
from app.services.media_storage import MediaStorage, get_media_storage

logger = get_logger(__name__)

router = APIRouter(prefix="/sites/{site_id}/media", tags=["media"])

media_site = require_feature(SiteFeatureName.MEDIA_FILES)

ROOT_FOLDER = "root"


async def _get_file_or_404(db: AsyncSession, site_id: uuid.UUID, file_id: uuid.UUID) -> MediaFile:
    stmt = select(MediaFile).where(MediaFile.id == file_id, MediaFile.site_id == site_id)
    media = (await db.execute(stmt)).scalars().first()
    if not media:
        raise NotFound("Media file not found")
    return media


@router.get("", response_model=MediaLibraryOut)
async def list_media(
    folder: Optional[str] = Query(None),
    site: Site = Depends(media_site),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(MediaFile).where(MediaFile.site_id == site.id)
    if folder:
        stmt = stmt.where(MediaFile.folder_path == folder)
    stmt = stmt.order_by(MediaFile.folder_path.asc(), MediaFile.created_at.desc())
    files = [MediaFileOut.model_validate(f) for f in (await db.execute(stmt)).scalars().all()]

    by_folder: dict[str, list[MediaFileOut]] = defaultdict(list)
    for f in files:
        by_folder[f.folder_path or ROOT_FOLDER].append(f)

    return MediaLibraryOut(
        files=files,
        files_by_folder=dict(by_folder),
        folders=sorted({f.folder_path for f in files if f.folder_path}),
    )


@router.get("/{file_id}", response_model=MediaFileOut)
async def get_media(
    file_id: uuid.UUID,
    site: Site = Depends(media_site),
    db: AsyncSession = Depends(get_db),
):
    return await _get_file_or_404(db, site.id, file_id)


@router.delete("/{file_id}", response_model=MessageOut)
async def delete_media(
    file_id: uuid.UUID,
    site: Site = Depends(media_site),
    db: AsyncSession = Depends(get_db),
    storage: MediaStorage = Depends(get_media_storage),
):
    """Removes the row even when the bucket delete fails; the failure is only logged."""
    media = await _get_file_or_404(db, site.id, file_id)

    key = storage.key_for(media.url)
    if key:
        try:
            await storage.delete(key)
        except UpstreamError as exc:
            logger.warning(
                "media_storage_delete_failed",
                site_id=str(site.id),
                file_id=str(media.id),
                error=str(exc),
            )

    await db.delete(media)
    await db.commit()
    logger.info("media_file_deleted", site_id=str(site.id), file_id=str(file_id))
    return MessageOut(message="File deleted successfully")
