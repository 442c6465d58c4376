from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from app.schemas.base import APIModel


class MediaFileOut(APIModel):
    id: UUID
    site_id: UUID
    filename: str
    original_name: Optional[str] = None
    url: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    folder_path: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MediaLibraryOut(APIModel):
    files: List[MediaFileOut]
    # keyed by folder path, "root" for files outside any folder
    files_by_folder: Dict[str, List[MediaFileOut]]
    folders: List[str]
