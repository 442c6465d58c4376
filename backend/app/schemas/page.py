from __future__ import annotations

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.base import APIModel

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _clean_slug(v: str) -> str:
    v = v.strip().lower()
    if not _SLUG_RE.match(v):
        raise ValueError("slug may only contain lowercase letters, digits and single hyphens")
    return v


class PageCreate(APIModel):
    title: str = Field(..., min_length=1, max_length=300)
    slug: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    is_published: bool = False

    @field_validator("slug")
    @classmethod
    def _slug(cls, v: str) -> str:
        return _clean_slug(v)


class PageUpdate(APIModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    slug: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = None
    is_published: Optional[bool] = None

    @field_validator("slug")
    @classmethod
    def _slug(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _clean_slug(v)


class PageOut(APIModel):
    id: UUID
    site_id: UUID
    author_id: Optional[UUID] = None
    title: str
    slug: str
    content: str
    is_published: bool
    created_at: datetime
    updated_at: datetime
