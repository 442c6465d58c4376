# backend/app/api/v1/pages.py
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.site import get_accessible_site
from app.api.v1.auth import get_current_user
from app.core.errors import Conflict, NotFound
from app.db.session import get_db
from app.models.page import Page
from app.models.site import Site
from app.models.user import User
from app.schemas.base import MessageOut
from app.schemas.page import PageCreate, PageOut, PageUpdate

router = APIRouter(prefix="/sites/{site_id}/pages", tags=["pages"])


async def _get_page_or_404(db: AsyncSession, site_id: uuid.UUID, page_id: uuid.UUID) -> Page:
    stmt = select(Page).where(Page.id == page_id, Page.site_id == site_id)
    page = (await db.execute(stmt)).scalars().first()
    if not page:
        raise NotFound("Page not found")
    return page


async def _ensure_slug_free(
    db: AsyncSession,
    site_id: uuid.UUID,
    slug: str,
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    stmt = select(Page.id).where(Page.site_id == site_id, Page.slug == slug)
    clash = (await db.execute(stmt)).scalars().first()
    if clash is not None and clash != exclude_id:
        raise Conflict("A page with this slug already exists")


@router.get("", response_model=List[PageOut])
async def list_pages(
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Page).where(Page.site_id == site.id).order_by(Page.created_at.desc())
    return (await db.execute(stmt)).scalars().all()


@router.post("", response_model=PageOut, status_code=status.HTTP_201_CREATED)
async def create_page(
    payload: PageCreate,
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await _ensure_slug_free(db, site.id, payload.slug)

    page = Page(
        site_id=site.id,
        author_id=user.id,
        title=payload.title,
        slug=payload.slug,
        content=payload.content,
        is_published=payload.is_published,
    )
    db.add(page)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("A page with this slug already exists")
    return page


@router.get("/{page_id}", response_model=PageOut)
async def get_page(
    page_id: uuid.UUID,
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
):
    return await _get_page_or_404(db, site.id, page_id)


@router.put("/{page_id}", response_model=PageOut)
async def update_page(
    page_id: uuid.UUID,
    payload: PageUpdate,
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
):
    page = await _get_page_or_404(db, site.id, page_id)

    data = payload.model_dump(exclude_unset=True)
    if data.get("slug"):
        await _ensure_slug_free(db, site.id, data["slug"], exclude_id=page.id)

    for field, value in data.items():
        # every page column is NOT NULL; explicit nulls are ignored
        if value is None:
            continue
        setattr(page, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("A page with this slug already exists")
    return page


@router.delete("/{page_id}", response_model=MessageOut)
async def delete_page(
    page_id: uuid.UUID,
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
):
    page = await _get_page_or_404(db, site.id, page_id)
    await db.delete(page)
    await db.commit()
    return MessageOut(message="Page deleted successfully")
