# backend/app/api/v1/site_features.py
from __future__ import annotations

import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.permissions import require_superadmin
from app.api.deps.site import get_accessible_site, get_site_or_404
from app.core.errors import Conflict, NotFound, ValidationFailed
from app.core.features import (
    FEATURE_DEFINITIONS,
    feature_description,
    feature_label,
    parse_feature_name,
)
from app.core.logging import get_logger
from app.crud.site_feature import apply_feature_side_effects, get_site_feature, list_site_features
from app.db.session import get_db
from app.models.site import Site
from app.models.site_feature import SiteFeature
from app.models.user import User
from app.schemas.base import MessageOut
from app.schemas.site import FeatureDefinitionOut, SiteFeatureCreate, SiteFeatureOut, SiteFeatureUpdate

router = APIRouter(tags=["features"])
logger = get_logger(__name__)


@router.get("/features/definitions", response_model=List[FeatureDefinitionOut])
async def feature_definitions() -> List[FeatureDefinitionOut]:
    return [
        FeatureDefinitionOut(value=name, label=label, description=description)
        for name, (label, description) in FEATURE_DEFINITIONS.items()
    ]


async def _get_feature_or_404(db: AsyncSession, site_id: uuid.UUID, feature_id: uuid.UUID) -> SiteFeature:
    stmt = select(SiteFeature).where(SiteFeature.id == feature_id, SiteFeature.site_id == site_id)
    row = (await db.execute(stmt)).scalar_one_or_none()
    if not row:
        raise NotFound("Feature not found")
    return row


@router.get("/sites/{site_id}/features", response_model=List[SiteFeatureOut])
async def list_features(
    site: Site = Depends(get_accessible_site),
    db: AsyncSession = Depends(get_db),
) -> List[SiteFeatureOut]:
    return [SiteFeatureOut.model_validate(f) for f in await list_site_features(db, site.id)]


@router.post(
    "/sites/{site_id}/features",
    response_model=SiteFeatureOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_feature(
    site_id: uuid.UUID,
    payload: SiteFeatureCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_superadmin),
) -> SiteFeatureOut:
    site = await get_site_or_404(db, site_id)

    feature = parse_feature_name(payload.feature)
    if feature is None:
        raise ValidationFailed("Invalid feature")

    if await get_site_feature(db, site.id, feature) is not None:
        raise Conflict("Feature already exists for this site")

    row = SiteFeature(
        site_id=site.id,
        feature=feature.value,
        is_enabled=payload.is_enabled,
        display_name=payload.display_name or feature_label(feature),
        description=payload.description or feature_description(feature),
        config=payload.config,
    )
    db.add(row)
    try:
        await db.flush()
        await apply_feature_side_effects(db, row)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Feature already exists for this site")

    logger.info("site_feature_created", site_id=str(site.id), feature=row.feature, enabled=row.is_enabled, by=str(user.id))
    return SiteFeatureOut.model_validate(row)


@router.put("/sites/{site_id}/features/{feature_id}", response_model=SiteFeatureOut)
async def update_feature(
    site_id: uuid.UUID,
    feature_id: uuid.UUID,
    payload: SiteFeatureUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_superadmin),
) -> SiteFeatureOut:
    await get_site_or_404(db, site_id)
    row = await _get_feature_or_404(db, site_id, feature_id)

    for k, v in payload.model_dump(exclude_unset=True).items():
        if k == "is_enabled" and v is None:
            continue
        setattr(row, k, v)

    await db.flush()
    await apply_feature_side_effects(db, row)
    await db.commit()

    logger.info("site_feature_updated", site_id=str(site_id), feature=row.feature, enabled=row.is_enabled, by=str(user.id))
    return SiteFeatureOut.model_validate(row)


@router.delete("/sites/{site_id}/features/{feature_id}", response_model=MessageOut)
async def delete_feature(
    site_id: uuid.UUID,
    feature_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_superadmin),
) -> MessageOut:
    await get_site_or_404(db, site_id)
    row = await _get_feature_or_404(db, site_id, feature_id)

    await db.delete(row)
    await db.commit()

    logger.info("site_feature_deleted", site_id=str(site_id), feature=row.feature, by=str(user.id))
    return MessageOut(message="Feature removed successfully")
