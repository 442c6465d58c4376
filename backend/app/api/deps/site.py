"""
Tenant resolution for /sites/{site_id}/... routes.

Order of checks: session (401), site exists (404), caller may access the
site (403), feature enabled (403). The site id always comes from the URL;
User.current_site_id is never consulted here.
"""

import uuid

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.auth import get_current_user
from app.core.errors import Forbidden, NotFound
from app.core.features import SiteFeatureName, feature_label
from app.crud.site_feature import is_feature_enabled
from app.crud.site_membership import user_can_access_site
from app.db.session import get_db
from app.models.site import Site
from app.models.user import User


async def get_site_or_404(db: AsyncSession, site_id: uuid.UUID) -> Site:
    site = await db.get(Site, site_id)
    if not site:
        raise NotFound("Site not found")
    return site


async def ensure_feature_enabled(db: AsyncSession, site_id: uuid.UUID, feature: SiteFeatureName) -> None:
    if not await is_feature_enabled(db, site_id, feature):
        raise Forbidden(f"{feature_label(feature)} feature is not enabled for this site")


async def get_accessible_site(
    site_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Site:
    site = await get_site_or_404(db, site_id)
    if not await user_can_access_site(db, user, site.id):
        raise Forbidden("You do not have access to this site")
    return site


def require_feature(feature: SiteFeatureName):
    """
    Authenticated, tenant-checked and feature-gated site, in that order.
    """

    async def _checker(
        site: Site = Depends(get_accessible_site),
        db: AsyncSession = Depends(get_db),
    ) -> Site:
        await ensure_feature_enabled(db, site.id, feature)
        return site

    return _checker


def public_site_with_feature(feature: SiteFeatureName):
    """
    Unauthenticated variant for /public routes: 404 for unknown sites,
    403 when the feature is off.
    """

    async def _checker(
        site_id: uuid.UUID,
        db: AsyncSession = Depends(get_db),
    ) -> Site:
        site = await get_site_or_404(db, site_id)
        await ensure_feature_enabled(db, site.id, feature)
        return site

    return _checker
