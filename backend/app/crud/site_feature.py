# app/crud/site_feature.py
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.features import (
    DEFAULT_CONTACT_FIELDS,
    DEFAULT_CONTACT_FORM_DESCRIPTION,
    DEFAULT_CONTACT_FORM_NAME,
    SiteFeatureName,
)
from app.models.contact_form import ContactForm, ContactFormField
from app.models.site_feature import SiteFeature


async def is_feature_enabled(db: AsyncSession, site_id: uuid.UUID, feature: SiteFeatureName | str) -> bool:
    """
    True iff a SiteFeature row exists for (site, feature) with is_enabled.
    A missing row means disabled. Reads the table on every call.
    """
    name = feature.value if isinstance(feature, SiteFeatureName) else str(feature)
    stmt = select(SiteFeature.is_enabled).where(
        SiteFeature.site_id == site_id,
        SiteFeature.feature == name,
    )
    enabled = (await db.execute(stmt)).scalar_one_or_none()
    return enabled is True


async def list_site_features(
    db: AsyncSession,
    site_id: uuid.UUID,
    *,
    enabled_only: bool = False,
) -> list[SiteFeature]:
    stmt = select(SiteFeature).where(SiteFeature.site_id == site_id)
    if enabled_only:
        stmt = stmt.where(SiteFeature.is_enabled.is_(True))
    stmt = stmt.order_by(SiteFeature.feature.asc())
    return list((await db.execute(stmt)).scalars().all())


async def get_site_feature(db: AsyncSession, site_id: uuid.UUID, feature: SiteFeatureName) -> SiteFeature | None:
    stmt = select(SiteFeature).where(
        SiteFeature.site_id == site_id,
        SiteFeature.feature == feature.value,
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def seed_default_contact_form(db: AsyncSession, site_id: uuid.UUID) -> bool:
    """
    Create the default contact form for a site unless one already exists.
    Returns True when a form was created. Safe to call repeatedly.
    """
    existing = (
        await db.execute(select(ContactForm.id).where(ContactForm.site_id == site_id))
    ).scalar_one_or_none()
    if existing is not None:
        return False

    form = ContactForm(
        site_id=site_id,
        name=DEFAULT_CONTACT_FORM_NAME,
        description=DEFAULT_CONTACT_FORM_DESCRIPTION,
        is_active=True,
    )
    db.add(form)
    await db.flush()

    for field in DEFAULT_CONTACT_FIELDS:
        db.add(ContactFormField(contact_form_id=form.id, is_active=True, **field))
    await db.flush()
    return True


async def apply_feature_side_effects(db: AsyncSession, site_feature: SiteFeature) -> None:
    """Seed default child resources for features that just became enabled."""
    if not site_feature.is_enabled:
        return
    if site_feature.feature == SiteFeatureName.CONTACT_MANAGEMENT.value:
        await seed_default_contact_form(db, site_feature.site_id)
