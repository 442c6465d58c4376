# app/crud/contact.py
from __future__ import annotations

import uuid
from collections import defaultdict
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact_form import ContactForm, ContactFormField
from app.auth.permissions import is_superadmin
from app.core.features import SiteFeatureName
from app.models.contact_submission import ContactSubmission, ContactSubmissionData
from app.models.site import Site
from app.models.site_feature import SiteFeature
from app.models.site_membership import SiteMembership
from app.models.user import User
from app.schemas.contact import (
    ContactFormFieldIn,
    ContactFormFieldOut,
    ContactFormOut,
    ContactSubmissionOut,
    ContactSubmissionValue,
)


async def get_contact_form(db: AsyncSession, site_id: uuid.UUID) -> Optional[ContactForm]:
    stmt = select(ContactForm).where(ContactForm.site_id == site_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def list_form_fields(
    db: AsyncSession,
    form_id: uuid.UUID,
    *,
    active_only: bool = False,
) -> list[ContactFormField]:
    stmt = select(ContactFormField).where(ContactFormField.contact_form_id == form_id)
    if active_only:
        stmt = stmt.where(ContactFormField.is_active.is_(True))
    stmt = stmt.order_by(ContactFormField.sort_order.asc(), ContactFormField.field_name.asc())
    return list((await db.execute(stmt)).scalars().all())


async def contact_form_out(db: AsyncSession, form: ContactForm) -> ContactFormOut:
    out = ContactFormOut.model_validate(form)
    out.fields = [ContactFormFieldOut.model_validate(f) for f in await list_form_fields(db, form.id)]
    return out


def add_form_fields(db: AsyncSession, form_id: uuid.UUID, fields: Iterable[ContactFormFieldIn]) -> None:
    for index, f in enumerate(fields):
        data = f.model_dump()
        data["field_type"] = f.field_type.value
        if data.get("sort_order") is None:
            data["sort_order"] = index
        db.add(ContactFormField(contact_form_id=form_id, **data))


async def replace_form_fields(
    db: AsyncSession,
    form: ContactForm,
    fields: Sequence[ContactFormFieldIn],
) -> None:
    """
    Swap the whole field set. Past submissions keep their snapshot of
    name/label; only the link to the old field row is cleared.
    """
    old_ids = select(ContactFormField.id).where(ContactFormField.contact_form_id == form.id)
    await db.execute(
        update(ContactSubmissionData)
        .where(ContactSubmissionData.field_id.in_(old_ids))
        .values(field_id=None)
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        delete(ContactFormField)
        .where(ContactFormField.contact_form_id == form.id)
        .execution_options(synchronize_session=False)
    )
    add_form_fields(db, form.id, fields)
    await db.flush()


async def submissions_out(
    db: AsyncSession,
    submissions: Sequence[ContactSubmission],
) -> list[ContactSubmissionOut]:
    if not submissions:
        return []

    ids = [s.id for s in submissions]
    rows = (
        await db.execute(
            select(ContactSubmissionData).where(ContactSubmissionData.submission_id.in_(ids))
        )
    ).scalars().all()

    values: dict[uuid.UUID, list[ContactSubmissionValue]] = defaultdict(list)
    for row in rows:
        values[row.submission_id].append(ContactSubmissionValue.model_validate(row))

    out = []
    for s in submissions:
        item = ContactSubmissionOut.model_validate(s)
        item.data = values.get(s.id, [])
        out.append(item)
    return out


async def delete_submission(db: AsyncSession, submission: ContactSubmission) -> None:
    await db.execute(
        delete(ContactSubmissionData)
        .where(ContactSubmissionData.submission_id == submission.id)
        .execution_options(synchronize_session=False)
    )
    await db.delete(submission)
    await db.flush()


async def page_submissions(
    db: AsyncSession,
    filters: Sequence[Any],
    *,
    page: int,
    limit: int,
) -> tuple[list[ContactSubmission], int]:
    """One page of submissions matching filters, newest first, plus the total."""
    total = int((await db.execute(select(func.count(ContactSubmission.id)).where(*filters))).scalar() or 0)
    stmt = (
        select(ContactSubmission)
        .where(*filters)
        .order_by(ContactSubmission.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all()), total


async def inbox_sites(db: AsyncSession, user: User) -> list[Site]:
    """
    Sites whose submissions show up in a user's cross-site inbox: contact
    management enabled, and reachable by the user (every site for SUPERADMIN,
    member sites otherwise).
    """
    enabled = select(SiteFeature.site_id).where(
        SiteFeature.feature == SiteFeatureName.CONTACT_MANAGEMENT.value,
        SiteFeature.is_enabled.is_(True),
    )
    stmt = select(Site).where(Site.id.in_(enabled))
    if not is_superadmin(user.role):
        member_of = select(SiteMembership.site_id).where(SiteMembership.user_id == user.id)
        stmt = stmt.where(Site.id.in_(member_of))
    return list((await db.execute(stmt.order_by(Site.name.asc()))).scalars().all())


async def submission_counts(db: AsyncSession, site_ids: Sequence[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not site_ids:
        return {}
    stmt = (
        select(ContactSubmission.site_id, func.count(ContactSubmission.id))
        .where(ContactSubmission.site_id.in_(site_ids))
        .group_by(ContactSubmission.site_id)
    )
    return {site_id: int(n) for site_id, n in (await db.execute(stmt)).all()}
