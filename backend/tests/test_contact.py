# tests/test_contact.py
from __future__ import annotations

import pytest
from sqlalchemy import select

from app.core.features import SiteFeatureName
from app.core.roles import UserRole
from app.crud.contact import get_contact_form
from app.models.contact_form import ContactForm
from app.models.contact_submission import ContactSubmission, ContactSubmissionData
from tests.factories import add_member, auth_headers, create_site, create_user, set_feature


async def _contact_site(db):
    user = await create_user(db, "owner@example.com")
    site = await create_site(db)
    await add_member(db, site.id, user.id)
    await set_feature(db, site.id, SiteFeatureName.CONTACT_MANAGEMENT)
    await db.commit()
    return user, site


FORM = {
    "name": "Say hi",
    "fields": [
        {"fieldName": "name", "fieldLabel": "Your Name", "isRequired": True},
        {"fieldName": "topic", "fieldLabel": "Topic", "fieldType": "SELECT", "options": "[\"a\", \"b\"]"},
    ],
}


@pytest.mark.asyncio
async def test_form_lifecycle(client, db):
    user, site = await _contact_site(db)
    h = auth_headers(user)
    url = f"/api/sites/{site.id}/contact-form"

    r = await client.get(url, headers=h)
    assert r.status_code == 200
    assert r.json() is None

    r = await client.put(url, json=FORM, headers=h)
    assert r.status_code == 404

    r = await client.post(url, json=FORM, headers=h)
    assert r.status_code == 201, r.text
    body = r.json()
    assert [f["fieldName"] for f in body["fields"]] == ["name", "topic"]
    assert [f["sortOrder"] for f in body["fields"]] == [0, 1]

    r = await client.post(url, json=FORM, headers=h)
    assert r.status_code == 409

    dup = {"fields": [{"fieldName": "x", "fieldLabel": "X"}, {"fieldName": "x", "fieldLabel": "Y"}]}
    r = await client.put(url, json=dup, headers=h)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_submissions_survive_form_redesign(client, db):
    user, site = await _contact_site(db)
    h = auth_headers(user)

    r = await client.post(f"/api/sites/{site.id}/contact-form", json=FORM, headers=h)
    assert r.status_code == 201

    r = await client.post(f"/api/public/sites/{site.id}/contact", json={"data": {"name": "Ada", "topic": "a"}})
    assert r.status_code == 201
    submission_id = r.json()["submissionId"]

    redesigned = {"name": "New", "fields": [{"fieldName": "email", "fieldLabel": "Email", "isRequired": True}]}
    r = await client.put(f"/api/sites/{site.id}/contact-form", json=redesigned, headers=h)
    assert r.status_code == 200
    assert [f["fieldName"] for f in r.json()["fields"]] == ["email"]

    rows = (await db.execute(select(ContactSubmissionData))).scalars().all()
    assert sorted((d.field_label, d.value) for d in rows) == [("Topic", "a"), ("Your Name", "Ada")]
    assert all(d.field_id is None for d in rows)

    r = await client.get(f"/api/sites/{site.id}/contact-submissions", headers=h)
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"]["total"] == 1
    [item] = body["submissions"]
    assert item["id"] == submission_id
    assert sorted(v["fieldLabel"] for v in item["data"]) == ["Topic", "Your Name"]


@pytest.mark.asyncio
async def test_submission_flags_filters_and_delete(client, db):
    user, site = await _contact_site(db)
    h = auth_headers(user)
    await client.post(f"/api/sites/{site.id}/contact-form", json=FORM, headers=h)

    ids = []
    for name in ("One", "Two"):
        r = await client.post(f"/api/public/sites/{site.id}/contact", json={"data": {"name": name}})
        ids.append(r.json()["submissionId"])

    url = f"/api/sites/{site.id}/contact-submissions"
    r = await client.put(f"{url}/{ids[0]}", json={"isRead": True}, headers=h)
    assert r.status_code == 200
    assert r.json()["isRead"] is True
    assert r.json()["isArchived"] is False

    r = await client.get(url, params={"isRead": "true"}, headers=h)
    assert [s["id"] for s in r.json()["submissions"]] == [ids[0]]

    r = await client.get(url, params={"isRead": "false"}, headers=h)
    assert [s["id"] for s in r.json()["submissions"]] == [ids[1]]

    r = await client.delete(f"{url}/{ids[1]}", headers=h)
    assert r.status_code == 200
    r = await client.delete(f"{url}/{ids[1]}", headers=h)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_contact_routes_require_feature(client, db):
    user = await create_user(db, "owner@example.com")
    site = await create_site(db)
    await add_member(db, site.id, user.id)
    await db.commit()

    r = await client.get(f"/api/sites/{site.id}/contact-form", headers=auth_headers(user))
    assert r.status_code == 403
    r = await client.get(f"/api/sites/{site.id}/contact-submissions", headers=auth_headers(user))
    assert r.status_code == 403


async def _submission(db, site_id, *, is_read=False):
    form = await get_contact_form(db, site_id)
    if form is None:
        form = ContactForm(site_id=site_id, name="Contact", is_active=True)
        db.add(form)
        await db.flush()
    submission = ContactSubmission(site_id=site_id, contact_form_id=form.id, is_read=is_read)
    db.add(submission)
    await db.flush()
    return submission


@pytest.mark.asyncio
async def test_cross_site_inbox_is_scoped_to_reachable_sites(client, db):
    admin = await create_user(db, "admin@example.com", role=UserRole.ADMIN)
    root = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    plain = await create_user(db, "plain@example.com")

    alpha = await create_site(db, "Alpha Site")
    beta = await create_site(db, "Beta Site")
    gamma = await create_site(db, "Gamma Site")
    await add_member(db, alpha.id, admin.id)
    await add_member(db, gamma.id, admin.id)
    await set_feature(db, alpha.id, SiteFeatureName.CONTACT_MANAGEMENT)
    await set_feature(db, beta.id, SiteFeatureName.CONTACT_MANAGEMENT)
    await set_feature(db, gamma.id, SiteFeatureName.CONTACT_MANAGEMENT, is_enabled=False)

    await _submission(db, alpha.id)
    await _submission(db, alpha.id, is_read=True)
    await _submission(db, beta.id)
    await _submission(db, gamma.id)
    await db.commit()
    url = "/api/admin/contact-submissions"

    assert (await client.get(url)).status_code == 401
    assert (await client.get(url, headers=auth_headers(plain))).status_code == 403

    r = await client.get(url, headers=auth_headers(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"]["total"] == 2
    assert {s["siteName"] for s in body["submissions"]} == {"Alpha Site"}
    assert body["sites"] == [
        {"id": str(alpha.id), "name": "Alpha Site", "domain": None, "submissionCount": 2}
    ]

    r = await client.get(url, params={"isRead": "false"}, headers=auth_headers(admin))
    assert r.json()["pagination"]["total"] == 1

    r = await client.get(url, params={"siteId": str(beta.id)}, headers=auth_headers(admin))
    assert r.json()["submissions"] == []

    r = await client.get(url, headers=auth_headers(root))
    body = r.json()
    assert body["pagination"]["total"] == 3
    assert [s["name"] for s in body["sites"]] == ["Alpha Site", "Beta Site"]

    r = await client.get(url, params={"siteId": str(beta.id), "limit": 1}, headers=auth_headers(root))
    assert [s["siteId"] for s in r.json()["submissions"]] == [str(beta.id)]
