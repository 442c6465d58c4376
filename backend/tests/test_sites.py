# tests/test_sites.py
from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select

from app.core.features import SiteFeatureName
from app.core.roles import UserRole
from app.crud.site_feature import seed_default_contact_form
from app.models.contact_form import ContactForm, ContactFormField
from app.models.page import Page
from app.models.site import Site
from app.models.site_feature import SiteFeature
from app.models.site_membership import SiteMembership
from app.models.sponsor import Sponsor
from app.models.user import User
from tests.factories import add_member, auth_headers, create_site, create_user, set_feature


@pytest.mark.asyncio
async def test_list_is_scoped_to_memberships(client, db):
    root = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    user = await create_user(db, "user@example.com")
    mine = await create_site(db, "Mine")
    await create_site(db, "Theirs")
    await add_member(db, mine.id, user.id)
    await db.commit()

    r = await client.get("/api/sites", headers=auth_headers(user))
    assert r.status_code == 200
    assert [s["name"] for s in r.json()] == ["Mine"]
    assert r.json()[0]["counts"]["users"] == 1

    r = await client.get("/api/sites", headers=auth_headers(root))
    assert sorted(s["name"] for s in r.json()) == ["Mine", "Theirs"]


@pytest.mark.asyncio
async def test_non_member_gets_403_and_unknown_site_404(client, db):
    user = await create_user(db, "user@example.com")
    other = await create_site(db)
    await db.commit()
    h = auth_headers(user)

    r = await client.get(f"/api/sites/{other.id}", headers=h)
    assert r.status_code == 403

    r = await client.get(f"/api/sites/{uuid.uuid4()}", headers=h)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_create_site_requires_admin_and_unique_name(client, db):
    admin = await create_user(db, "admin@example.com", role=UserRole.ADMIN)
    user = await create_user(db, "user@example.com")
    await db.commit()

    r = await client.post("/api/sites", json={"name": "Blog"}, headers=auth_headers(user))
    assert r.status_code == 403

    r = await client.post(
        "/api/sites",
        json={"name": "  Blog  ", "domain": "Blog.Example.com"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["name"] == "Blog"
    assert body["domain"] == "blog.example.com"
    assert body["counts"]["users"] == 1

    # creator becomes a member and can open it
    r = await client.get(f"/api/sites/{body['id']}", headers=auth_headers(admin))
    assert r.status_code == 200
    assert [u["email"] for u in r.json()["users"]] == ["admin@example.com"]

    r = await client.post("/api/sites", json={"name": "blog"}, headers=auth_headers(admin))
    assert r.status_code == 409

    r = await client.post("/api/sites", json={"name": "Other", "domain": "not a domain"}, headers=auth_headers(admin))
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_update_site_is_superadmin_only(client, db):
    root = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    admin = await create_user(db, "admin@example.com", role=UserRole.ADMIN)
    site = await create_site(db, "Before")
    await create_site(db, "Taken")
    await add_member(db, site.id, admin.id)
    await db.commit()

    r = await client.put(f"/api/sites/{site.id}", json={"name": "After"}, headers=auth_headers(admin))
    assert r.status_code == 403

    r = await client.put(f"/api/sites/{site.id}", json={"name": "Taken"}, headers=auth_headers(root))
    assert r.status_code == 409

    r = await client.put(
        f"/api/sites/{site.id}",
        json={"name": "After", "description": "fresh"},
        headers=auth_headers(root),
    )
    assert r.status_code == 200
    assert r.json()["name"] == "After"
    assert r.json()["description"] == "fresh"


@pytest.mark.asyncio
async def test_members_add_and_remove(client, db):
    root = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    user = await create_user(db, "user@example.com")
    site = await create_site(db)
    await db.commit()
    h = auth_headers(root)

    r = await client.post(f"/api/sites/{site.id}/users", json={"userId": str(user.id)}, headers=h)
    assert r.status_code == 201
    r = await client.post(f"/api/sites/{site.id}/users", json={"userId": str(user.id)}, headers=h)
    assert r.status_code == 409
    r = await client.post(f"/api/sites/{site.id}/users", json={"userId": str(uuid.uuid4())}, headers=h)
    assert r.status_code == 404

    r = await client.get(f"/api/sites/{site.id}", headers=auth_headers(user))
    assert r.status_code == 200

    r = await client.delete(f"/api/sites/{site.id}/users/{user.id}", headers=h)
    assert r.status_code == 200
    r = await client.delete(f"/api/sites/{site.id}/users/{user.id}", headers=h)
    assert r.status_code == 404

    r = await client.get(f"/api/sites/{site.id}", headers=auth_headers(user))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_delete_site_cascades(client, db):
    root = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    user = await create_user(db, "user@example.com")
    site = await create_site(db)
    keep = await create_site(db)
    await add_member(db, site.id, user.id)
    await set_feature(db, site.id, SiteFeatureName.SPONSORS)
    await set_feature(db, site.id, SiteFeatureName.CONTACT_MANAGEMENT)
    await seed_default_contact_form(db, site.id)
    db.add(Page(site_id=site.id, title="Home", slug="home"))
    db.add(Sponsor(site_id=site.id, name="Acme"))
    db.add(Page(site_id=keep.id, title="Home", slug="home"))
    user.current_site_id = site.id
    await db.commit()
    site_id, user_id = site.id, user.id

    r = await client.delete(f"/api/sites/{site_id}", headers=auth_headers(root))
    assert r.status_code == 200

    async def count(model, *where):
        return (await db.execute(select(func.count()).select_from(model).where(*where))).scalar()

    assert await count(Site, Site.id == site_id) == 0
    assert await count(Page, Page.site_id == site_id) == 0
    assert await count(Sponsor, Sponsor.site_id == site_id) == 0
    assert await count(SiteFeature, SiteFeature.site_id == site_id) == 0
    assert await count(SiteMembership, SiteMembership.site_id == site_id) == 0
    assert await count(ContactForm, ContactForm.site_id == site_id) == 0
    assert await count(ContactFormField) == 0
    assert await count(Page, Page.site_id == keep.id) == 1

    pointer = (await db.execute(select(User.current_site_id).where(User.id == user_id))).scalar_one()
    assert pointer is None


@pytest.mark.asyncio
async def test_current_site_pointer(client, db):
    user = await create_user(db, "user@example.com")
    mine = await create_site(db)
    other = await create_site(db)
    await add_member(db, mine.id, user.id)
    await db.commit()
    h = auth_headers(user)

    r = await client.get("/api/users/current-site", headers=h)
    assert r.json() == {"site": None}

    r = await client.put("/api/users/current-site", json={"siteId": str(other.id)}, headers=h)
    assert r.status_code == 403

    r = await client.put("/api/users/current-site", json={"siteId": str(mine.id)}, headers=h)
    assert r.status_code == 200
    r = await client.get("/api/users/current-site", headers=h)
    assert r.json()["site"]["id"] == str(mine.id)


@pytest.mark.asyncio
async def test_superadmin_user_admin(client, db):
    root = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    user = await create_user(db, "user@example.com")
    site = await create_site(db, "Alpha")
    await add_member(db, site.id, user.id)
    await db.commit()
    h = auth_headers(root)

    r = await client.get("/api/users", headers=h)
    assert r.status_code == 200
    by_email = {u["email"]: u for u in r.json()}
    assert [s["name"] for s in by_email["user@example.com"]["sites"]] == ["Alpha"]

    r = await client.get("/api/users", headers=auth_headers(user))
    assert r.status_code == 403

    r = await client.put(f"/api/users/{user.id}", json={"role": "ADMIN"}, headers=h)
    assert r.status_code == 200
    assert r.json()["role"] == "ADMIN"

    r = await client.put(f"/api/users/{root.id}", json={"isActive": False}, headers=h)
    assert r.status_code == 400
