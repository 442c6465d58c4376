# tests/test_job_board.py
from __future__ import annotations

import pytest

from app.core.features import SiteFeatureName
from app.models.company import Company
from app.models.job_listing import JobListing
from tests.factories import add_member, auth_headers, create_site, create_user, set_feature


async def _job_site(db):
    user = await create_user(db, "recruiter@example.com")
    site = await create_site(db)
    await add_member(db, site.id, user.id)
    await set_feature(db, site.id, SiteFeatureName.JOB_BOARD)
    await db.commit()
    return user, site


@pytest.mark.asyncio
async def test_company_crud_and_delete_guard(client, db):
    user, site = await _job_site(db)
    h = auth_headers(user)
    base = f"/api/sites/{site.id}"

    r = await client.post(f"{base}/companies", json={"name": "Initech", "industry": "Software"}, headers=h)
    assert r.status_code == 201, r.text
    company = r.json()
    assert company["jobListingCount"] == 0

    r = await client.post(f"{base}/companies", json={"name": "initech"}, headers=h)
    assert r.status_code == 409

    r = await client.post(
        f"{base}/job-listings",
        json={"companyId": company["id"], "title": "Engineer", "description": "Build", "jobType": "FULL_TIME"},
        headers=h,
    )
    assert r.status_code == 201, r.text
    listing = r.json()
    assert listing["status"] == "ACTIVE"
    assert listing["salaryCurrency"] == "USD"
    assert listing["company"]["name"] == "Initech"

    r = await client.get(f"{base}/companies/{company['id']}", headers=h)
    assert r.json()["jobListingCount"] == 1

    r = await client.delete(f"{base}/companies/{company['id']}", headers=h)
    assert r.status_code == 400

    r = await client.delete(f"{base}/job-listings/{listing['id']}", headers=h)
    assert r.status_code == 200
    r = await client.delete(f"{base}/companies/{company['id']}", headers=h)
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_listing_validation(client, db):
    user, site = await _job_site(db)
    other = await create_site(db)
    foreign = Company(site_id=other.id, name="Elsewhere")
    sleeping = Company(site_id=site.id, name="Sleepy", is_active=False)
    db.add_all([foreign, sleeping])
    await db.commit()
    h = auth_headers(user)
    url = f"/api/sites/{site.id}/job-listings"

    body = {"title": "Dev", "description": "Code", "jobType": "CONTRACT"}

    r = await client.post(url, json={**body, "companyId": str(foreign.id)}, headers=h)
    assert r.status_code == 400

    r = await client.post(url, json={**body, "companyId": str(sleeping.id)}, headers=h)
    assert r.status_code == 400

    active = Company(site_id=site.id, name="Awake")
    db.add(active)
    await db.commit()

    r = await client.post(
        url,
        json={**body, "companyId": str(active.id), "salaryMin": 90000, "salaryMax": 50000},
        headers=h,
    )
    assert r.status_code == 400

    r = await client.post(url, json={**body, "companyId": str(active.id), "jobType": "GIG"}, headers=h)
    assert r.status_code == 400

    r = await client.post(url, json={**body, "companyId": str(active.id), "salaryMin": 50000}, headers=h)
    assert r.status_code == 201
    listing_id = r.json()["id"]

    r = await client.put(f"{url}/{listing_id}", json={"salaryMax": 10000}, headers=h)
    assert r.status_code == 400

    r = await client.put(f"{url}/{listing_id}", json={"status": "FILLED", "salaryMax": 70000}, headers=h)
    assert r.status_code == 200
    assert r.json()["status"] == "FILLED"


@pytest.mark.asyncio
async def test_admin_listing_filters(client, db):
    user, site = await _job_site(db)
    acme = Company(site_id=site.id, name="Acme")
    db.add(acme)
    await db.flush()
    db.add_all(
        [
            JobListing(site_id=site.id, company_id=acme.id, title="Python Dev", description="x", job_type="FULL_TIME"),
            JobListing(site_id=site.id, company_id=acme.id, title="Designer", description="y", job_type="PART_TIME", status="INACTIVE"),
        ]
    )
    await db.commit()
    h = auth_headers(user)
    url = f"/api/sites/{site.id}/job-listings"

    r = await client.get(url, headers=h)
    assert r.json()["pagination"]["total"] == 2

    r = await client.get(url, params={"status": "INACTIVE"}, headers=h)
    assert [j["title"] for j in r.json()["jobListings"]] == ["Designer"]

    r = await client.get(url, params={"search": "python"}, headers=h)
    assert [j["title"] for j in r.json()["jobListings"]] == ["Python Dev"]

    r = await client.get(url, params={"limit": 1, "page": 2}, headers=h)
    body = r.json()
    assert len(body["jobListings"]) == 1
    assert body["pagination"] == {"page": 2, "limit": 1, "total": 2, "pages": 2}


@pytest.mark.asyncio
async def test_public_job_board_shows_visible_listings(client, db):
    site = await create_site(db)
    await set_feature(db, site.id, SiteFeatureName.JOB_BOARD)
    live = Company(site_id=site.id, name="Live Co", location="Nairobi")
    dead = Company(site_id=site.id, name="Dead Co", is_active=False)
    db.add_all([live, dead])
    await db.flush()
    db.add_all(
        [
            JobListing(
                site_id=site.id, company_id=live.id, title="Backend", description="api",
                job_type="FULL_TIME", remote_work_type="REMOTE", location="Nairobi",
                salary_min=40000, salary_max=60000,
            ),
            JobListing(
                site_id=site.id, company_id=live.id, title="Intern", description="learn",
                job_type="INTERNSHIP", remote_work_type="ON_SITE",
            ),
            JobListing(
                site_id=site.id, company_id=live.id, title="Filled", description="gone",
                job_type="FULL_TIME", status="FILLED",
            ),
            JobListing(
                site_id=site.id, company_id=dead.id, title="Ghost", description="boo",
                job_type="FULL_TIME",
            ),
        ]
    )
    await db.commit()
    url = f"/api/public/sites/{site.id}/job-board"

    r = await client.get(url)
    assert r.status_code == 200
    body = r.json()
    assert sorted(j["title"] for j in body["jobListings"]) == ["Backend", "Intern"]
    assert body["filters"]["jobTypes"] == ["FULL_TIME", "INTERNSHIP"]
    assert body["filters"]["remoteWorkTypes"] == ["ON_SITE", "REMOTE"]
    assert [c["name"] for c in body["filters"]["companies"]] == ["Live Co"]
    assert r.headers["cache-control"].startswith("public, max-age=300")

    r = await client.get(url, params={"remoteType": "REMOTE"})
    assert [j["title"] for j in r.json()["jobListings"]] == ["Backend"]

    r = await client.get(url, params={"salaryMin": 50000})
    assert [j["title"] for j in r.json()["jobListings"]] == ["Backend"]

    r = await client.get(url, params={"salaryMax": 30000})
    assert r.json()["jobListings"] == []

    r = await client.get(url, params={"company": str(dead.id)})
    assert r.json()["jobListings"] == []


@pytest.mark.asyncio
async def test_blank_company_name_and_title_rejected(client, db):
    user, site = await _job_site(db)
    h = auth_headers(user)
    base = f"/api/sites/{site.id}"

    r = await client.post(f"{base}/companies", json={"name": "   "}, headers=h)
    assert r.status_code == 400

    r = await client.post(f"{base}/companies", json={"name": "  Globex   Corp "}, headers=h)
    assert r.status_code == 201
    company = r.json()
    assert company["name"] == "Globex Corp"

    r = await client.put(f"{base}/companies/{company['id']}", json={"name": "\t"}, headers=h)
    assert r.status_code == 400

    r = await client.post(
        f"{base}/job-listings",
        json={"companyId": company["id"], "title": "  ", "description": "Build", "jobType": "FULL_TIME"},
        headers=h,
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_search_treats_like_wildcards_literally(client, db):
    _, site = await _job_site(db)
    acme = Company(site_id=site.id, name="Acme")
    db.add(acme)
    await db.flush()
    db.add_all(
        [
            JobListing(
                site_id=site.id, company_id=acme.id, title="100% remote engineer", description="api",
                job_type="FULL_TIME", location="Nairobi",
            ),
            JobListing(
                site_id=site.id, company_id=acme.id, title="Data_analyst", description="sql",
                job_type="FULL_TIME", location="Mombasa",
            ),
        ]
    )
    await db.commit()
    url = f"/api/public/sites/{site.id}/job-board"

    r = await client.get(url, params={"search": "%"})
    assert [j["title"] for j in r.json()["jobListings"]] == ["100% remote engineer"]

    r = await client.get(url, params={"search": "_"})
    assert [j["title"] for j in r.json()["jobListings"]] == ["Data_analyst"]

    r = await client.get(url, params={"location": "%"})
    assert r.json()["jobListings"] == []
