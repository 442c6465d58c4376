# tests/test_sign_in.py
from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import select

from app.core.roles import UserRole
from app.crud.invite import consume_invite
from app.models.user import User
from tests.factories import create_invite, create_user, make_assertion, utcnow


@pytest.mark.asyncio
async def test_invite_admits_new_user_once(client, db):
    admin = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    inv = await create_invite(db, admin, "Newbie@Example.com", role=UserRole.ADMIN)
    await db.commit()

    r = await client.post(
        "/api/auth/signin",
        json={"assertion": make_assertion("newbie@example.com", name="  New   Bie ")},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["accessToken"]
    assert body["user"]["email"] == "newbie@example.com"
    assert body["user"]["role"] == "ADMIN"

    await db.refresh(inv)
    assert inv.is_used is True
    assert inv.used_at is not None

    user = (await db.execute(select(User).where(User.email == "newbie@example.com"))).scalar_one()
    assert user.is_invited is True
    assert user.invited_by == admin.id
    assert user.name == "New Bie"

    # second sign-in goes through the existing-user path
    r = await client.post("/api/auth/signin", json={"assertion": make_assertion("newbie@example.com")})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_unknown_email_is_denied(client):
    r = await client.post("/api/auth/signin", json={"assertion": make_assertion("stranger@example.com")})
    assert r.status_code == 403
    assert r.json() == {"error": "Access denied: no valid invite"}


@pytest.mark.asyncio
async def test_expired_invite_is_denied(client, db):
    admin = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    await create_invite(db, admin, "late@example.com", expires_in=timedelta(minutes=-1))
    await db.commit()

    r = await client.post("/api/auth/signin", json={"assertion": make_assertion("late@example.com")})
    assert r.status_code == 403

    found = (await db.execute(select(User).where(User.email == "late@example.com"))).scalar_one_or_none()
    assert found is None


@pytest.mark.asyncio
async def test_used_invite_is_denied(client, db):
    admin = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    await create_invite(db, admin, "again@example.com", is_used=True)
    await db.commit()

    r = await client.post("/api/auth/signin", json={"assertion": make_assertion("again@example.com")})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_consume_invite_is_single_shot(db):
    admin = await create_user(db, "root@example.com", role=UserRole.SUPERADMIN)
    inv = await create_invite(db, admin, "race@example.com")
    await db.commit()

    now = utcnow()
    assert await consume_invite(db, inv.id, now) is True
    assert await consume_invite(db, inv.id, now) is False
    await db.commit()


@pytest.mark.asyncio
async def test_forged_assertion_is_rejected(client):
    forged = make_assertion("root@example.com", secret="x" * 40)
    r = await client.post("/api/auth/signin", json={"assertion": forged})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_wrong_audience_is_rejected(client):
    r = await client.post(
        "/api/auth/signin",
        json={"assertion": make_assertion("root@example.com", audience="someone-else")},
    )
    assert r.status_code == 401
