# tests/test_session.py
from __future__ import annotations

from datetime import timedelta

import pytest

from app.core.errors import Unauthenticated
from app.core.roles import UserRole
from app.core.security import (
    create_session_token,
    decode_session_token,
    is_session_expired,
    refresh_session_token,
)
from tests.factories import auth_headers, create_user, utcnow


def _hours_ago(hours: int) -> int:
    return int((utcnow() - timedelta(hours=hours)).timestamp())


def test_window_is_absolute_from_auth_time():
    now = utcnow()
    assert not is_session_expired(_hours_ago(47), now)
    assert is_session_expired(_hours_ago(49), now)


def test_refresh_keeps_auth_time_and_flags_expiry():
    token = create_session_token(user_id="u1", role="USER", is_active=True, auth_time=_hours_ago(49))
    claims = decode_session_token(token)
    assert claims.is_expired is False

    new_token, refreshed = refresh_session_token(claims, role="ADMIN", is_active=True)
    assert refreshed.auth_time == claims.auth_time
    assert refreshed.is_expired is True
    assert refreshed.role == "ADMIN"
    assert decode_session_token(new_token).is_expired is True


def test_refresh_inside_window_stays_valid():
    token = create_session_token(user_id="u1", role="USER", is_active=True, auth_time=_hours_ago(1))
    _, refreshed = refresh_session_token(decode_session_token(token), role="USER", is_active=True)
    assert refreshed.is_expired is False


@pytest.mark.parametrize("bad", ["", "not-a-jwt", "Bearer ", None])
def test_decode_rejects_garbage(bad):
    with pytest.raises(Unauthenticated):
        decode_session_token(bad)


def test_decode_tolerates_bearer_prefix_and_quotes():
    token = create_session_token(user_id="u1", role="USER", is_active=True)
    assert decode_session_token(f'"Bearer {token}"').user_id == "u1"


@pytest.mark.asyncio
async def test_gate_accepts_47h_and_rejects_49h(client, db):
    user = await create_user(db, "window@example.com")
    await db.commit()

    r = await client.get("/api/auth/session", headers=auth_headers(user, auth_time=_hours_ago(47)))
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "window@example.com"

    r = await client.get("/api/auth/session", headers=auth_headers(user, auth_time=_hours_ago(49)))
    assert r.status_code == 401
    assert r.json() == {"error": "Session expired"}


@pytest.mark.asyncio
async def test_gate_requires_a_token(client):
    r = await client.get("/api/sites")
    assert r.status_code == 401
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_gate_rejects_inactive_user(client, db):
    user = await create_user(db, "off@example.com", is_active=False)
    await db.commit()

    r = await client.get("/api/sites", headers=auth_headers(user))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_refresh_endpoint_reports_expiry_and_picks_up_role(client, db):
    user = await create_user(db, "promoted@example.com", role=UserRole.USER)
    await db.commit()
    old = auth_headers(user, auth_time=_hours_ago(49))

    user.role = UserRole.ADMIN.value
    await db.commit()

    r = await client.post("/api/auth/refresh", headers=old)
    assert r.status_code == 200
    body = r.json()
    assert body["isExpired"] is True
    assert body["user"]["role"] == "ADMIN"

    r = await client.get("/api/auth/session", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert r.status_code == 401
