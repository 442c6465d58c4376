# tests/test_social_media.py
from __future__ import annotations

from datetime import timedelta

import httpx
import pytest
from sqlalchemy import select

from app.core.features import SiteFeatureName
from app.core.errors import UpstreamError
from app.models.social_media import SocialMediaChannel, SocialMediaChannelStat
from app.services.social_stats import format_number, is_stale, refresh_stale_stats
from app.services.youtube import YouTubeClient, get_youtube_client
from tests.factories import add_member, auth_headers, create_site, create_user, set_feature, utcnow

CHANNEL_ID = "UC_test_channel"


def _youtube_payload(subscribers="12345", videos="42", views="2500000"):
    return {
        "items": [
            {
                "id": CHANNEL_ID,
                "snippet": {
                    "title": "Test Channel",
                    "thumbnails": {"default": {"url": "https://img.example.com/t.jpg"}},
                },
                "statistics": {"subscriberCount": subscribers, "videoCount": videos, "viewCount": views},
            }
        ]
    }


class Recorder:
    """MockTransport handler that counts upstream calls."""

    def __init__(self, status_code=200, payload=None):
        self.calls = 0
        self.status_code = status_code
        self.payload = payload if payload is not None else _youtube_payload()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        assert request.url.path.endswith("/channels")
        assert request.url.params["key"] == "test-key"
        return httpx.Response(self.status_code, json=self.payload)


def _client(handler) -> YouTubeClient:
    return YouTubeClient("test-key", base_url="https://yt.test/v3", transport=httpx.MockTransport(handler))


@pytest.mark.parametrize(
    "raw,expected",
    [("999", "999"), ("1000", "1.0K"), ("12345", "12.3K"), ("2500000", "2.5M"), (None, "0"), ("n/a", "n/a")],
)
def test_format_number(raw, expected):
    assert format_number(raw) == expected


def test_staleness_boundary():
    now = utcnow()
    fresh = SocialMediaChannelStat(stat_type="VIEWS", value="1", last_updated=now - timedelta(minutes=9))
    stale = SocialMediaChannelStat(stat_type="VIEWS", value="1", last_updated=now - timedelta(minutes=11))
    never = SocialMediaChannelStat(stat_type="VIEWS", value="1", last_updated=None)
    assert not is_stale(fresh, now)
    assert is_stale(stale, now)
    assert is_stale(never, now)


@pytest.mark.asyncio
async def test_youtube_client_maps_errors():
    missing = _client(Recorder(payload={"items": []}))
    assert await missing.get_channel_stats(CHANNEL_ID) is None

    broken = _client(Recorder(status_code=500, payload={"error": "boom"}))
    with pytest.raises(UpstreamError):
        await broken.get_channel_stats(CHANNEL_ID)

    with pytest.raises(UpstreamError):
        await YouTubeClient(None).get_channel_stats(CHANNEL_ID)


async def _channel_with_stats(db, *, age: timedelta | None):
    site = await create_site(db)
    channel = SocialMediaChannel(
        site_id=site.id,
        platform="YOUTUBE",
        channel_id=CHANNEL_ID,
        channel_name="Test Channel",
        channel_url="https://www.youtube.com/channel/x",
    )
    db.add(channel)
    await db.flush()
    last = None if age is None else utcnow() - age
    stats = [
        SocialMediaChannelStat(channel_id=channel.id, stat_type=t, value="1", last_updated=last)
        for t in ("SUBSCRIBERS", "VIDEOS", "VIEWS")
    ]
    db.add_all(stats)
    await db.flush()
    return site, channel, stats


@pytest.mark.asyncio
async def test_refresh_updates_stale_stats_with_one_call(db):
    _, channel, stats = await _channel_with_stats(db, age=timedelta(minutes=30))
    handler = Recorder()

    updated = await refresh_stale_stats(db, channel, stats, _client(handler))

    assert updated == 3
    assert handler.calls == 1
    assert {s.stat_type: s.value for s in stats} == {
        "SUBSCRIBERS": "12345",
        "VIDEOS": "42",
        "VIEWS": "2500000",
    }


@pytest.mark.asyncio
async def test_fresh_stats_skip_upstream(db):
    _, channel, stats = await _channel_with_stats(db, age=timedelta(minutes=1))
    handler = Recorder()

    assert await refresh_stale_stats(db, channel, stats, _client(handler)) == 0
    assert handler.calls == 0


@pytest.mark.asyncio
async def test_upstream_failure_keeps_cached_values(db):
    _, channel, stats = await _channel_with_stats(db, age=None)
    handler = Recorder(status_code=503, payload={"error": "down"})

    assert await refresh_stale_stats(db, channel, stats, _client(handler)) == 0
    assert handler.calls == 1
    assert all(s.value == "1" and s.last_updated is None for s in stats)


@pytest.mark.asyncio
async def test_public_social_media_refreshes_and_formats(app, client, db):
    site, channel, _ = await _channel_with_stats(db, age=timedelta(hours=1))
    await set_feature(db, site.id, SiteFeatureName.SOCIAL_MEDIA_INTEGRATION)
    await db.commit()

    handler = Recorder()
    app.dependency_overrides[get_youtube_client] = lambda: _client(handler)

    r = await client.get(f"/api/public/sites/{site.id}/social-media")
    assert r.status_code == 200
    [item] = r.json()
    assert item["stats"]["SUBSCRIBERS"]["value"] == "12345"
    assert item["stats"]["SUBSCRIBERS"]["displayValue"] == "12.3K"
    assert item["stats"]["VIEWS"]["displayValue"] == "2.5M"
    assert handler.calls == 1

    # now fresh: served from the cache
    r = await client.get(f"/api/public/sites/{site.id}/social-media")
    assert r.status_code == 200
    assert handler.calls == 1


@pytest.mark.asyncio
async def test_public_social_media_serves_stale_on_failure(app, client, db):
    site, _, _ = await _channel_with_stats(db, age=timedelta(hours=1))
    await set_feature(db, site.id, SiteFeatureName.SOCIAL_MEDIA_INTEGRATION)
    await db.commit()

    app.dependency_overrides[get_youtube_client] = lambda: _client(Recorder(status_code=500, payload={}))

    r = await client.get(f"/api/public/sites/{site.id}/social-media")
    assert r.status_code == 200
    assert r.json()[0]["stats"]["VIDEOS"]["value"] == "1"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"items": [{"statistics": {}}]}, ["not", "an", "object"]])
async def test_public_social_media_serves_stale_on_malformed_body(app, client, db, payload):
    site, _, _ = await _channel_with_stats(db, age=timedelta(hours=1))
    await set_feature(db, site.id, SiteFeatureName.SOCIAL_MEDIA_INTEGRATION)
    await db.commit()

    app.dependency_overrides[get_youtube_client] = lambda: _client(Recorder(payload=payload))

    r = await client.get(f"/api/public/sites/{site.id}/social-media")
    assert r.status_code == 200
    assert r.json()[0]["stats"]["SUBSCRIBERS"]["value"] == "1"


@pytest.mark.asyncio
async def test_client_rejects_malformed_channel():
    with pytest.raises(UpstreamError):
        await _client(Recorder(payload={"items": [{"snippet": {}}]})).get_channel_stats(CHANNEL_ID)
    with pytest.raises(UpstreamError):
        await _client(Recorder(payload=[1, 2, 3])).get_channel_stats(CHANNEL_ID)


@pytest.mark.asyncio
async def test_create_youtube_channel(app, client, db):
    user = await create_user(db, "social@example.com")
    site = await create_site(db)
    await add_member(db, site.id, user.id)
    await set_feature(db, site.id, SiteFeatureName.SOCIAL_MEDIA_INTEGRATION)
    await db.commit()
    h = auth_headers(user)
    url = f"/api/sites/{site.id}/social-media"

    # default override: no API key configured
    r = await client.post(url, json={"platform": "YOUTUBE", "channelId": CHANNEL_ID}, headers=h)
    assert r.status_code == 400

    app.dependency_overrides[get_youtube_client] = lambda: _client(Recorder(payload={"items": []}))
    r = await client.post(url, json={"platform": "YOUTUBE", "channelId": CHANNEL_ID}, headers=h)
    assert r.status_code == 400
    assert r.json()["error"] == "YouTube channel not found"

    app.dependency_overrides[get_youtube_client] = lambda: _client(Recorder())
    r = await client.post(url, json={"platform": "YOUTUBE", "channelId": CHANNEL_ID}, headers=h)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["channelName"] == "Test Channel"
    assert body["thumbnailUrl"] == "https://img.example.com/t.jpg"
    assert {s["statType"]: s["value"] for s in body["stats"]} == {
        "SUBSCRIBERS": "12345",
        "VIDEOS": "42",
        "VIEWS": "2500000",
    }

    r = await client.post(url, json={"platform": "YOUTUBE", "channelId": CHANNEL_ID}, headers=h)
    assert r.status_code == 409

    app.dependency_overrides[get_youtube_client] = lambda: _client(Recorder(status_code=500, payload={}))
    r = await client.post(url, json={"platform": "YOUTUBE", "channelId": "UC_other"}, headers=h)
    assert r.status_code == 500


@pytest.mark.asyncio
async def test_manual_channel_update_and_delete(client, db):
    user = await create_user(db, "social@example.com")
    site = await create_site(db)
    await add_member(db, site.id, user.id)
    await set_feature(db, site.id, SiteFeatureName.SOCIAL_MEDIA_INTEGRATION)
    await db.commit()
    h = auth_headers(user)
    url = f"/api/sites/{site.id}/social-media"

    r = await client.post(url, json={"platform": "INSTAGRAM", "channelId": "insta"}, headers=h)
    assert r.status_code == 400

    r = await client.post(
        url,
        json={"platform": "INSTAGRAM", "channelId": "insta", "channelName": "Insta", "channelUrl": "https://i.example.com"},
        headers=h,
    )
    assert r.status_code == 201
    channel = r.json()

    r = await client.put(
        f"{url}/{channel['id']}",
        json={"isActive": False, "stats": [{"statType": "FOLLOWERS", "value": "900"}]},
        headers=h,
    )
    assert r.status_code == 200
    stats = {s["statType"]: s["value"] for s in r.json()["stats"]}
    assert stats["FOLLOWERS"] == "900"
    assert r.json()["isActive"] is False

    r = await client.delete(f"{url}/{channel['id']}", headers=h)
    assert r.status_code == 200
    remaining = (await db.execute(select(SocialMediaChannelStat))).scalars().all()
    assert remaining == []
