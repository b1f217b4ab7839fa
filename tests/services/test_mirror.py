import asyncio
import json
import logging
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from confession_wall.core.errors import MirrorError
from confession_wall.main import create_app
from confession_wall.services.mirror import (
    MirrorConfig,
    MirrorDispatcher,
    MirrorSink,
    NullMirror,
    SupabaseMirror,
    build_mirror,
)


@pytest.fixture
def mirror_config():
    return MirrorConfig(
        base_url="https://example.supabase.co/",
        api_key="anon-key",
        table="confessions",
        timeout_seconds=1.0,
    )


@pytest.fixture
def mock_sink():
    sink = AsyncMock(spec=SupabaseMirror)
    sink.enabled = True
    return sink


def test_build_mirror_without_credentials_is_noop(test_settings):
    mirror = build_mirror(test_settings)
    assert isinstance(mirror, NullMirror)
    assert isinstance(mirror, MirrorSink)
    assert MirrorDispatcher(mirror, 1.0).enabled is False


def test_build_mirror_with_credentials(test_settings):
    configured = test_settings.model_copy(
        update={"supabase_url": "https://example.supabase.co", "supabase_anon_key": "key"}
    )
    mirror = build_mirror(configured)
    assert isinstance(mirror, SupabaseMirror)
    assert mirror.enabled is True


@pytest.mark.asyncio
async def test_supabase_insert_and_update(mirror_config):
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201 if request.method == "POST" else 204)

    mirror = SupabaseMirror(mirror_config, transport=httpx.MockTransport(handler))
    await mirror.insert_confession("my secret")
    await mirror.update_like_count("my secret", 4)
    await mirror.aclose()

    insert, update = requests
    assert insert.method == "POST"
    assert insert.url.path == "/rest/v1/confessions"
    assert insert.headers["apikey"] == "anon-key"
    assert insert.headers["Authorization"] == "Bearer anon-key"
    assert json.loads(insert.content) == [{"confession": "my secret", "like": 0}]

    assert update.method == "PATCH"
    assert update.url.params["confession"] == "eq.my secret"
    assert json.loads(update.content) == {"like": 4}


@pytest.mark.asyncio
async def test_supabase_rejection_raises_mirror_error(mirror_config):
    transport = httpx.MockTransport(lambda request: httpx.Response(401, text="bad key"))
    mirror = SupabaseMirror(mirror_config, transport=transport)
    with pytest.raises(MirrorError, match="401"):
        await mirror.insert_confession("x")
    await mirror.aclose()


@pytest.mark.asyncio
async def test_supabase_network_error_raises_mirror_error(mirror_config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    mirror = SupabaseMirror(mirror_config, transport=httpx.MockTransport(handler))
    with pytest.raises(MirrorError, match="request failed"):
        await mirror.update_like_count("x", 1)
    await mirror.aclose()


@pytest.mark.asyncio
async def test_dispatcher_forwards_events(mock_sink):
    dispatcher = MirrorDispatcher(mock_sink, timeout_seconds=1.0)

    assert await dispatcher.confession_created("hello") is True
    assert await dispatcher.likes_updated("hello", 2) is True

    mock_sink.insert_confession.assert_awaited_once_with("hello", 0)
    mock_sink.update_like_count.assert_awaited_once_with("hello", 2)


@pytest.mark.asyncio
async def test_dispatcher_skips_disabled_sink():
    sink = AsyncMock(spec=SupabaseMirror)
    sink.enabled = False
    dispatcher = MirrorDispatcher(sink, timeout_seconds=1.0)

    assert await dispatcher.confession_created("hello") is False
    sink.insert_confession.assert_not_awaited()


@pytest.mark.asyncio
async def test_dispatcher_logs_failures(mock_sink, caplog):
    mock_sink.insert_confession.side_effect = MirrorError("Supabase responded with 500")
    dispatcher = MirrorDispatcher(mock_sink, timeout_seconds=1.0)

    with caplog.at_level(logging.WARNING, logger="confession_wall.services.mirror"):
        assert await dispatcher.confession_created("hello") is False

    records = [r for r in caplog.records if "Mirror sync failed" in r.getMessage()]
    assert len(records) == 1
    assert "confession_created" in records[0].getMessage()


@pytest.mark.asyncio
async def test_dispatcher_times_out_slow_calls(mock_sink, caplog):
    async def hang(*_args, **_kwargs):
        await asyncio.sleep(10)

    mock_sink.update_like_count.side_effect = hang
    dispatcher = MirrorDispatcher(mock_sink, timeout_seconds=0.05)

    with caplog.at_level(logging.WARNING, logger="confession_wall.services.mirror"):
        assert await dispatcher.likes_updated("hello", 1) is False
    assert any("timeout" in r.getMessage() for r in caplog.records)


def test_api_mirrors_creation_and_likes(test_settings, engine, mock_sink):
    app = create_app(test_settings, engine=engine, mirror=mock_sink)
    with TestClient(app) as client:
        confession_id = client.post(
            "/api/confessions",
            json={"content": "  mirrored  ", "category": "love"},
        ).json()["id"]
        client.post(f"/api/confessions/{confession_id}/like")
        client.post(f"/api/confessions/{confession_id}/like")

    mock_sink.insert_confession.assert_awaited_once_with("mirrored", 0)
    assert [c.args for c in mock_sink.update_like_count.await_args_list] == [
        ("mirrored", 1),
        ("mirrored", 2),
    ]


def test_api_ignores_mirror_failures(test_settings, engine, mock_sink):
    mock_sink.insert_confession.side_effect = MirrorError("down")
    mock_sink.update_like_count.side_effect = httpx.ConnectError("down")
    app = create_app(test_settings, engine=engine, mirror=mock_sink)

    with TestClient(app) as client:
        created = client.post("/api/confessions", json={"content": "hi", "category": "love"})
        assert created.status_code == 200
        liked = client.post(f"/api/confessions/{created.json()['id']}/like")
        assert liked.json() == {"success": True}
