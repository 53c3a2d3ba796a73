"""Notification store tests: in-memory queue and Redis queue with fallback."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from webhook_speaker.models import Notification, NotificationData
from webhook_speaker.store import MemoryNotificationStore, RedisNotificationStore, build_store


def _n(i: int) -> Notification:
    return Notification(sound="ding.mp3", message=f"n{i}", event_type="lead",
                        data=NotificationData(amount="1.00", raw_event="lead"))


# ── Memory ──

@pytest.mark.asyncio
async def test_memory_enqueue_and_drain():
    store = MemoryNotificationStore()
    await store.enqueue(_n(1))
    await store.enqueue(_n(2))
    assert len(store) == 2
    batch = await store.drain()
    assert [n.message for n in batch] == ["n1", "n2"]
    assert len(store) == 0
    assert await store.drain() == []


@pytest.mark.asyncio
async def test_memory_bound_keeps_tail():
    store = MemoryNotificationStore()
    for i in range(105):
        await store.enqueue(_n(i))
    batch = await store.drain()
    assert len(batch) == 100
    assert batch[0].message == "n5"
    assert batch[-1].message == "n104"


@pytest.mark.asyncio
async def test_memory_drain_returns_snapshot():
    store = MemoryNotificationStore()
    await store.enqueue(_n(1))
    batch = await store.drain()
    await store.enqueue(_n(2))
    assert [n.message for n in batch] == ["n1"]


# ── Redis ──

def _redis_client(execute):
    pipe = MagicMock()
    pipe.__aenter__.return_value = pipe
    pipe.__aexit__.return_value = False
    pipe.execute = execute
    client = MagicMock()
    client.pipeline.return_value = pipe
    client.ping = AsyncMock(return_value=True)
    return client, pipe


@pytest.mark.asyncio
async def test_redis_enqueue_trims():
    client, pipe = _redis_client(AsyncMock(return_value=[1, True]))
    store = RedisNotificationStore(client=client, key="q", max_size=100)
    n = _n(1)
    await store.enqueue(n)
    pipe.rpush.assert_called_once_with("q", json.dumps(n.to_dict()))
    pipe.ltrim.assert_called_once_with("q", -100, -1)
    client.pipeline.assert_called_with(transaction=True)


@pytest.mark.asyncio
async def test_redis_drain_decodes():
    n1, n2 = _n(1), _n(2)
    raw = [json.dumps(n1.to_dict()).encode(), json.dumps(n2.to_dict()).encode()]
    client, pipe = _redis_client(AsyncMock(return_value=[raw, 1]))
    store = RedisNotificationStore(client=client, key="q")
    batch = await store.drain()
    assert batch == [n1, n2]
    pipe.lrange.assert_called_once_with("q", 0, -1)
    pipe.delete.assert_called_once_with("q")


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_memory():
    client, _ = _redis_client(AsyncMock(side_effect=RedisConnectionError("down")))
    store = RedisNotificationStore(client=client)
    await store.enqueue(_n(1))
    batch = await store.drain()
    assert [n.message for n in batch] == ["n1"]
    assert await store.drain() == []


@pytest.mark.asyncio
async def test_redis_ping():
    client, _ = _redis_client(AsyncMock())
    store = RedisNotificationStore(client=client)
    assert await store.ping()
    client.ping = AsyncMock(side_effect=RedisConnectionError("down"))
    assert not await store.ping()


def test_build_store():
    assert isinstance(build_store(None, key="q"), MemoryNotificationStore)
    store = build_store("redis://localhost:6379/0", key="q", max_size=5)
    assert isinstance(store, RedisNotificationStore)
    assert store.max_size == 5
    assert isinstance(build_store("not-a-url", key="q"), MemoryNotificationStore)


def test_notification_roundtrip_dict():
    n = _n(7)
    assert Notification.from_dict(n.to_dict()) == n


@pytest.mark.asyncio
async def test_redis_drain_bounds_combined_batch():
    down = AsyncMock(side_effect=RedisConnectionError("down"))
    client, pipe = _redis_client(down)
    store = RedisNotificationStore(client=client, max_size=100)
    for i in range(100):
        await store.enqueue(_n(i))

    recovered = [json.dumps(_n(100 + i).to_dict()).encode() for i in range(100)]
    pipe.execute = AsyncMock(return_value=[recovered, 1])
    batch = await store.drain()
    assert len(batch) == 100
    assert batch[0].message == "n0"
    assert batch[-1].message == "n99"


@pytest.mark.asyncio
async def test_redis_drain_skips_undecodable_items():
    good = _n(1)
    raw = [b"not json", json.dumps({"id": "x"}).encode(), json.dumps(good.to_dict()).encode()]
    client, _ = _redis_client(AsyncMock(return_value=[raw, 1]))
    store = RedisNotificationStore(client=client)
    assert await store.drain() == [good]
