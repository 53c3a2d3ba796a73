"""Pending-notification stores — in-memory list or Redis list.

Both stores are unkeyed: every speaker drains the same queue.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod

import redis.asyncio as redis
from redis.exceptions import RedisError

from webhook_speaker.models import Notification

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100


class NotificationStore(ABC):
    backend = "abstract"

    @abstractmethod
    async def enqueue(self, notification: Notification) -> None:
        """Append, then keep only the most recent max_size records."""

    @abstractmethod
    async def drain(self) -> list[Notification]:
        """Return every queued record and empty the queue."""


class MemoryNotificationStore(NotificationStore):
    """Process-local bounded list. Lost on restart."""

    backend = "memory"

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self.max_size = max_size
        self._pending: list[Notification] = []

    async def enqueue(self, notification: Notification) -> None:
        self._pending.append(notification)
        if len(self._pending) > self.max_size:
            self._pending = self._pending[-self.max_size:]

    async def drain(self) -> list[Notification]:
        batch, self._pending = self._pending, []
        return batch

    def __len__(self) -> int:
        return len(self._pending)


class RedisNotificationStore(NotificationStore):
    """Redis list queue. Falls back to an in-memory store while Redis is unreachable."""

    backend = "redis"

    def __init__(
        self,
        redis_url: str | None = None,
        key: str = "webhook_speaker:notifications",
        max_size: int = DEFAULT_MAX_SIZE,
        client: redis.Redis | None = None,
    ) -> None:
        self.key = key
        self.max_size = max_size
        self._redis = client if client is not None else redis.from_url(redis_url)
        self._mem = MemoryNotificationStore(max_size)

    async def ping(self) -> bool:
        try:
            await self._redis.ping()
            return True
        except RedisError:
            return False

    async def enqueue(self, notification: Notification) -> None:
        payload = json.dumps(notification.to_dict())
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.rpush(self.key, payload)
                pipe.ltrim(self.key, -self.max_size, -1)
                await pipe.execute()
            return
        except RedisError as e:
            logger.warning("Redis enqueue failed, using memory fallback: %s", e)
        await self._mem.enqueue(notification)

    async def drain(self) -> list[Notification]:
        batch: list[Notification] = []
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.lrange(self.key, 0, -1)
                pipe.delete(self.key)
                raw, _ = await pipe.execute()
            batch = self._decode(raw)
        except RedisError as e:
            logger.warning("Redis drain failed, returning memory fallback only: %s", e)
        # Redis and fallback are each bounded; the combined batch must be too
        return (batch + await self._mem.drain())[-self.max_size:]

    def _decode(self, raw: list[bytes]) -> list[Notification]:
        batch = []
        for item in raw:
            try:
                batch.append(Notification.from_dict(json.loads(item)))
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Dropping undecodable queue item %r: %s", item[:200], e)
        return batch

    async def aclose(self) -> None:
        await self._redis.aclose()


def build_store(redis_url: str | None, key: str, max_size: int = DEFAULT_MAX_SIZE) -> NotificationStore:
    if redis_url:
        try:
            return RedisNotificationStore(redis_url, key=key, max_size=max_size)
        except (RedisError, ValueError) as e:
            logger.warning("Invalid REDIS_URL, using in-memory queue: %s", e)
    return MemoryNotificationStore(max_size)
