"""
Redis-backed key/value store with millisecond expiry.

Both durable cache tiers (the per-session route cache and the route
resolver cache) sit on this class; each uses its own key prefix.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from core.exceptions import StorageUnavailableError
from core.redis import get_shared_redis

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], Awaitable[aioredis.Redis]]


class RedisKeyValueStore:
    """
    Single-key get/set over Redis, no transactions.

    Concurrent writers to one key race and the last write wins. Redis and
    connection failures are raised as :class:`StorageUnavailableError`; the
    caller decides whether the tier is best-effort.
    """

    def __init__(
        self,
        prefix: str,
        *,
        default_ttl_ms: int | None = None,
        client_factory: ClientFactory = get_shared_redis,
    ) -> None:
        self._prefix = prefix
        self._default_ttl_ms = default_ttl_ms
        self._client_factory = client_factory

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        try:
            client = await self._client_factory()
            value = await client.get(self._key(key))
        except (RedisError, OSError) as e:
            msg = f"Redis read failed: {e}"
            raise StorageUnavailableError(msg, {"key": self._key(key)}) from e
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    async def set(self, key: str, value: str, *, ttl_ms: int | None = None) -> None:
        expiry = ttl_ms if ttl_ms is not None else self._default_ttl_ms
        try:
            client = await self._client_factory()
            if expiry is not None:
                await client.set(self._key(key), value, px=int(expiry))
            else:
                await client.set(self._key(key), value)
        except (RedisError, OSError) as e:
            msg = f"Redis write failed: {e}"
            raise StorageUnavailableError(msg, {"key": self._key(key)}) from e

    async def delete(self, key: str) -> None:
        try:
            client = await self._client_factory()
            await client.delete(self._key(key))
        except (RedisError, OSError) as e:
            msg = f"Redis delete failed: {e}"
            raise StorageUnavailableError(msg, {"key": self._key(key)}) from e
