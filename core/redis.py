"""
Centralized Redis connection configuration and shared client.

This module provides a single source of truth for Redis URL
construction and a shared async Redis client singleton used by the
session route cache and the route resolver cache.
"""

from __future__ import annotations

import logging
import os
from typing import Final

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL: Final[str] = "redis://redis:6379"
REDIS_URL_ENV_VAR: Final[str] = "REDIS_URL"


class _RedisState:
    client: aioredis.Redis | None = None


def get_redis_url() -> str:
    """
    Get the Redis URL.

    Returns:
        str: Redis URL suitable for connection (e.g., "redis://redis:6379")
    """
    redis_url = os.getenv(REDIS_URL_ENV_VAR, "").strip()
    if redis_url:
        return redis_url
    return DEFAULT_REDIS_URL


async def get_shared_redis() -> aioredis.Redis:
    """
    Return a process-wide shared async Redis client.

    The client is lazily created on first call and reused. Connection
    health is verified via ``ping()``; a lost connection is
    automatically re-established.
    """
    if _RedisState.client is not None:
        try:
            await _RedisState.client.ping()
        except (RedisConnectionError, AttributeError, OSError):
            logger.warning("Shared Redis connection lost, reconnecting...")
            _RedisState.client = None
        else:
            return _RedisState.client

    # redis.asyncio.from_url returns a client instance (not awaitable).
    client = aioredis.from_url(
        get_redis_url(),
        decode_responses=True,
        socket_connect_timeout=2,
    )
    await client.ping()
    _RedisState.client = client
    logger.info("Shared Redis client connected")
    return client


async def close_shared_redis() -> None:
    """Close the shared Redis client (call during app shutdown)."""
    if _RedisState.client is not None:
        await _RedisState.client.aclose()
        _RedisState.client = None
        logger.info("Shared Redis client closed")
