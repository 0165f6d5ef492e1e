"""
Durable cache for resolved routes.

Entries carry their own ``cachedAt`` stamp and expire 24 hours after it.
Redis expiry enforces the same TTL, but the stamp is checked on read as well
so a store without expiry never serves a stale route.
"""

from __future__ import annotations

import hashlib
import logging
import re
import time
from collections.abc import Callable, Sequence

from pydantic import ValidationError as PydanticValidationError

from config import EDGE_CACHE_TTL_SECONDS
from core.exceptions import StorageUnavailableError
from core.kv_store import RedisKeyValueStore
from core.mapping.interfaces import KeyValueStore
from route_resolver.models import RouteResponse

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "bustrack:"
_SLUG_RE = re.compile(r"[^a-z0-9|]")
_SLUG_LENGTH = 80
_DIGEST_LENGTH = 16


def make_edge_cache_key(stops: Sequence[str]) -> str:
    """
    Key for an ordered stop list.

    The slug keeps keys readable in redis-cli; the digest covers the full
    list so long routes sharing a prefix never collide.
    """
    joined = "|".join(stops)
    slug = _SLUG_RE.sub("_", joined.lower())[:_SLUG_LENGTH]
    digest = hashlib.sha256(joined.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
    return f"route:{slug}:{digest}"


class EdgeRouteCache:
    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        ttl_seconds: int = EDGE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store if store is not None else RedisKeyValueStore(CACHE_KEY_PREFIX)
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    async def get(self, key: str) -> RouteResponse | None:
        """Return a live entry, or None on miss, expiry, corruption or store failure."""
        try:
            raw = await self._store.get(key)
        except StorageUnavailableError:
            logger.warning("Route cache read failed for %s", key, exc_info=True)
            return None
        if raw is None:
            return None

        try:
            entry = RouteResponse.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Ignoring corrupt route cache entry %s", key)
            return None

        age = self._clock() - entry.cached_at.timestamp()
        if age >= self._ttl_seconds:
            logger.debug("Route cache entry %s expired %.0fs ago", key, age - self._ttl_seconds)
            return None
        return entry

    async def set(self, key: str, entry: RouteResponse) -> None:
        """Store ``entry`` with the cache TTL; failures are logged and ignored."""
        try:
            await self._store.set(
                key, entry.to_cache_json(), ttl_ms=self._ttl_seconds * 1000
            )
        except StorageUnavailableError:
            logger.warning("Route cache write failed for %s", key, exc_info=True)
