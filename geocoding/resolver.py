"""Client-side stop geocoding with a session cache and an anchor heuristic."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager
from typing import Any

from config import get_geocode_min_interval, get_geocode_region
from core.exceptions import ExternalServiceError
from core.http.nominatim import NominatimClient
from core.mapping.interfaces import Geocoder
from geocoding.heuristics import (
    Candidate,
    build_queries,
    cache_key,
    corrected_name,
    parse_candidates,
    pick_candidate,
)
from geocoding.models import Coordinate, GeocodeResult
from geocoding.rate_limiting import make_rate_limiter

logger = logging.getLogger(__name__)


class GeocodeCache:
    """
    Append-only map of normalized stop name to result.

    Unresolved names are stored as None and count as hits. An entry is never
    replaced or evicted, so every caller in a session sees the same value.
    """

    def __init__(self) -> None:
        self._entries: dict[str, GeocodeResult | None] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> GeocodeResult | None:
        return self._entries.get(key)

    def add(self, key: str, value: GeocodeResult | None) -> GeocodeResult | None:
        """Store ``value`` unless ``key`` is already present; return the stored value."""
        return self._entries.setdefault(key, value)


class GeocodeResolver:
    """
    Resolve stop names to coordinates.

    Each instance owns its cache and its rate limiter unless they are passed
    in. The route resolver shares one limiter across per-request caches.
    """

    def __init__(
        self,
        geocoder: Geocoder | None = None,
        *,
        cache: GeocodeCache | None = None,
        region: str | None = None,
        min_interval: float | None = None,
        limiter: AbstractAsyncContextManager[Any] | None = None,
        query_builder: Callable[[str, str], list[str]] = build_queries,
    ) -> None:
        self._geocoder = geocoder or NominatimClient()
        self._cache = cache if cache is not None else GeocodeCache()
        self._region = region or get_geocode_region()
        self._query_builder = query_builder
        if limiter is None:
            interval = get_geocode_min_interval() if min_interval is None else min_interval
            limiter = make_rate_limiter(interval)
        self._limiter = limiter

    @property
    def cache(self) -> GeocodeCache:
        return self._cache

    async def resolve(
        self,
        name: str,
        anchor: Coordinate | None = None,
    ) -> GeocodeResult | None:
        """
        Resolve one stop name.

        Args:
            name: Stop name as typed by a driver or admin.
            anchor: Coordinate used to break ties between ambiguous matches.

        Returns:
            The cached or newly resolved result, or None when no query
            variant produced a candidate. Never raises for provider failures.
        """
        key = cache_key(name)
        if key in self._cache:
            return self._cache.get(key)
        if not key:
            return self._cache.add(key, None)

        for query in self._query_builder(name.strip(), self._region):
            candidates = await self._search(query)
            if not candidates:
                continue
            best = pick_candidate(candidates, anchor)
            result = GeocodeResult(
                corrected_name=corrected_name(best),
                lat=best.lat,
                lon=best.lon,
            )
            return self._cache.add(key, result)

        logger.info("Could not geocode stop %r", name)
        return self._cache.add(key, None)

    async def resolve_sequence(
        self,
        names: Iterable[str],
    ) -> list[GeocodeResult | None]:
        """
        Resolve stops in route order.

        The anchor is the first successfully resolved stop and stays fixed
        for the rest of the sequence.
        """
        results: list[GeocodeResult | None] = []
        anchor: Coordinate | None = None
        for name in names:
            result = await self.resolve(name, anchor)
            results.append(result)
            if result is not None and anchor is None:
                anchor = result.coordinate
        return results

    async def prewarm(self, names: Iterable[str]) -> None:
        """Fill the cache for a route's stops ahead of use."""
        await self.resolve_sequence(names)

    async def _search(self, query: str) -> list[Candidate]:
        try:
            async with self._limiter:
                raw = await self._geocoder.search(query)
        except ExternalServiceError as e:
            logger.warning("Geocoding query %r failed: %s", query, e.message)
            return []
        return parse_candidates(raw)
