"""
Query construction and candidate selection for stop geocoding.

Everything here is pure; the resolvers own the network calls, limiters
and caches.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from core.geo import haversine_km
from geocoding.models import Coordinate

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
_OLD_NEW_BUS_STAND_RE = re.compile(
    r"\b(?:old|new)\s+bus\s*st(?:and|op)?\b", re.IGNORECASE
)
_BUS_STAND_RE = re.compile(r"\bbus\s*st(?:and|op)?\b", re.IGNORECASE)


@dataclass(frozen=True)
class Candidate:
    lat: float
    lon: float
    display_name: str = ""
    namedetails: dict[str, str] = field(default_factory=dict)


def cache_key(name: str) -> str:
    return name.strip().lower()


def normalize_stop_name(raw: str) -> str:
    """
    Canonicalize the way drivers write bus stands.

    "Old Bus Stand", "new bus stop" and "bus st" all become "bus stand", so
    spelling variants of one stand produce the same provider queries.
    """
    name = _WHITESPACE_RE.sub(" ", raw.strip())
    name = _OLD_NEW_BUS_STAND_RE.sub("bus stand", name, count=1)
    return _BUS_STAND_RE.sub("bus stand", name, count=1)


def build_queries(name: str, region: str) -> list[str]:
    """Progressively less specific queries tried for a stop, most specific first."""
    return [
        f"{name} bus stand {region} India",
        f"{name} bus stand India",
        f"{name} India",
    ]


def build_resolver_queries(raw_name: str, region: str) -> list[str]:
    """
    Server-side query sequence: normalized variants, then the raw name.

    Duplicates (when normalization changed nothing) are dropped so the
    provider is not asked the same question twice.
    """
    raw = raw_name.strip()
    queries = [*build_queries(normalize_stop_name(raw), region), f"{raw} India"]
    return list(dict.fromkeys(queries))


def parse_candidates(results: Iterable[Any]) -> list[Candidate]:
    """Convert raw Nominatim candidates, skipping entries without usable coordinates."""
    candidates: list[Candidate] = []
    for result in results:
        if not isinstance(result, dict):
            continue
        try:
            lat = float(result["lat"])
            lon = float(result["lon"])
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping geocode candidate without coordinates: %s", result)
            continue
        namedetails = result.get("namedetails")
        candidates.append(
            Candidate(
                lat=lat,
                lon=lon,
                display_name=str(result.get("display_name") or ""),
                namedetails=namedetails if isinstance(namedetails, dict) else {},
            )
        )
    return candidates


def pick_candidate(
    candidates: list[Candidate],
    anchor: Coordinate | None = None,
) -> Candidate:
    """
    Choose among provider candidates.

    With an anchor and more than one candidate, the one nearest to the anchor
    wins (ties keep the provider's order). Otherwise the provider's
    top-ranked candidate is used.
    """
    if not candidates:
        msg = "pick_candidate requires at least one candidate"
        raise ValueError(msg)
    if anchor is None or len(candidates) == 1:
        return candidates[0]
    return min(
        candidates,
        key=lambda c: haversine_km(anchor.lat, anchor.lon, c.lat, c.lon),
    )


def corrected_name(candidate: Candidate) -> str:
    """Display name for a candidate: OSM name, English name, then the first address part."""
    details = candidate.namedetails
    name = details.get("name") or details.get("name:en")
    if name:
        return str(name)
    return candidate.display_name.split(",")[0].strip()
