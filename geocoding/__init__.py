"""
Stop-name geocoding.

Resolves free-text bus stop names to coordinates through Nominatim, using
an anchor coordinate to disambiguate common place names.
"""

from geocoding.heuristics import (
    Candidate,
    build_queries,
    build_resolver_queries,
    corrected_name,
    normalize_stop_name,
    parse_candidates,
    pick_candidate,
)
from geocoding.models import Coordinate, GeocodeResult
from geocoding.rate_limiting import make_rate_limiter
from geocoding.resolver import GeocodeCache, GeocodeResolver

__all__ = [
    "Candidate",
    "Coordinate",
    "GeocodeCache",
    "GeocodeResolver",
    "GeocodeResult",
    "build_queries",
    "build_resolver_queries",
    "corrected_name",
    "make_rate_limiter",
    "normalize_stop_name",
    "parse_candidates",
    "pick_candidate",
]
