"""Centralized configuration for environment variables and external APIs.

This module is the single source of truth for configuration used across the
application. Import getters from here rather than calling os.getenv directly
in multiple places. Getters read the environment at call time so tests can
patch ``os.environ``.
"""

from __future__ import annotations

import os
from typing import Final

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


# --- Geocoding (Nominatim) ---
DEFAULT_NOMINATIM_SEARCH_URL: Final[str] = "https://nominatim.openstreetmap.org/search"
DEFAULT_NOMINATIM_USER_AGENT: Final[str] = "BusTrackIndia/4.0"
DEFAULT_GEOCODE_COUNTRY_CODES: Final[str] = "in"
DEFAULT_GEOCODE_REGION: Final[str] = "Tamil Nadu"
# Nominatim usage policy asks for at most one request per second per client;
# bursts of a handful of stop lookups are tolerated at 4/s.
DEFAULT_GEOCODE_MIN_INTERVAL_MS: Final[int] = 250
GEOCODE_CANDIDATE_LIMIT: Final[int] = 3

# --- Routing (OSRM) ---
DEFAULT_OSRM_BASE_URL: Final[str] = "https://router.project-osrm.org"
DEFAULT_ROUTING_PROFILE: Final[str] = "driving"

# --- Caches ---
EDGE_CACHE_TTL_SECONDS: Final[int] = 24 * 60 * 60
SESSION_CACHE_TTL_SECONDS: Final[int] = 12 * 60 * 60
# 5 decimal digits is ~1.1 m at the equator.
ROUTE_KEY_PRECISION: Final[int] = 5


def _env(name: str) -> str:
    return os.getenv(name, "").strip()


def get_nominatim_search_url() -> str:
    return _env("NOMINATIM_SEARCH_URL") or DEFAULT_NOMINATIM_SEARCH_URL


def get_nominatim_user_agent() -> str:
    return _env("NOMINATIM_USER_AGENT") or DEFAULT_NOMINATIM_USER_AGENT


def get_geocode_country_codes() -> str:
    return _env("GEOCODE_COUNTRY_CODES") or DEFAULT_GEOCODE_COUNTRY_CODES


def get_geocode_region() -> str:
    return _env("GEOCODE_REGION") or DEFAULT_GEOCODE_REGION


def get_geocode_min_interval() -> float:
    """Minimum delay between geocoding requests, in seconds."""
    raw = _env("GEOCODE_MIN_INTERVAL_MS")
    if not raw:
        return DEFAULT_GEOCODE_MIN_INTERVAL_MS / 1000.0
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"GEOCODE_MIN_INTERVAL_MS must be a number, got {raw!r}"
        raise RuntimeError(msg) from exc
    if value < 0:
        msg = "GEOCODE_MIN_INTERVAL_MS must not be negative"
        raise RuntimeError(msg)
    return value / 1000.0


def get_osrm_base_url() -> str:
    return (_env("OSRM_BASE_URL") or DEFAULT_OSRM_BASE_URL).rstrip("/")


def get_supabase_url() -> str | None:
    url = _env("SUPABASE_URL")
    return url.rstrip("/") if url else None


def get_supabase_key() -> str | None:
    return _env("SUPABASE_SERVICE_ROLE_KEY") or None


def get_edge_resolver_url() -> str | None:
    """URL of a deployed route resolver; clients fall back to local resolution without it."""
    return _env("EDGE_RESOLVER_URL") or None


def get_cors_allowed_origins() -> list[str]:
    raw = _env("CORS_ALLOWED_ORIGINS")
    if not raw:
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


__all__ = [
    "DEFAULT_ROUTING_PROFILE",
    "EDGE_CACHE_TTL_SECONDS",
    "GEOCODE_CANDIDATE_LIMIT",
    "ROUTE_KEY_PRECISION",
    "SESSION_CACHE_TTL_SECONDS",
    "get_cors_allowed_origins",
    "get_edge_resolver_url",
    "get_geocode_country_codes",
    "get_geocode_min_interval",
    "get_geocode_region",
    "get_nominatim_search_url",
    "get_nominatim_user_agent",
    "get_osrm_base_url",
    "get_supabase_key",
    "get_supabase_url",
]
