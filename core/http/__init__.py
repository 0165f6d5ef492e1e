"""HTTP client utilities and session management."""

from core.http.nominatim import NominatimClient
from core.http.osrm import OsrmClient, first_route, format_waypoints
from core.http.request import request_json
from core.http.retry import retry_async
from core.http.session import cleanup_session, get_session
from core.http.supabase import SupabaseBusStore

__all__ = [
    "NominatimClient",
    "OsrmClient",
    "SupabaseBusStore",
    "cleanup_session",
    "first_route",
    "format_waypoints",
    "get_session",
    "request_json",
    "retry_async",
]
