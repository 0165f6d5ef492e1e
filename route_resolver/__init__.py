"""Single-call route resolution: bus stops in, geocoded stops and geometry out."""

from route_resolver.cache import EdgeRouteCache, make_edge_cache_key
from route_resolver.models import ResolvedStop, ResolveRequest, RouteResponse
from route_resolver.service import EdgeRouteResolver

__all__ = [
    "EdgeRouteCache",
    "EdgeRouteResolver",
    "ResolveRequest",
    "ResolvedStop",
    "RouteResponse",
    "make_edge_cache_key",
]
