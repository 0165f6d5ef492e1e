"""Route geometry caching keyed by ordered stop coordinates."""

from __future__ import annotations

from importlib import import_module

__all__ = [
    "CachedRouteGeometry",
    "RouteCache",
    "RouteGeometry",
    "make_route_key",
    "session_store",
]

_LAZY_IMPORTS: dict[str, tuple[str, str | None]] = {
    "CachedRouteGeometry": ("routing.cache", "CachedRouteGeometry"),
    "RouteCache": ("routing.cache", "RouteCache"),
    "RouteGeometry": ("routing.cache", "RouteGeometry"),
    "make_route_key": ("routing.keys", "make_route_key"),
    "session_store": ("routing.cache", "session_store"),
    "cache": ("routing.cache", None),
}


def __getattr__(name: str):
    target = _LAZY_IMPORTS.get(name)
    if not target:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    module_name, attr_name = target
    module = import_module(module_name)
    return module if attr_name is None else getattr(module, attr_name)


def __dir__():
    return sorted(set(globals()) | set(_LAZY_IMPORTS))
