"""Client pipeline: route loading and live marker updates."""

from tracking.live_feed import LiveFeed
from tracking.route_loader import LoadedRoute, RouteLoader

__all__ = ["LiveFeed", "LoadedRoute", "RouteLoader"]
