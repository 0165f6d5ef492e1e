"""
Centralized exception hierarchy for domain-specific errors.

Every failure the route resolver can report maps to one class here; the
``api_route`` decorator turns them into HTTP status codes and JSON error
bodies.
"""


class BusTrackError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BusTrackError):
    """Exception raised when a request is malformed. Never retried."""


class ResourceNotFoundError(BusTrackError):
    """Exception raised when a referenced record does not exist."""


class GeocodeInsufficientError(BusTrackError):
    """Exception raised when fewer than two stops could be geocoded."""


class ExternalServiceError(BusTrackError):
    """Exception raised when a geocoding or routing provider call fails."""


class RoutingUnavailableError(ExternalServiceError):
    """Exception raised when the routing provider returns no route."""


class StorageUnavailableError(BusTrackError):
    """Exception raised when a durable cache store cannot be reached."""
