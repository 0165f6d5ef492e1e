"""API utilities for FastAPI route handling."""

import functools
import logging
from collections.abc import Callable
from http import HTTPStatus
from typing import Any

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

from core.exceptions import (
    BusTrackError,
    ExternalServiceError,
    GeocodeInsufficientError,
    ResourceNotFoundError,
    ValidationError,
)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, apikey",
}


def error_response(
    status_code: int,
    error: str,
    detail: Any | None = None,
) -> JSONResponse:
    """Build an ``{error, detail?}`` JSON body carrying the CORS headers."""
    content: dict[str, Any] = {"error": error}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


def api_route(logger: logging.Logger):
    """
    Decorator for FastAPI endpoints that provides standardized error handling.

    Wraps async endpoint functions with try/except to:
    - Pass through HTTPException unchanged
    - Map domain exceptions to their HTTP status codes
    - Log and convert any other exception to a 500 body

    Error bodies are ``{"error": message, "detail": ...}``; apart from
    HTTPException, no exception escapes the endpoint.

    Usage:
        @router.post("/api/example")
        @api_route(logger)
        async def my_endpoint():
            # ... business logic ...
            return result
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except ValidationError as e:
                logger.warning("Validation error in %s: %s", func.__name__, e.message)
                return error_response(
                    status.HTTP_400_BAD_REQUEST,
                    e.message,
                    e.details,
                )
            except ResourceNotFoundError as e:
                logger.info("Resource not found in %s: %s", func.__name__, e.message)
                return error_response(
                    status.HTTP_404_NOT_FOUND,
                    e.message,
                    e.details,
                )
            except GeocodeInsufficientError as e:
                logger.warning(
                    "Geocoding insufficient in %s: %s",
                    func.__name__,
                    e.message,
                )
                return error_response(
                    HTTPStatus.UNPROCESSABLE_ENTITY,
                    e.message,
                    e.details,
                )
            except ExternalServiceError as e:
                logger.exception(
                    "External service error in %s: %s",
                    func.__name__,
                    e.message,
                )
                return error_response(
                    status.HTTP_502_BAD_GATEWAY,
                    e.message,
                    e.details,
                )
            except BusTrackError as e:
                logger.exception(
                    "Application error in %s: %s",
                    func.__name__,
                    e.message,
                )
                return error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "Internal server error",
                    e.message,
                )
            except Exception as e:
                logger.exception("Unexpected error in %s", func.__name__)
                return error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "Internal server error",
                    str(e),
                )

        return wrapper

    return decorator
