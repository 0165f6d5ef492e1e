"""HTTP surface of the route resolver."""

import json
import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as PydanticValidationError

from core.api import CORS_HEADERS, api_route
from core.exceptions import ValidationError
from route_resolver.models import ResolveRequest
from route_resolver.service import EdgeRouteResolver

logger = logging.getLogger(__name__)
router = APIRouter(tags=["route-resolver"])

_resolver: EdgeRouteResolver | None = None


def get_route_resolver() -> EdgeRouteResolver:
    """Process-wide resolver, created on first use."""
    global _resolver
    if _resolver is None:
        _resolver = EdgeRouteResolver()
    return _resolver


def _parse_request(raw_body: bytes) -> ResolveRequest:
    try:
        payload = json.loads(raw_body) if raw_body else None
    except ValueError as e:
        msg = "Invalid JSON body"
        raise ValidationError(msg) from e
    if not isinstance(payload, dict):
        msg = "Request body must be a JSON object"
        raise ValidationError(msg)

    try:
        return ResolveRequest.model_validate(payload)
    except PydanticValidationError as e:
        msg = "Invalid route request"
        raise ValidationError(
            msg, {"errors": e.errors(include_url=False, include_context=False)}
        ) from e


@router.post("/api/route-resolver")
@api_route(logger)
async def resolve_route(request: Request) -> JSONResponse:
    """Resolve a stop list or bus id into geocoded stops and road geometry."""
    body = _parse_request(await request.body())
    result = await get_route_resolver().resolve(body)
    logger.info(
        "Resolved route with %d stops (from_cache=%s)",
        len(result.stops),
        result.from_cache,
    )
    return JSONResponse(content=result.to_body(), headers=CORS_HEADERS)


@router.options("/api/route-resolver")
async def route_resolver_preflight() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)
