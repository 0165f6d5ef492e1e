import json
import logging
from http import HTTPStatus

import pytest
from fastapi import HTTPException, status

from core.api import api_route
from core.exceptions import (
    ExternalServiceError,
    GeocodeInsufficientError,
    ResourceNotFoundError,
    RoutingUnavailableError,
    StorageUnavailableError,
    ValidationError,
)

logger = logging.getLogger("tests.core_api")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("exc", "expected_status", "expected_body"),
    [
        (
            ValidationError("bad input", {"field": "stops"}),
            status.HTTP_400_BAD_REQUEST,
            {"error": "bad input", "detail": {"field": "stops"}},
        ),
        (
            ResourceNotFoundError("missing"),
            status.HTTP_404_NOT_FOUND,
            {"error": "missing"},
        ),
        (
            GeocodeInsufficientError("too few stops"),
            HTTPStatus.UNPROCESSABLE_ENTITY,
            {"error": "too few stops"},
        ),
        (
            ExternalServiceError("upstream down"),
            status.HTTP_502_BAD_GATEWAY,
            {"error": "upstream down"},
        ),
        (
            RoutingUnavailableError("no route"),
            status.HTTP_502_BAD_GATEWAY,
            {"error": "no route"},
        ),
        (
            StorageUnavailableError("redis down"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": "Internal server error", "detail": "redis down"},
        ),
    ],
)
async def test_api_route_maps_domain_exceptions(
    exc: Exception,
    expected_status: int,
    expected_body: dict,
) -> None:
    @api_route(logger)
    async def handler():
        raise exc

    response = await handler()

    assert response.status_code == expected_status
    assert json.loads(response.body) == expected_body
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_api_route_allows_http_exception_passthrough() -> None:
    @api_route(logger)
    async def handler():
        raise HTTPException(status_code=418, detail="nope")

    with pytest.raises(HTTPException) as raised:
        await handler()

    assert raised.value.status_code == 418
    assert raised.value.detail == "nope"


@pytest.mark.asyncio
async def test_api_route_wraps_unexpected_exception() -> None:
    @api_route(logger)
    async def handler():
        raise ValueError("boom")

    response = await handler()

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert json.loads(response.body) == {
        "error": "Internal server error",
        "detail": "boom",
    }


@pytest.mark.asyncio
async def test_api_route_returns_handler_result() -> None:
    @api_route(logger)
    async def handler():
        return {"ok": True}

    assert await handler() == {"ok": True}
