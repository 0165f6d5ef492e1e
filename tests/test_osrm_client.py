from unittest.mock import AsyncMock

import pytest

from core.exceptions import ExternalServiceError
from core.http.osrm import OsrmClient, first_route, format_waypoints
from tests.http_fakes import FakeResponse, FakeSession
from tests.provider_fakes import osrm_response


def test_format_waypoints_is_lon_lat() -> None:
    assert format_waypoints([(80.27, 13.08), (80.1, 12.92)]) == "80.27,13.08;80.1,12.92"


def test_route_url() -> None:
    client = OsrmClient("http://osrm.test/")
    assert (
        client.route_url([(80.27, 13.08), (80.1, 12.92)], "driving")
        == "http://osrm.test/route/v1/driving/80.27,13.08;80.1,12.92"
    )


@pytest.mark.asyncio
async def test_route_requests_full_geojson_overview(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    body = osrm_response([[80.27, 13.08], [80.1, 12.92]])
    session = FakeSession(get_responses=[FakeResponse(json_data=body)])
    monkeypatch.setattr("core.http.osrm.get_session", AsyncMock(return_value=session))

    data = await OsrmClient("http://osrm.test").route([(80.27, 13.08), (80.1, 12.92)])

    assert data == body
    _, url, kwargs = session.requests[0]
    assert url == "http://osrm.test/route/v1/driving/80.27,13.08;80.1,12.92"
    assert kwargs["params"] == {"overview": "full", "geometries": "geojson"}


@pytest.mark.asyncio
async def test_route_accepts_no_route_responses(monkeypatch: pytest.MonkeyPatch) -> None:
    body = {"code": "NoRoute", "message": "Impossible route between points"}
    session = FakeSession(get_responses=[FakeResponse(status=400, json_data=body)])
    monkeypatch.setattr("core.http.osrm.get_session", AsyncMock(return_value=session))

    data = await OsrmClient("http://osrm.test").route([(0.0, 0.0), (1.0, 1.0)])

    assert first_route(data) is None


@pytest.mark.asyncio
async def test_route_requires_two_waypoints() -> None:
    with pytest.raises(ExternalServiceError):
        await OsrmClient("http://osrm.test").route([(80.27, 13.08)])


@pytest.mark.asyncio
async def test_route_retries_server_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    body = osrm_response([[80.27, 13.08], [80.1, 12.92]])
    session = FakeSession(
        get_responses=[
            FakeResponse(status=503, text_data="busy"),
            FakeResponse(json_data=body),
        ]
    )
    monkeypatch.setattr("core.http.osrm.get_session", AsyncMock(return_value=session))

    data = await OsrmClient("http://osrm.test").route([(80.27, 13.08), (80.1, 12.92)])

    assert data == body
    assert len(session.requests) == 2


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"routes": []},
        {"routes": [{"geometry": {"coordinates": []}}]},
        {"routes": ["bad"]},
    ],
)
def test_first_route_rejects_empty_results(data: dict) -> None:
    assert first_route(data) is None


def test_first_route_returns_first() -> None:
    body = osrm_response([[80.27, 13.08], [80.1, 12.92]])
    assert first_route(body) is body["routes"][0]
