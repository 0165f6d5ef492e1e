from unittest.mock import AsyncMock

import pytest

from core.exceptions import ExternalServiceError
from core.http.nominatim import NominatimClient
from tests.http_fakes import FakeResponse, FakeSession, throttled
from tests.provider_fakes import candidate


@pytest.mark.asyncio
async def test_nominatim_search_sends_stop_lookup_params(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    response = FakeResponse(
        status=200,
        json_data=[candidate(12.9249, 80.1, "Tambaram Bus Stand")],
    )
    session = FakeSession(get_responses=[response])
    monkeypatch.setattr(
        "core.http.nominatim.get_session",
        AsyncMock(return_value=session),
    )

    client = NominatimClient(
        search_url="http://nominatim.test/search",
        user_agent="BusTrackTest/1.0",
    )
    results = await client.search("Tambaram bus stand India")

    assert results[0]["lat"] == "12.9249"
    method, url, kwargs = session.requests[0]
    assert method == "GET"
    assert url == "http://nominatim.test/search"
    assert kwargs["params"] == {
        "q": "Tambaram bus stand India",
        "format": "json",
        "countrycodes": "in",
        "namedetails": 1,
        "limit": 3,
    }
    assert kwargs["headers"]["User-Agent"] == "BusTrackTest/1.0"
    assert kwargs["headers"]["Accept-Language"] == "en"


@pytest.mark.asyncio
async def test_nominatim_search_raises_on_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    response = FakeResponse(status=500, text_data="boom")
    session = FakeSession(get_responses=[response])
    monkeypatch.setattr(
        "core.http.nominatim.get_session",
        AsyncMock(return_value=session),
    )

    client = NominatimClient(search_url="http://nominatim.test/search")

    with pytest.raises(ExternalServiceError) as raised:
        await client.search("Madurai")

    assert "Nominatim search" in raised.value.message
    assert raised.value.details["status"] == 500


@pytest.mark.asyncio
async def test_nominatim_search_rejects_non_list_body(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    response = FakeResponse(status=200, json_data={"error": "Unable to geocode"})
    session = FakeSession(get_responses=[response])
    monkeypatch.setattr(
        "core.http.nominatim.get_session",
        AsyncMock(return_value=session),
    )

    client = NominatimClient(search_url="http://nominatim.test/search")

    with pytest.raises(ExternalServiceError):
        await client.search("Madurai")


@pytest.mark.asyncio
async def test_nominatim_search_wraps_transport_errors(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    import aiohttp

    session = FakeSession(get_responses=[aiohttp.ClientConnectionError("reset")])
    monkeypatch.setattr(
        "core.http.nominatim.get_session",
        AsyncMock(return_value=session),
    )

    client = NominatimClient(search_url="http://nominatim.test/search")

    with pytest.raises(ExternalServiceError) as raised:
        await client.search("Madurai")

    assert "request failed" in raised.value.message


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("header", "expected"),
    [("30", 30), ("Wed, 21 Oct 2015 07:28:00 GMT", 0), ("soon", None), (None, 5)],
)
async def test_nominatim_throttling_reads_retry_after_forms(
    monkeypatch: pytest.MonkeyPatch,
    header: str | None,
    expected: int | None,
) -> None:
    session = FakeSession(get_responses=[throttled(header)])
    monkeypatch.setattr(
        "core.http.nominatim.get_session",
        AsyncMock(return_value=session),
    )

    client = NominatimClient(search_url="http://nominatim.test/search")

    with pytest.raises(ExternalServiceError) as raised:
        await client.search("Tambaram")

    assert raised.value.details["status"] == 429
    assert raised.value.details["retry_after"] == expected
