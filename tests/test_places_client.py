import asyncio
import aiohttp
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from agri_resources.core.errors import UpstreamError
from agri_resources.models import Coordinate
from agri_resources.places.places_client import PlacesClient

ORIGIN = Coordinate(lat=19.0760, lon=72.8777)

MOCK_PAYLOAD = {
    "status": "OK",
    "results": [
        {
            "place_id": "ChIJ-seed-1",
            "name": "GreenField Seeds",
            "geometry": {"location": {"lat": 19.10, "lng": 72.90}},
            "rating": 4.4,
        },
        {
            "place_id": "ChIJ-seed-2",
            "name": "Kisan Beej Bhandar",
            "geometry": {},
            "rating": "n/a",
        },
        {
            "name": "Unnamed Depot",
            "geometry": {"location": {"lat": "19.08", "lng": "72.86"}},
            "rating": 7,
        },
    ],
}


def _mock_session(MockSession, status=200, text="", json_data=None):
    resp = MagicMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    resp.json = AsyncMock(return_value=json_data)

    session = MagicMock()
    session.get.return_value.__aenter__.return_value = resp
    session.get.return_value.__aexit__.return_value = False
    MockSession.return_value.__aenter__.return_value = session
    MockSession.return_value.__aexit__.return_value = False
    return session


@pytest.mark.asyncio
async def test_nearby_search_parses_results_in_provider_order():
    client = PlacesClient(api_key="test-key")
    with patch.object(
        PlacesClient, "_get_json", new_callable=AsyncMock
    ) as mock_get:
        mock_get.return_value = MOCK_PAYLOAD

        results = await client.nearby_search(ORIGIN, 15000, "seed store", "seed")

        params = mock_get.call_args.args[0]
        assert params["location"] == "19.076,72.8777"
        assert params["radius"] == "15000"
        assert params["keyword"] == "seed store"
        assert params["key"] == "test-key"

    assert [r.name for r in results] == [
        "GreenField Seeds",
        "Kisan Beej Bhandar",
        "Unnamed Depot",
    ]

    first, second, third = results
    assert first.place_id == "ChIJ-seed-1"
    assert first.location == Coordinate(lat=19.10, lon=72.90)
    assert first.rating == 4.4
    assert first.keyword == "seed store"
    assert first.category == "seed"

    # Missing geometry and junk rating become absent fields
    assert second.location is None
    assert second.rating is None

    # No place_id, string coordinates, out-of-range rating
    assert third.place_id is None
    assert third.location == Coordinate(lat=19.08, lon=72.86)
    assert third.rating is None


@pytest.mark.asyncio
async def test_zero_results_is_empty_list():
    client = PlacesClient(api_key="test-key")
    with patch.object(PlacesClient, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = {"status": "ZERO_RESULTS", "results": []}
        results = await client.nearby_search(ORIGIN, 15000, "pesticide shop", "agri-store")

    assert results == []


@pytest.mark.asyncio
async def test_provider_error_status_raises():
    client = PlacesClient(api_key="bad-key")
    with patch.object(PlacesClient, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = {
            "status": "REQUEST_DENIED",
            "error_message": "The provided API key is invalid.",
            "results": [],
        }
        with pytest.raises(UpstreamError) as exc_info:
            await client.nearby_search(ORIGIN, 15000, "fertilizer store", "fertilizer")

    detail = exc_info.value.detail
    assert "fertilizer store" in detail
    assert "REQUEST_DENIED" in detail
    assert "API key is invalid" in detail


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        ["not", "a", "dict"],
        {"status": "OK", "results": {"place_id": "x"}},
        {"status": "OK", "results": ["oops"]},
    ],
)
async def test_malformed_payload_raises(payload):
    client = PlacesClient(api_key="test-key")
    with patch.object(PlacesClient, "_get_json", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = payload
        with pytest.raises(UpstreamError, match="malformed"):
            await client.nearby_search(ORIGIN, 15000, "seed store", "seed")


@pytest.mark.asyncio
async def test_http_error_status_raises():
    client = PlacesClient(api_key="test-key")
    with patch("agri_resources.places.places_client.aiohttp.ClientSession") as MockSession:
        _mock_session(MockSession, status=503, text="Service Unavailable")

        with pytest.raises(UpstreamError) as exc_info:
            await client.nearby_search(ORIGIN, 15000, "seed store", "seed")

    assert "HTTP 503" in exc_info.value.detail
    assert "seed store" in exc_info.value.detail


@pytest.mark.asyncio
async def test_connection_error_raises():
    client = PlacesClient(api_key="test-key")
    with patch("agri_resources.places.places_client.aiohttp.ClientSession") as MockSession:
        MockSession.return_value.__aenter__.side_effect = aiohttp.ClientConnectionError(
            "connection refused"
        )

        with pytest.raises(UpstreamError, match="connection refused"):
            await client.nearby_search(ORIGIN, 15000, "seed store", "seed")


@pytest.mark.asyncio
async def test_request_timeout_raises():
    client = PlacesClient(api_key="test-key", timeout=2.0)
    with patch("agri_resources.places.places_client.aiohttp.ClientSession") as MockSession:
        session = _mock_session(MockSession)
        session.get.return_value.__aenter__.side_effect = asyncio.TimeoutError()

        with pytest.raises(UpstreamError) as exc_info:
            await client.nearby_search(ORIGIN, 15000, "pesticide shop", "agri-store")

    assert "pesticide shop" in exc_info.value.detail
    assert "timed out" in exc_info.value.detail


@pytest.mark.asyncio
async def test_invalid_json_body_raises():
    client = PlacesClient(api_key="test-key")
    with patch("agri_resources.places.places_client.aiohttp.ClientSession") as MockSession:
        session = _mock_session(MockSession)
        resp = session.get.return_value.__aenter__.return_value
        resp.json = AsyncMock(side_effect=ValueError("Expecting value: line 1 column 1"))

        with pytest.raises(UpstreamError) as exc_info:
            await client.nearby_search(ORIGIN, 15000, "fertilizer store", "fertilizer")

    assert "fertilizer store" in exc_info.value.detail
    assert "invalid JSON" in exc_info.value.detail


@pytest.mark.asyncio
async def test_success_returns_decoded_json():
    client = PlacesClient(api_key="test-key")
    with patch("agri_resources.places.places_client.aiohttp.ClientSession") as MockSession:
        session = _mock_session(MockSession, json_data=MOCK_PAYLOAD)

        results = await client.nearby_search(ORIGIN, 15000, "seed store", "seed")

    assert len(results) == 3
    assert session.get.call_args.kwargs["params"]["keyword"] == "seed store"


def test_api_key_falls_back_to_settings(monkeypatch):
    from agri_resources.core.config import settings

    monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", "from-env")
    assert PlacesClient().api_key == "from-env"
    assert PlacesClient(api_key="explicit").api_key == "explicit"
