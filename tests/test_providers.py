"""
Tests for provider adapters: payload parsing, candidate selection, failures.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest

from location_resolver.geocoding.base import Coordinates, GeocodeOptions, LocationType, ProviderError, parse_float
from location_resolver.geocoding.providers import GoogleGeocoder, MapboxGeocoder, NominatimGeocoder

MAPBOX_AUSTIN = {
    "features": [
        {
            "id": "poi.123",
            "place_type": ["poi"],
            "relevance": 1.0,
            "text": "Austin-Bergstrom International Airport",
            "place_name": "Austin-Bergstrom International Airport, Austin, Texas, United States",
            "center": [-97.6699, 30.1975],
            "context": [
                {"id": "place.1", "text": "Austin"},
                {"id": "region.1", "text": "Texas", "short_code": "US-TX"},
                {"id": "country.1", "text": "United States", "short_code": "us"},
            ],
        },
        {
            "id": "place.456",
            "place_type": ["place"],
            "relevance": 0.9,
            "text": "Austin",
            "place_name": "Austin, Texas, United States",
            "center": [-97.7431, 30.2672],
            "context": [
                {"id": "region.1", "text": "Texas", "short_code": "US-TX"},
                {"id": "country.1", "text": "United States", "short_code": "us"},
            ],
        },
    ]
}

MAPBOX_PARIS = {
    "features": [
        {
            "id": "place.fr",
            "place_type": ["place"],
            "relevance": 1.0,
            "text": "Paris",
            "place_name": "Paris, Île-de-France, France",
            "center": [2.3522, 48.8566],
            "context": [{"id": "country.2", "text": "France", "short_code": "fr"}],
        },
        {
            "id": "place.us",
            "place_type": ["place"],
            "relevance": 0.8,
            "text": "Paris",
            "place_name": "Paris, Texas, United States",
            "center": [-95.5555, 33.6609],
            "context": [
                {"id": "region.1", "text": "Texas"},
                {"id": "country.1", "text": "United States", "short_code": "us"},
            ],
        },
    ]
}

NOMINATIM_SPRINGFIELD = [
    {
        "lat": "39.7990",
        "lon": "-89.6440",
        "class": "highway",
        "type": "residential",
        "importance": 0.9,
        "name": "Springfield Avenue",
        "display_name": "Springfield Avenue, Champaign, Illinois, United States",
        "address": {"state": "Illinois", "country": "United States", "country_code": "us"},
    },
    {
        "lat": "39.7817",
        "lon": "-89.6501",
        "class": "place",
        "type": "city",
        "importance": 0.7,
        "name": "Springfield",
        "display_name": "Springfield, Sangamon County, Illinois, United States",
        "address": {
            "city": "Springfield",
            "state": "Illinois",
            "country": "United States",
            "country_code": "us",
        },
    },
]

GOOGLE_SF = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "San Francisco, CA, USA",
            "types": ["locality", "political"],
            "geometry": {"location": {"lat": 37.7749, "lng": -122.4194}},
            "address_components": [
                {"long_name": "San Francisco", "short_name": "SF", "types": ["locality"]},
                {"long_name": "California", "short_name": "CA", "types": ["administrative_area_level_1"]},
                {"long_name": "United States", "short_name": "US", "types": ["country"]},
            ],
        }
    ],
}


def test_mapbox_requires_token():
    async def _run():
        geocoder = MapboxGeocoder(access_token="")
        with pytest.raises(ProviderError) as exc:
            await geocoder.geocode("Austin", GeocodeOptions())
        assert exc.value.provider == "mapbox"

    asyncio.run(_run())


def test_google_requires_api_key():
    async def _run():
        geocoder = GoogleGeocoder(api_key="")
        with pytest.raises(ProviderError):
            await geocoder.geocode("Austin", GeocodeOptions())

    asyncio.run(_run())


def test_mapbox_prefers_administrative_area():
    async def _run():
        geocoder = MapboxGeocoder(access_token="test-token")
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=MAPBOX_AUSTIN)):
            return await geocoder.geocode("Austin", GeocodeOptions())

    result = asyncio.run(_run())

    assert result.location == "Austin"
    assert result.type == LocationType.CITY
    assert result.components.city == "Austin"
    assert result.components.state == "Texas"
    assert result.components.country == "United States"
    assert result.components.country_code == "US"
    assert result.providers == ["mapbox"]
    assert result.coordinates.lat == pytest.approx(30.2672)
    # Containment, relevance 0.9
    assert result.confidence == pytest.approx(0.855)


def test_mapbox_preferred_country_wins():
    async def _run():
        geocoder = MapboxGeocoder(access_token="test-token")
        mock = AsyncMock(return_value=MAPBOX_PARIS)
        with patch.object(geocoder, "_get_json", mock):
            result = await geocoder.geocode("Paris", GeocodeOptions(preferred_country="US"))
        return result, mock

    result, mock = asyncio.run(_run())

    assert result.display_name == "Paris, Texas, United States"
    assert result.components.country_code == "US"
    params = mock.call_args.kwargs["params"]
    assert params["country"] == "us"
    assert params["access_token"] == "test-token"


def test_mapbox_no_features_returns_none():
    async def _run():
        geocoder = MapboxGeocoder(access_token="test-token")
        with patch.object(geocoder, "_get_json", AsyncMock(return_value={"features": []})):
            return await geocoder.geocode("Narnia", GeocodeOptions())

    assert asyncio.run(_run()) is None


def test_nominatim_prefers_settlement_over_importance():
    async def _run():
        geocoder = NominatimGeocoder()
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=NOMINATIM_SPRINGFIELD)):
            return await geocoder.geocode("Springfield", GeocodeOptions())

    result = asyncio.run(_run())

    assert result.location == "Springfield"
    assert result.type == LocationType.CITY
    assert result.components.city == "Springfield"
    assert result.components.country_code == "US"
    assert result.confidence == pytest.approx(0.7 * 0.95)


def test_nominatim_passes_country_and_viewbox():
    async def _run():
        geocoder = NominatimGeocoder(user_agent="test-agent")
        mock = AsyncMock(return_value=[])
        with patch.object(geocoder, "_get_json", mock):
            result = await geocoder.geocode(
                "Paris",
                GeocodeOptions(
                    preferred_country="FR",
                    max_results=1,
                    bias_location=Coordinates(lat=48.8566, lng=2.3522),
                ),
            )
        return result, mock

    result, mock = asyncio.run(_run())

    assert result is None
    params = mock.call_args.kwargs["params"]
    assert params["countrycodes"] == "fr"
    assert params["limit"] == "1"
    assert "viewbox" in params
    assert mock.call_args.kwargs["headers"]["User-Agent"] == "test-agent"


def test_nominatim_discards_invalid_coordinates():
    payload = [dict(NOMINATIM_SPRINGFIELD[1], lat="999")]

    async def _run():
        geocoder = NominatimGeocoder()
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=payload)):
            return await geocoder.geocode("Springfield", GeocodeOptions())

    assert asyncio.run(_run()) is None


def test_google_parses_result():
    async def _run():
        geocoder = GoogleGeocoder(api_key="test-key")
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=GOOGLE_SF)):
            return await geocoder.geocode("San Francisco", GeocodeOptions())

    result = asyncio.run(_run())

    assert result.location == "San Francisco"
    assert result.components.state == "California"
    assert result.components.country_code == "US"
    assert result.type == LocationType.CITY
    assert result.confidence == pytest.approx(0.9 * 0.95)


def test_google_zero_results_is_not_an_error():
    async def _run():
        geocoder = GoogleGeocoder(api_key="test-key")
        payload = {"status": "ZERO_RESULTS", "results": []}
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=payload)):
            return await geocoder.geocode("Narnia", GeocodeOptions())

    assert asyncio.run(_run()) is None


def test_google_error_status_raises():
    async def _run():
        geocoder = GoogleGeocoder(api_key="revoked")
        payload = {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid."}
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=payload)):
            await geocoder.geocode("Austin", GeocodeOptions())

    with pytest.raises(ProviderError, match="REQUEST_DENIED"):
        asyncio.run(_run())


@pytest.mark.parametrize("failure", [
    aiohttp.ClientConnectionError("connection reset"),
    asyncio.TimeoutError(),
])
def test_transport_failures_become_provider_errors(failure):
    async def _run():
        geocoder = NominatimGeocoder(session=object())
        with patch.object(geocoder, "_fetch_json", AsyncMock(side_effect=failure)):
            await geocoder.geocode("Austin", GeocodeOptions())

    with pytest.raises(ProviderError) as exc:
        asyncio.run(_run())
    assert exc.value.provider == "nominatim"


def test_mapbox_skips_malformed_features():
    payload = {"features": [None, "poi.1", dict(MAPBOX_AUSTIN["features"][1], context=[None, {"id": 7}])]}

    async def _run():
        geocoder = MapboxGeocoder(access_token="test-token")
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=payload)):
            return await geocoder.geocode("Austin", GeocodeOptions())

    result = asyncio.run(_run())

    assert result.location == "Austin"
    assert result.components.country_code is None


@pytest.mark.parametrize("payload", [{"features": None}, {"features": {"id": "place.1"}}, [None]])
def test_mapbox_unusable_feature_list_returns_none(payload):
    async def _run():
        geocoder = MapboxGeocoder(access_token="test-token")
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=payload)):
            return await geocoder.geocode("Austin", GeocodeOptions())

    assert asyncio.run(_run()) is None


def test_google_tolerates_null_types():
    result_entry = dict(
        GOOGLE_SF["results"][0],
        types=None,
        address_components=[
            None,
            {"long_name": "San Francisco", "types": None},
            {"long_name": "United States", "short_name": "US", "types": ["country"]},
        ],
    )
    payload = {"status": "OK", "results": [None, result_entry]}

    async def _run():
        geocoder = GoogleGeocoder(api_key="test-key")
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=payload)):
            return await geocoder.geocode("San Francisco", GeocodeOptions())

    result = asyncio.run(_run())

    assert result.display_name == "San Francisco, CA, USA"
    assert result.components.city is None
    assert result.components.country_code == "US"
    assert result.type == LocationType.CITY


def test_nominatim_tolerates_malformed_fields():
    payload = [
        None,
        dict(NOMINATIM_SPRINGFIELD[1], address="Springfield", type=["city"], name=None, importance="nan"),
    ]

    async def _run():
        geocoder = NominatimGeocoder()
        with patch.object(geocoder, "_get_json", AsyncMock(return_value=payload)):
            return await geocoder.geocode("Springfield", GeocodeOptions())

    result = asyncio.run(_run())

    assert result.location == "Springfield"
    assert result.components.country_code is None
    # Non-finite importance falls back to the 0.5 default
    assert result.confidence == pytest.approx(0.5 * 0.95)


@pytest.mark.parametrize("value,expected", [
    ("0.7", 0.7),
    (None, 0.5),
    ("abc", 0.5),
    ("nan", 0.5),
    (float("inf"), 0.5),
    ("-inf", 0.5),
])
def test_parse_float_rejects_non_finite(value, expected):
    assert parse_float(value, 0.5) == expected
