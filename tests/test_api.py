"""
Tests for the location validation API.
"""

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_resolver
from api.main import app
from api.services.validation import build_failure_suggestions, get_travel_bias
from location_resolver.geocoding.cache import ResultCache
from location_resolver.geocoding.disambiguation import DisambiguationFinder
from location_resolver.geocoding.facade import LocationResolver


@pytest.fixture
def client(fake_geocoder, make_result, paris_results):
    primary = fake_geocoder("mapbox", {
        "austin": make_result("Austin", 0.95, display_name="Austin, Texas, United States"),
        "paris": paris_results["fr"],
        "springfield": make_result("Springfield", 0.55, state="Illinois",
                                   display_name="Springfield, Illinois, United States"),
    })
    alternatives = fake_geocoder("nominatim", by_country={
        ("paris", "us"): paris_results["us"],
        ("paris", "ca"): paris_results["ca"],
    })
    resolver = LocationResolver(
        providers=[primary],
        cache=ResultCache(max_entries=100),
        disambiguator=DisambiguationFinder(alternatives, timeout=1.0),
        provider_timeout=1.0,
    )
    app.dependency_overrides[get_resolver] = lambda: resolver
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["providers"]["nominatim"] is True


def test_validate_known_city(client):
    response = client.post("/api/validate-location", json={"location": "Austin"})

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["confidence"] == pytest.approx(0.95)
    assert data["validated"]["location"] == "Austin"
    assert data["validated"]["coordinates"]["lat"] == pytest.approx(30.2672)
    assert data["suggestions"] is None


def test_validate_ambiguous_city_offers_disambiguation(client):
    response = client.post("/api/validate-location", json={"location": "Paris"})

    data = response.json()
    assert data["valid"] is True
    assert data["validated"]["components"]["country"] == "France"
    assert data["disambiguation"]["required"] is True
    options = data["disambiguation"]["options"]
    assert [o["components"]["country_code"] for o in options] == ["FR", "US", "CA"]
    assert len(data["alternatives"]) == 2


def test_validate_weak_match_gets_suggestions(client):
    response = client.post(
        "/api/validate-location",
        json={"location": "Springfield", "include_alternatives": False, "fuzzy_match": False},
    )

    data = response.json()
    assert data["valid"] is True
    assert data["suggestions"][:2] == [
        'Try: "Springfield, Illinois"',
        'Try: "Springfield, United States"',
    ]
    assert len(data["suggestions"]) <= 3


def test_validate_unknown_place_is_not_an_error(client):
    response = client.post("/api/validate-location", json={"location": "Narnia"})

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert data["confidence"] == 0
    assert data["validated"] is None
    assert 0 < len(data["suggestions"]) <= 3


@pytest.mark.parametrize("body", [{}, {"location": ""}, {"location": "   "}])
def test_validate_requires_location(client, body):
    response = client.post("/api/validate-location", json=body)

    assert response.status_code == 400


def test_cache_stats(client):
    client.post("/api/validate-location", json={"location": "Austin"})
    client.post("/api/validate-location", json={"location": "Austin"})

    response = client.get("/api/geocoding/cache-stats")

    assert response.status_code == 200
    assert response.json()["size"] == 1
    assert response.json()["total_hits"] >= 1


def test_travel_bias_matches_leading_place_name():
    assert get_travel_bias("Paris").lat == pytest.approx(48.8566)
    assert get_travel_bias("london, uk") is not None
    assert get_travel_bias("New York") is None


def test_failure_suggestions_include_typo_corrections():
    suggestions = build_failure_suggestions("mami beach", "travel")

    assert suggestions[0] == 'Did you mean "Miami"?'
    assert len(suggestions) == 3
