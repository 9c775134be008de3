"""
Shared fixtures: in-memory providers and result builders.
"""

import asyncio
import copy
from typing import Dict, List, Optional, Tuple, Union

import pytest

from location_resolver.geocoding.base import (
    AddressComponents,
    BaseGeocoder,
    Coordinates,
    GeocodeOptions,
    GeocodeResult,
    LocationType,
)

Response = Union[GeocodeResult, Exception, None]


class FakeGeocoder(BaseGeocoder):
    """Provider answering from a dict, recording every call."""

    def __init__(
        self,
        name: str = "fake",
        responses: Optional[Dict[str, Response]] = None,
        by_country: Optional[Dict[Tuple[str, str], Response]] = None,
        delay: float = 0.0,
    ):
        super().__init__(timeout=1.0)
        self.name = name
        self.responses = responses or {}
        self.by_country = by_country or {}
        self.delay = delay
        self.calls: List[Tuple[str, GeocodeOptions]] = []
        self.active = 0
        self.max_active = 0
        self.cancelled = False

    @property
    def provider_name(self) -> str:
        return self.name

    async def geocode(self, query: str, options: GeocodeOptions) -> Optional[GeocodeResult]:
        self.calls.append((query, options))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        finally:
            self.active -= 1

        country = (options.preferred_country or "").lower()
        if country and (query.lower(), country) in self.by_country:
            response = self.by_country[(query.lower(), country)]
        else:
            response = self.responses.get(query.lower())

        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)

    @property
    def queries(self) -> List[str]:
        return [query for query, _ in self.calls]


def build_result(
    location: str,
    confidence: float,
    lat: float = 30.2672,
    lng: float = -97.7431,
    display_name: Optional[str] = None,
    country: str = "United States",
    country_code: str = "US",
    state: Optional[str] = None,
    type: LocationType = LocationType.CITY,
    provider: str = "fake",
) -> GeocodeResult:
    return GeocodeResult(
        location=location,
        confidence=confidence,
        coordinates=Coordinates(lat=lat, lng=lng),
        display_name=display_name or f"{location}, {country}",
        type=type,
        components=AddressComponents(
            city=location,
            state=state,
            country=country,
            country_code=country_code,
        ),
        providers=[provider],
    )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_result():
    return build_result


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def paris_results():
    """Paris, France plus same-name towns in other countries."""
    return {
        "fr": build_result(
            "Paris", 0.9, lat=48.8566, lng=2.3522,
            display_name="Paris, Île-de-France, France",
            country="France", country_code="FR",
        ),
        "us": build_result(
            "Paris", 0.8, lat=33.6609, lng=-95.5555,
            display_name="Paris, Texas, United States",
            country="United States", country_code="US", state="Texas",
        ),
        "ca": build_result(
            "Paris", 0.7, lat=43.1939, lng=-80.3842,
            display_name="Paris, Ontario, Canada",
            country="Canada", country_code="CA", state="Ontario",
        ),
    }
