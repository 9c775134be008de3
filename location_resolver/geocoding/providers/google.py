"""
Google Geocoding API provider.

Paid, accurate geocoding service; last resort in the default chain.
https://developers.google.com/maps/documentation/geocoding
"""

import logging
from typing import Any, List, Optional, Set, Tuple

from location_resolver.core import settings
from location_resolver.core.utils.geo import is_valid_coordinate
from location_resolver.geocoding.base import (
    AddressComponents,
    BaseGeocoder,
    Coordinates,
    GeocodeOptions,
    GeocodeResult,
    LocationType,
    ProviderError,
    select_best_candidate,
)
from location_resolver.geocoding.scoring import calculate_confidence

logger = logging.getLogger(__name__)

GOOGLE_GEOCODING_URL = "https://maps.googleapis.com/maps/api/geocode/json"

# Google does not report a per-result relevance; its answers are generally high quality
GOOGLE_RELEVANCE = 0.9

# Half-width in degrees of the bounds used to bias results
BIAS_BOUNDS_DEGREES = 0.1

ADMINISTRATIVE_TYPES = {
    "locality",
    "postal_town",
    "colloquial_area",
    "administrative_area_level_1",
    "administrative_area_level_2",
    "administrative_area_level_3",
    "country",
}

LANDMARK_TYPES = {"point_of_interest", "tourist_attraction", "establishment", "natural_feature"}


def _types(item: dict) -> Set[str]:
    types = item.get("types")
    if not isinstance(types, list):
        return set()
    return {t for t in types if isinstance(t, str)}


def _address_components(result: dict) -> List[dict]:
    components = result.get("address_components")
    if not isinstance(components, list):
        return []
    return [c for c in components if isinstance(c, dict)]


def _lat_lng(result: dict) -> Tuple[Any, Any]:
    geometry = result.get("geometry")
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        return None, None
    return location.get("lat"), location.get("lng")


def _text(value) -> Optional[str]:
    return value if isinstance(value, str) else None


def _country_code(result: dict) -> Optional[str]:
    for component in _address_components(result):
        if "country" in _types(component):
            return _text(component.get("short_name"))
    return None


def _location_type(result: dict) -> LocationType:
    types = _types(result)
    if "locality" in types or "postal_town" in types:
        return LocationType.CITY
    if "neighborhood" in types or "sublocality" in types:
        return LocationType.NEIGHBORHOOD
    if types & LANDMARK_TYPES:
        return LocationType.LANDMARK
    if "administrative_area_level_1" in types or "administrative_area_level_2" in types:
        return LocationType.REGION
    if "country" in types:
        return LocationType.COUNTRY
    return LocationType.CITY


def transform_google_result(result: dict, original_query: str) -> Optional[GeocodeResult]:
    """
    Convert a Google geocoding result into a GeocodeResult.

    Returns None if the result has no usable coordinates.
    """
    lat, lng = _lat_lng(result)
    if not is_valid_coordinate(lat, lng):
        return None

    components = AddressComponents()
    for component in _address_components(result):
        types = _types(component)
        long_name = _text(component.get("long_name"))
        if "locality" in types:
            components.city = long_name
        elif "postal_town" in types and not components.city:
            components.city = long_name
        elif "administrative_area_level_1" in types:
            components.state = long_name
        elif "country" in types:
            components.country = long_name
            components.country_code = _text(component.get("short_name"))
        elif "neighborhood" in types:
            components.neighborhood = long_name
        elif "postal_code" in types:
            components.postal_code = long_name

    display_name = _text(result.get("formatted_address")) or ""
    confidence = calculate_confidence(original_query, display_name, GOOGLE_RELEVANCE)

    return GeocodeResult(
        location=components.city or display_name.split(",")[0],
        confidence=confidence,
        coordinates=Coordinates(lat=float(lat), lng=float(lng)),
        components=components,
        display_name=display_name,
        type=_location_type(result),
        providers=["google"],
    )


class GoogleGeocoder(BaseGeocoder):
    """
    Google Geocoding API provider.

    Pros:
    - Very accurate
    - Global coverage
    - Good address normalization

    Cons:
    - Requires API key
    - Paid service (~$5 per 1000 requests)

    Usage:
        geocoder = GoogleGeocoder()  # Uses GOOGLE_GEOCODING_API_KEY from env
        result = await geocoder.geocode("San Francisco", GeocodeOptions())
    """

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        """
        Initialize Google Geocoder.

        Args:
            api_key: Google API key (uses settings if not provided)
        """
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.GOOGLE_GEOCODING_API_KEY

    @property
    def provider_name(self) -> str:
        return "google"

    async def geocode(
        self,
        query: str,
        options: GeocodeOptions,
    ) -> Optional[GeocodeResult]:
        """
        Geocode a place name using Google Geocoding API.

        Args:
            query: Normalized place name
            options: Resolution options (region, bias bounds)

        Returns:
            GeocodeResult if successful, None on ZERO_RESULTS
        """
        if not self.api_key:
            raise ProviderError(
                "GOOGLE_GEOCODING_API_KEY not configured",
                provider=self.provider_name,
                query=query
            )

        params = {
            "address": query,
            "key": self.api_key,
        }
        if options.preferred_country:
            params["region"] = options.preferred_country.lower()
        if options.bias_location:
            lat, lng = options.bias_location.lat, options.bias_location.lng
            params["bounds"] = (
                f"{lat - BIAS_BOUNDS_DEGREES},{lng - BIAS_BOUNDS_DEGREES}|"
                f"{lat + BIAS_BOUNDS_DEGREES},{lng + BIAS_BOUNDS_DEGREES}"
            )

        data = await self._get_json(GOOGLE_GEOCODING_URL, params=params, query=query)
        if not isinstance(data, dict):
            raise ProviderError("Unexpected response shape", provider=self.provider_name, query=query)

        status = data.get("status")
        if status == "ZERO_RESULTS":
            logger.debug(f"Google: No results for {query}")
            return None
        if status != "OK":
            raise ProviderError(
                f"Google API status {status}: {data.get('error_message', '')}".strip(),
                provider=self.provider_name,
                query=query
            )

        results = data.get("results")
        results = [
            r for r in (results if isinstance(results, list) else [])
            if isinstance(r, dict) and is_valid_coordinate(*_lat_lng(r))
        ]
        if not results:
            return None

        best = select_best_candidate(
            results,
            is_administrative=lambda r: bool(ADMINISTRATIVE_TYPES & _types(r)),
            importance=lambda r: 0.0,
            country_code=_country_code,
            preferred_country=options.preferred_country,
        )
        return transform_google_result(best, query)
