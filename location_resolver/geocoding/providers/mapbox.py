"""
Mapbox Geocoding API provider.

Fast, accurate place search; primary provider in the default chain.
https://docs.mapbox.com/api/search/geocoding/
"""

import logging
from typing import List, Optional
from urllib.parse import quote

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
    parse_float,
    select_best_candidate,
)
from location_resolver.geocoding.scoring import calculate_confidence

logger = logging.getLogger(__name__)

MAPBOX_GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"

# Street addresses are excluded so street names never shadow cities
MAPBOX_PLACE_TYPES = "country,region,district,place,locality,neighborhood,poi"

ADMINISTRATIVE_TYPES = {"place", "locality"}

PLACE_TYPE_MAP = {
    "neighborhood": LocationType.NEIGHBORHOOD,
    "poi": LocationType.LANDMARK,
    "region": LocationType.REGION,
    "district": LocationType.REGION,
    "country": LocationType.COUNTRY,
}


def _category(item_id) -> str:
    return item_id.split(".", 1)[0] if isinstance(item_id, str) else ""


def _short_code(item: dict) -> Optional[str]:
    code = item.get("short_code")
    return code.upper() if isinstance(code, str) and code else None


def _properties(feature: dict) -> dict:
    properties = feature.get("properties")
    return properties if isinstance(properties, dict) else {}


def _context(feature: dict) -> List[dict]:
    context = feature.get("context")
    if not isinstance(context, list):
        return []
    return [item for item in context if isinstance(item, dict)]


def _feature_country_code(feature: dict) -> Optional[str]:
    if _category(feature.get("id")) == "country":
        return _short_code(_properties(feature))
    for item in _context(feature):
        if _category(item.get("id")) == "country" and _short_code(item):
            return _short_code(item)
    return None


def _place_types(feature: dict) -> List[str]:
    place_types = feature.get("place_type")
    if not isinstance(place_types, list):
        return []
    return [t for t in place_types if isinstance(t, str)]


def _feature_coordinates(feature: dict) -> Optional[Coordinates]:
    center = feature.get("center")
    if not isinstance(center, list) or len(center) != 2:
        return None
    lng, lat = center
    if not is_valid_coordinate(lat, lng):
        return None
    return Coordinates(lat=float(lat), lng=float(lng))


def transform_mapbox_feature(feature: dict, original_query: str) -> Optional[GeocodeResult]:
    """
    Convert a Mapbox feature into a GeocodeResult.

    Returns None if the feature has no usable coordinates.
    """
    coordinates = _feature_coordinates(feature)
    if coordinates is None:
        return None

    components = AddressComponents()

    def apply(category: str, text, short_code: Optional[str] = None):
        text = text if isinstance(text, str) else None
        if category == "place":
            components.city = text
        elif category == "region":
            components.state = text
        elif category == "country":
            components.country = text
            components.country_code = short_code
        elif category == "neighborhood":
            components.neighborhood = text
        elif category == "postcode":
            components.postal_code = text

    for item in _context(feature):
        apply(_category(item.get("id")), item.get("text"), _short_code(item))

    # The feature itself is the most specific component
    apply(
        _category(feature.get("id")),
        feature.get("text"),
        _short_code(_properties(feature)),
    )

    place_types = _place_types(feature) or ["place"]
    location_type = PLACE_TYPE_MAP.get(place_types[0], LocationType.CITY)

    text = feature.get("text") if isinstance(feature.get("text"), str) else ""
    display_name = feature.get("place_name")
    if not isinstance(display_name, str) or not display_name:
        display_name = text
    confidence = calculate_confidence(
        original_query,
        display_name,
        parse_float(feature.get("relevance"), 1.0),
    )

    return GeocodeResult(
        location=text or display_name.split(",")[0],
        confidence=confidence,
        coordinates=coordinates,
        components=components,
        display_name=display_name,
        type=location_type,
        providers=["mapbox"],
    )


class MapboxGeocoder(BaseGeocoder):
    """
    Mapbox Geocoding API provider.

    Pros:
    - Fast and accurate for cities and countries
    - Global coverage
    - Relevance score per feature

    Cons:
    - Requires access token
    - Paid beyond the free tier

    Usage:
        geocoder = MapboxGeocoder()  # Uses MAPBOX_ACCESS_TOKEN from env
        result = await geocoder.geocode("Austin", GeocodeOptions())
    """

    def __init__(self, access_token: Optional[str] = None, **kwargs):
        """
        Initialize Mapbox Geocoder.

        Args:
            access_token: Mapbox token (uses settings if not provided)
        """
        super().__init__(**kwargs)
        self.access_token = access_token if access_token is not None else settings.MAPBOX_ACCESS_TOKEN

    @property
    def provider_name(self) -> str:
        return "mapbox"

    async def geocode(
        self,
        query: str,
        options: GeocodeOptions,
    ) -> Optional[GeocodeResult]:
        """
        Geocode a place name using Mapbox.

        Args:
            query: Normalized place name
            options: Resolution options (country, bias location, result limit)

        Returns:
            GeocodeResult if successful, None if Mapbox had no match
        """
        if not self.access_token:
            raise ProviderError(
                "MAPBOX_ACCESS_TOKEN not configured",
                provider=self.provider_name,
                query=query
            )

        params = {
            "access_token": self.access_token,
            "types": MAPBOX_PLACE_TYPES,
            "limit": str(min(max(options.max_results, 1), 10)),
        }
        if options.preferred_country:
            params["country"] = options.preferred_country.lower()
        if options.bias_location:
            params["proximity"] = f"{options.bias_location.lng},{options.bias_location.lat}"

        data = await self._get_json(
            MAPBOX_GEOCODING_URL.format(query=quote(query, safe="")),
            params=params,
            headers={"User-Agent": settings.GEOCODING_USER_AGENT},
            query=query,
        )

        features = data.get("features") if isinstance(data, dict) else None
        features = [
            f for f in (features if isinstance(features, list) else [])
            if isinstance(f, dict) and _feature_coordinates(f) is not None
        ]
        if not features:
            logger.debug(f"Mapbox: No results for {query}")
            return None

        best = select_best_candidate(
            features,
            is_administrative=lambda f: bool(ADMINISTRATIVE_TYPES & set(_place_types(f))),
            importance=lambda f: parse_float(f.get("relevance"), 0.0),
            country_code=_feature_country_code,
            preferred_country=options.preferred_country,
        )
        return transform_mapbox_feature(best, query)
