"""
Nominatim (OpenStreetMap) Geocoder provider.

Free geocoding using OpenStreetMap data.
https://nominatim.org/
"""

import logging
from typing import Optional

from location_resolver.core import settings
from location_resolver.core.utils.geo import calculate_bounding_box, is_valid_coordinate
from location_resolver.geocoding.base import (
    AddressComponents,
    BaseGeocoder,
    Coordinates,
    GeocodeOptions,
    GeocodeResult,
    LocationType,
    parse_float,
    select_best_candidate,
)
from location_resolver.geocoding.scoring import calculate_confidence

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"

SETTLEMENT_TYPES = {"city", "town", "village"}

# Half-width in degrees of the viewbox used to bias results
BIAS_VIEWBOX_DEGREES = 0.5


def _coordinates(result: dict) -> Optional[Coordinates]:
    lat = parse_float(result.get("lat"), float("nan"))
    lng = parse_float(result.get("lon"), float("nan"))
    if not is_valid_coordinate(lat, lng):
        return None
    return Coordinates(lat=lat, lng=lng)


def _address(result: dict) -> dict:
    address = result.get("address")
    if not isinstance(address, dict):
        return {}
    return {key: value for key, value in address.items() if isinstance(value, str)}


def _country_code(result: dict) -> Optional[str]:
    code = _address(result).get("country_code")
    return code.upper() if code else None


def _location_type(result: dict) -> LocationType:
    osm_class = result.get("class", "")
    osm_type = result.get("type", "")

    if osm_class == "place":
        if osm_type in ("neighbourhood", "suburb", "quarter"):
            return LocationType.NEIGHBORHOOD
        if osm_type in ("state", "region", "province", "county"):
            return LocationType.REGION
        if osm_type == "country":
            return LocationType.COUNTRY
        return LocationType.CITY
    if osm_class in ("tourism", "historic"):
        return LocationType.LANDMARK
    if osm_class == "boundary" and osm_type == "administrative":
        return LocationType.REGION
    return LocationType.CITY


def transform_nominatim_result(result: dict, original_query: str) -> Optional[GeocodeResult]:
    """
    Convert a Nominatim search hit into a GeocodeResult.

    Returns None if the hit has no usable coordinates.
    """
    coordinates = _coordinates(result)
    if coordinates is None:
        return None

    address = _address(result)
    components = AddressComponents(
        city=address.get("city") or address.get("town") or address.get("village"),
        state=address.get("state"),
        country=address.get("country"),
        country_code=_country_code(result),
        postal_code=address.get("postcode"),
        neighborhood=address.get("neighbourhood") or address.get("suburb"),
    )

    display_name = result.get("display_name")
    if not isinstance(display_name, str):
        display_name = ""
    name = result.get("name")
    confidence = calculate_confidence(
        original_query,
        display_name,
        parse_float(result.get("importance"), 0.5),
    )

    return GeocodeResult(
        location=(name if isinstance(name, str) else "") or display_name.split(",")[0],
        confidence=confidence,
        coordinates=coordinates,
        components=components,
        display_name=display_name,
        type=_location_type(result),
        providers=["nominatim"],
    )


class NominatimGeocoder(BaseGeocoder):
    """
    Nominatim (OpenStreetMap) Geocoder.

    Pros:
    - Free, no credential
    - Good global coverage
    - Country filtering, used for disambiguation lookups

    Cons:
    - Strict rate limiting (1 request/second)
    - Variable accuracy
    - Requires user agent

    Usage:
        geocoder = NominatimGeocoder()
        result = await geocoder.geocode("Paris", GeocodeOptions(preferred_country="us"))
    """

    def __init__(self, user_agent: Optional[str] = None, **kwargs):
        """
        Initialize Nominatim Geocoder.

        Args:
            user_agent: User agent string (required by Nominatim TOS)
        """
        super().__init__(**kwargs)
        self.user_agent = user_agent or settings.GEOCODING_USER_AGENT

    @property
    def provider_name(self) -> str:
        return "nominatim"

    async def geocode(
        self,
        query: str,
        options: GeocodeOptions,
    ) -> Optional[GeocodeResult]:
        """
        Geocode a place name using Nominatim.

        Args:
            query: Normalized place name
            options: Resolution options (country, bias location, result limit)

        Returns:
            GeocodeResult if successful, None if Nominatim had no match
        """
        params = {
            "q": query,
            "format": "json",
            "addressdetails": "1",
            "extratags": "1",
            "namedetails": "1",
            "limit": str(min(max(options.max_results, 1), 50)),
        }
        if options.preferred_country:
            params["countrycodes"] = options.preferred_country.lower()
        if options.bias_location:
            box = calculate_bounding_box(
                options.bias_location.lat,
                options.bias_location.lng,
                BIAS_VIEWBOX_DEGREES,
            )
            params["viewbox"] = f"{box['min_lng']},{box['max_lat']},{box['max_lng']},{box['min_lat']}"

        headers = {
            "User-Agent": self.user_agent,
            "Accept-Language": "en",
            "Accept": "application/json",
        }

        data = await self._get_json(NOMINATIM_URL, params=params, headers=headers, query=query)

        if not isinstance(data, list):
            data = []
        candidates = [r for r in data if isinstance(r, dict) and _coordinates(r) is not None]
        if not candidates:
            logger.debug(f"Nominatim: No results for {query}")
            return None

        best = select_best_candidate(
            candidates,
            is_administrative=lambda r: isinstance(r.get("type"), str) and r["type"] in SETTLEMENT_TYPES,
            importance=lambda r: parse_float(r.get("importance"), 0.0),
            country_code=_country_code,
            preferred_country=options.preferred_country,
        )
        return transform_nominatim_result(best, query)
