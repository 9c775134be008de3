"""
Place-name resolution for travel search.

Resolves free-text locations ("nyc", "Paris", "Mami") to coordinates
through a fallback chain of providers:
- Mapbox: Mapbox Geocoding API (token, relevance scored)
- Nominatim: OpenStreetMap (free, 1 req/sec limit)
- Google: Google Geocoding API (paid, accurate)

Usage:
    from location_resolver.geocoding import LocationResolver, GeocodeOptions

    resolver = LocationResolver()
    result = await resolver.resolve("Austin")
    result = await resolver.resolve(
        "Paris", GeocodeOptions(include_alternatives=True)
    )
    guesses = await resolver.resolve_fuzzy("Mami")
"""

from location_resolver.geocoding.base import (
    AddressComponents,
    BaseGeocoder,
    Coordinates,
    GeocodeOptions,
    GeocodeResult,
    LocationType,
    ProviderError,
)
from location_resolver.geocoding.cache import ResultCache
from location_resolver.geocoding.disambiguation import DisambiguationFinder, is_ambiguous
from location_resolver.geocoding.normalizer import normalize_query
from location_resolver.geocoding.providers.google import GoogleGeocoder
from location_resolver.geocoding.providers.mapbox import MapboxGeocoder
from location_resolver.geocoding.providers.nominatim import NominatimGeocoder
from location_resolver.geocoding.scoring import calculate_confidence
from location_resolver.geocoding.facade import (
    LocationResolver,
    build_provider_chain,
    build_resolver,
    compare_providers,
    get_geocoder,
)

__all__ = [
    # Data types
    "AddressComponents",
    "Coordinates",
    "GeocodeOptions",
    "GeocodeResult",
    "LocationType",
    "ProviderError",
    # Providers
    "BaseGeocoder",
    "GoogleGeocoder",
    "MapboxGeocoder",
    "NominatimGeocoder",
    # Building blocks
    "DisambiguationFinder",
    "ResultCache",
    "calculate_confidence",
    "is_ambiguous",
    "normalize_query",
    # Facade
    "LocationResolver",
    "build_provider_chain",
    "build_resolver",
    "compare_providers",
    "get_geocoder",
]
