"""
Geocoding provider implementations.
"""

from location_resolver.geocoding.providers.mapbox import MapboxGeocoder
from location_resolver.geocoding.providers.nominatim import NominatimGeocoder
from location_resolver.geocoding.providers.google import GoogleGeocoder

__all__ = ["MapboxGeocoder", "NominatimGeocoder", "GoogleGeocoder"]
