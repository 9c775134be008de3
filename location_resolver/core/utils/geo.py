"""
Geographic utility functions for coordinate calculations.

This module consolidates the geographic calculations used across the codebase:
- Haversine distance calculation (meters, kilometers, miles)
- Coordinate range validation
- Bounding boxes around a bias point

Usage:
    from location_resolver.core.utils.geo import haversine_distance

    # Distance between Paris, France and Paris, Texas in kilometers
    distance_km = haversine_distance(48.8566, 2.3522, 33.6609, -95.5555, unit='kilometers')
"""

import math
from typing import Any, Literal

# Mean Earth radius per distance unit
EARTH_RADIUS = {
    'meters': 6_371_000.0,
    'kilometers': 6_371.0,
    'miles': 3_958.8,
}

DistanceUnit = Literal['meters', 'kilometers', 'miles']


def haversine_distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    unit: DistanceUnit = 'meters'
) -> float:
    """
    Great-circle distance between two WGS84 points.

    Used to tell same-name places apart (Paris, France vs Paris, Texas) and
    to report how far providers disagree.

    Example:
        >>> round(haversine_distance(51.5074, -0.1278, 48.8566, 2.3522, unit='kilometers'))
        344
    """
    radius = EARTH_RADIUS.get(unit, EARTH_RADIUS['meters'])

    lat1_rad, lat2_rad = math.radians(lat1), math.radians(lat2)
    half_dlat = math.radians(lat2 - lat1) / 2
    half_dlng = math.radians(lng2 - lng1) / 2

    h = math.sin(half_dlat) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(half_dlng) ** 2
    return 2 * radius * math.asin(min(1.0, math.sqrt(h)))


def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    """
    Check that a latitude/longitude pair is numeric and inside WGS84 range.

    Example:
        >>> is_valid_coordinate(30.2672, -97.7431)  # Austin
        True
        >>> is_valid_coordinate(91.0, 0.0)
        False
    """
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if math.isnan(lat) or math.isnan(lng):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def calculate_bounding_box(
    lat: float,
    lng: float,
    delta_degrees: float
) -> dict:
    """
    Calculate a square bounding box around a point, clamped to valid ranges.

    Args:
        lat: Center latitude
        lng: Center longitude
        delta_degrees: Half-width of the box in degrees

    Returns:
        Dictionary with min_lat, max_lat, min_lng, max_lng
    """
    return {
        "min_lat": max(-90.0, lat - delta_degrees),
        "max_lat": min(90.0, lat + delta_degrees),
        "min_lng": max(-180.0, lng - delta_degrees),
        "max_lng": min(180.0, lng + delta_degrees),
    }
