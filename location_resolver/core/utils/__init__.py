"""
Shared utility functions for the travel location resolver.

Modules:
- geo: Geographic calculations (haversine, coordinate validation, bounding boxes)

Usage:
    from location_resolver.core.utils import haversine_distance

    # Calculate distance
    distance = haversine_distance(48.85, 2.35, 33.66, -95.55, unit='kilometers')
"""

from location_resolver.core.utils.geo import (
    haversine_distance,
    is_valid_coordinate,
    calculate_bounding_box,
)

__all__ = [
    # Geo utilities
    "haversine_distance",
    "is_valid_coordinate",
    "calculate_bounding_box",
]
