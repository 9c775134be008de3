"""
Core module providing shared configuration and utilities.

This module consolidates common functionality used across the codebase:
- Configuration management (settings, environment variables)
- Utility functions (geo)

Usage:
    from location_resolver.core import settings
    from location_resolver.core.utils import haversine_distance
"""

from location_resolver.core.config import settings, Settings

__all__ = [
    "settings",
    "Settings",
]
