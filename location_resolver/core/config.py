"""
Centralized configuration management for the travel location resolver.

All configuration is loaded from environment variables with sensible defaults.
Use the `settings` singleton for accessing configuration values.

Usage:
    from location_resolver.core.config import settings

    # Access configuration
    print(settings.PROVIDER_TIMEOUT)
    print(settings.provider_order)
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
# Search in common locations
_env_paths = [
    Path(__file__).parent.parent.parent / ".env",  # repository root
    Path.cwd() / ".env",  # Current working directory
]

for env_path in _env_paths:
    if env_path.exists():
        load_dotenv(env_path)
        break


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    # ==========================================================================
    # Provider Credentials
    # ==========================================================================
    MAPBOX_ACCESS_TOKEN: str = field(
        default_factory=lambda: os.getenv("MAPBOX_ACCESS_TOKEN", "")
    )
    GOOGLE_GEOCODING_API_KEY: str = field(
        default_factory=lambda: os.getenv("GOOGLE_GEOCODING_API_KEY", "")
    )
    GEOCODING_USER_AGENT: str = field(
        default_factory=lambda: os.getenv(
            "GEOCODING_USER_AGENT",
            "travel-location-resolver/1.0"
        )
    )

    # ==========================================================================
    # Provider Chain
    # ==========================================================================
    GEOCODING_PROVIDER_ORDER: str = field(
        default_factory=lambda: os.getenv(
            "GEOCODING_PROVIDER_ORDER", "mapbox,nominatim,google"
        )
    )
    ALTERNATIVES_PROVIDER: str = field(
        default_factory=lambda: os.getenv("ALTERNATIVES_PROVIDER", "nominatim")
    )
    PROVIDER_TIMEOUT: float = field(
        default_factory=lambda: float(os.getenv("PROVIDER_TIMEOUT", "8.0"))
    )

    # ==========================================================================
    # Confidence Thresholds
    # ==========================================================================
    ACCEPT_CONFIDENCE: float = field(
        default_factory=lambda: float(os.getenv("ACCEPT_CONFIDENCE", "0.5"))
    )
    FUZZY_TRIGGER_CONFIDENCE: float = field(
        default_factory=lambda: float(os.getenv("FUZZY_TRIGGER_CONFIDENCE", "0.7"))
    )
    FUZZY_ACCEPT_CONFIDENCE: float = field(
        default_factory=lambda: float(os.getenv("FUZZY_ACCEPT_CONFIDENCE", "0.6"))
    )

    # ==========================================================================
    # Disambiguation
    # ==========================================================================
    ALTERNATIVE_MIN_CONFIDENCE: float = field(
        default_factory=lambda: float(os.getenv("ALTERNATIVE_MIN_CONFIDENCE", "0.6"))
    )
    ALTERNATIVE_MIN_DISTANCE_KM: float = field(
        default_factory=lambda: float(os.getenv("ALTERNATIVE_MIN_DISTANCE_KM", "50"))
    )
    DISAMBIGUATION_CONCURRENCY: int = field(
        default_factory=lambda: int(os.getenv("DISAMBIGUATION_CONCURRENCY", "4"))
    )

    # ==========================================================================
    # Result Cache
    # ==========================================================================
    GEOCODE_CACHE_TTL_SECONDS: float = field(
        default_factory=lambda: float(os.getenv("GEOCODE_CACHE_TTL_SECONDS", str(24 * 3600)))
    )
    GEOCODE_CACHE_HIGH_CONFIDENCE_TTL_SECONDS: float = field(
        default_factory=lambda: float(
            os.getenv("GEOCODE_CACHE_HIGH_CONFIDENCE_TTL_SECONDS", str(7 * 24 * 3600))
        )
    )
    GEOCODE_CACHE_HIGH_CONFIDENCE: float = field(
        default_factory=lambda: float(os.getenv("GEOCODE_CACHE_HIGH_CONFIDENCE", "0.85"))
    )
    GEOCODE_CACHE_MAX_ENTRIES: int = field(
        default_factory=lambda: int(os.getenv("GEOCODE_CACHE_MAX_ENTRIES", "1000"))
    )

    # ==========================================================================
    # API
    # ==========================================================================
    CORS_ORIGINS: str = field(
        default_factory=lambda: os.getenv("CORS_ORIGINS", "*")
    )

    @property
    def provider_order(self) -> List[str]:
        """Provider names in fallback priority order."""
        return [
            name.strip().lower()
            for name in self.GEOCODING_PROVIDER_ORDER.split(",")
            if name.strip()
        ]

    def validate_mapbox(self) -> bool:
        """Check if Mapbox access token is configured."""
        return bool(self.MAPBOX_ACCESS_TOKEN)

    def validate_google_geocoding(self) -> bool:
        """Check if Google Geocoding API key is configured."""
        return bool(self.GOOGLE_GEOCODING_API_KEY)


# Singleton settings instance
settings = Settings()
