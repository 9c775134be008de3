"""
API configuration module.

Centralizes all configuration for the Location Resolver API.
"""

from location_resolver.core import settings as core_settings


class APISettings:
    """API-specific settings extending core settings."""

    # API-specific settings
    API_TITLE = "Location Resolver API"
    API_DESCRIPTION = "Travel location validation, disambiguation and typo recovery"
    API_VERSION = "1.0.0"

    # CORS settings
    CORS_ORIGINS = [origin.strip() for origin in core_settings.CORS_ORIGINS.split(",")]
    CORS_ALLOW_CREDENTIALS = True
    CORS_ALLOW_METHODS = ["*"]
    CORS_ALLOW_HEADERS = ["*"]

    @classmethod
    def validate_mapbox(cls) -> bool:
        """Check if Mapbox token is configured."""
        return core_settings.validate_mapbox()

    @classmethod
    def validate_google_geocoding(cls) -> bool:
        """Check if Google Geocoding API key is configured."""
        return core_settings.validate_google_geocoding()


settings = APISettings()
