"""
Pydantic schemas for API request/response models.
"""

from api.schemas.requests import LocationValidationRequest
from api.schemas.responses import (
    CoordinatesResponse,
    ComponentsResponse,
    GeocodeResultResponse,
    DisambiguationResponse,
    LocationValidationResponse,
    CacheStatsResponse,
)

__all__ = [
    "LocationValidationRequest",
    "CoordinatesResponse",
    "ComponentsResponse",
    "GeocodeResultResponse",
    "DisambiguationResponse",
    "LocationValidationResponse",
    "CacheStatsResponse",
]
