"""
Response schemas for the Location Resolver API.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class CoordinatesResponse(BaseModel):
    """WGS84 coordinates."""

    lat: float = Field(..., description="Latitude")
    lng: float = Field(..., description="Longitude")


class ComponentsResponse(BaseModel):
    """Structured address parts."""

    city: Optional[str] = Field(None, description="City or locality")
    state: Optional[str] = Field(None, description="State or region")
    country: Optional[str] = Field(None, description="Country name")
    country_code: Optional[str] = Field(None, description="ISO country code")
    postal_code: Optional[str] = Field(None, description="Postal code")
    neighborhood: Optional[str] = Field(None, description="Neighborhood")


class GeocodeResultResponse(BaseModel):
    """A resolved location."""

    location: str = Field(..., description="Short label, e.g. city name")
    confidence: float = Field(..., ge=0, le=0.95, description="Match confidence")
    coordinates: CoordinatesResponse = Field(..., description="Resolved point")
    components: ComponentsResponse = Field(..., description="Address components")
    display_name: str = Field(..., description="Full provider label for presentation")
    type: str = Field(..., description="city, neighborhood, landmark, region or country")
    providers: List[str] = Field(default_factory=list, description="Providers that produced this result")
    alternatives: Optional[List["GeocodeResultResponse"]] = Field(
        None, description="Same-name places elsewhere, by confidence"
    )
    geocoded_at: str = Field(..., description="ISO 8601 timestamp")


GeocodeResultResponse.model_rebuild()


class DisambiguationResponse(BaseModel):
    """Prompt for choosing between same-name places."""

    required: bool = Field(..., description="Whether the user should pick a location")
    options: List[GeocodeResultResponse] = Field(..., description="Primary result then alternatives")
    message: str = Field(..., description="Prompt to show the user")


class LocationValidationResponse(BaseModel):
    """Location validation outcome."""

    valid: bool = Field(..., description="Whether a confident match was found")
    confidence: float = Field(..., description="Confidence of the validated result, 0 if none")
    validated: Optional[GeocodeResultResponse] = Field(None, description="Best match")
    alternatives: Optional[List[GeocodeResultResponse]] = Field(
        None, description="Same-name places in other countries"
    )
    disambiguation: Optional[DisambiguationResponse] = Field(
        None, description="Present when the name is ambiguous"
    )
    suggestions: Optional[List[str]] = Field(None, description="Hints for a better query")


class CacheStatsResponse(BaseModel):
    """Geocoding cache telemetry."""

    size: int = Field(..., description="Entries currently cached")
    total_hits: int = Field(..., description="Cache hits since start")
    total_misses: int = Field(..., description="Cache misses since start")
