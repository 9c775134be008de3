"""
Request schemas for the Location Resolver API.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field


class LocationValidationRequest(BaseModel):
    """Request body for location validation."""

    location: Optional[str] = Field(None, description="Free-text place name to validate")
    fuzzy_match: bool = Field(True, description="Try typo corrections for weak matches")
    include_alternatives: bool = Field(
        True, description="Look up same-name places in other countries"
    )
    preferred_country: Optional[str] = Field(
        None, description="ISO 3166-1 alpha-2 country code to prefer"
    )
    context: Literal["travel", "business", "vacation"] = Field(
        "travel", description="Search context; 'travel' biases toward tourist destinations"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "location": "Paris",
                "fuzzy_match": True,
                "include_alternatives": True,
                "context": "travel"
            }
        }
    }
