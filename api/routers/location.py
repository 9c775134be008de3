"""
Location validation endpoints.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from location_resolver.geocoding import GeocodeResult, LocationResolver
from api.dependencies import get_resolver
from api.schemas.requests import LocationValidationRequest
from api.schemas.responses import (
    CacheStatsResponse,
    DisambiguationResponse,
    GeocodeResultResponse,
    LocationValidationResponse,
)
from api.services.validation import validate_location

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Location"])


def _to_response(result: GeocodeResult) -> GeocodeResultResponse:
    return GeocodeResultResponse(**result.as_dict)


def _to_responses(results: Optional[List[GeocodeResult]]) -> Optional[List[GeocodeResultResponse]]:
    if results is None:
        return None
    return [_to_response(r) for r in results]


@router.post("/validate-location", response_model=LocationValidationResponse)
async def validate_location_endpoint(
    request: LocationValidationRequest,
    resolver: LocationResolver = Depends(get_resolver),
):
    """
    Validate a free-text location for search.

    Returns the best match with a confidence, same-name alternatives for
    ambiguous names, and suggestions for weak or failed matches. An
    unknown place is a normal response (valid=false), not an error.
    """
    if not request.location or not request.location.strip():
        raise HTTPException(
            status_code=400,
            detail="Location parameter is required and must be a non-empty string"
        )

    logger.info(f"Validating location: {request.location!r} (context: {request.context})")

    outcome = await validate_location(
        resolver,
        request.location,
        fuzzy_match=request.fuzzy_match,
        include_alternatives=request.include_alternatives,
        preferred_country=request.preferred_country,
        context=request.context,
    )

    disambiguation = None
    if outcome.disambiguation_options:
        disambiguation = DisambiguationResponse(
            required=True,
            options=_to_responses(outcome.disambiguation_options),
            message=outcome.disambiguation_message,
        )

    return LocationValidationResponse(
        valid=outcome.valid,
        confidence=outcome.confidence,
        validated=_to_response(outcome.validated) if outcome.validated else None,
        alternatives=_to_responses(outcome.alternatives),
        disambiguation=disambiguation,
        suggestions=outcome.suggestions,
    )


@router.get("/geocoding/cache-stats", response_model=CacheStatsResponse)
async def cache_stats(resolver: LocationResolver = Depends(get_resolver)):
    """Geocoding cache size and hit counts."""
    return CacheStatsResponse(**resolver.cache_stats())
