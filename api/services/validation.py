"""
Location validation service.

Wraps LocationResolver with travel-context biasing and user-facing hints:
- bias well-known tourist cities toward the destination travellers mean
- fall back to typo correction for weak matches
- suggest better queries when confidence is low or nothing matched
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from location_resolver.geocoding import (
    Coordinates,
    GeocodeOptions,
    GeocodeResult,
    LocationResolver,
    LocationType,
    normalize_query,
)
from location_resolver.geocoding.fuzzy import COMMON_MISSPELLINGS

logger = logging.getLogger(__name__)

VALID_CONFIDENCE = 0.5
SUGGESTION_CONFIDENCE = 0.8
SPECIFIC_HINT_CONFIDENCE = 0.7
MAX_SUGGESTIONS = 3

# Travellers asking for "Paris" nearly always mean France, not Texas
TRAVEL_BIAS_LOCATIONS = {
    "paris": Coordinates(lat=48.8566, lng=2.3522),
    "london": Coordinates(lat=51.5074, lng=-0.1278),
    "berlin": Coordinates(lat=52.5200, lng=13.4050),
    "cambridge": Coordinates(lat=52.2053, lng=0.1218),
    "dublin": Coordinates(lat=53.3498, lng=-6.2603),
    "york": Coordinates(lat=53.9600, lng=-1.0873),
    "manchester": Coordinates(lat=53.4808, lng=-2.2426),
    "birmingham": Coordinates(lat=52.4862, lng=-1.8904),
}

TRAVEL_HINTS = [
    'Try popular destinations like "Miami", "New York", "Los Angeles", or "San Francisco"',
    'Include country name for international destinations like "Paris, France" or "London, UK"',
]

GENERAL_HINTS = [
    'Check spelling and try including state/country (e.g., "Austin, Texas")',
    "Use full city names instead of abbreviations",
]


@dataclass
class ValidationOutcome:
    """Result of validating a single location string."""

    valid: bool
    confidence: float
    validated: Optional[GeocodeResult] = None
    alternatives: Optional[List[GeocodeResult]] = None
    disambiguation_options: Optional[List[GeocodeResult]] = None
    disambiguation_message: Optional[str] = None
    suggestions: Optional[List[str]] = field(default=None)


def get_travel_bias(location: str) -> Optional[Coordinates]:
    """
    Bias point for well-known tourist cities.

    Only the leading place name counts, so "New York" is not biased
    toward York, England.

    Example:
        >>> get_travel_bias("paris")
        Coordinates(lat=48.8566, lng=2.3522)
        >>> get_travel_bias("New York") is None
        True
    """
    head = normalize_query(location).split(",")[0]
    return TRAVEL_BIAS_LOCATIONS.get(head.strip().lower())


def build_suggestions(
    location: str,
    result: GeocodeResult,
    fuzzy_results: List[GeocodeResult],
) -> List[str]:
    """Hints for a weak (but present) match."""
    suggestions: List[str] = []

    if result.components.country:
        if result.components.state:
            suggestions.append(f'Try: "{location}, {result.components.state}"')
        suggestions.append(f'Try: "{location}, {result.components.country}"')

    for fuzzy_result in fuzzy_results[:2]:
        if fuzzy_result.display_name != result.display_name:
            suggestions.append(f'Did you mean: "{fuzzy_result.display_name}"?')

    if result.type == LocationType.CITY and result.confidence < SPECIFIC_HINT_CONFIDENCE:
        suggestions.append(
            f'Try a more specific location like "{location} city center" or "{location} downtown"'
        )

    return suggestions[:MAX_SUGGESTIONS]


def build_failure_suggestions(location: str, context: str) -> List[str]:
    """Hints when nothing matched at all."""
    compact = re.sub(r"\s+", "", location.lower())
    suggestions = [
        f'Did you mean "{correction}"?'
        for typo, correction in COMMON_MISSPELLINGS.items()
        if typo in compact
    ]

    if context == "travel":
        suggestions.extend(TRAVEL_HINTS)
    suggestions.extend(GENERAL_HINTS)

    return suggestions[:MAX_SUGGESTIONS]


async def validate_location(
    resolver: LocationResolver,
    location: str,
    fuzzy_match: bool = True,
    include_alternatives: bool = True,
    preferred_country: Optional[str] = None,
    context: str = "travel",
) -> ValidationOutcome:
    """
    Validate a place name for search.

    Args:
        resolver: Shared LocationResolver
        location: Place name as typed
        fuzzy_match: Try typo corrections when the match is missing or weak
        include_alternatives: Attach same-name places in other countries
        preferred_country: ISO country code to prefer
        context: "travel" applies tourist-destination biasing

    Returns:
        ValidationOutcome (never raises for unknown places)
    """
    options = GeocodeOptions(
        preferred_country=preferred_country,
        include_alternatives=include_alternatives,
        fuzzy_matching=fuzzy_match,
        bias_location=get_travel_bias(location) if context == "travel" else None,
    )

    result = await resolver.resolve(location, options)
    fuzzy_results: List[GeocodeResult] = []

    if fuzzy_match and (result is None or result.confidence < resolver.fuzzy.trigger_confidence):
        logger.info(f"Trying fuzzy matching for: {location}")
        fuzzy_results = await resolver.resolve_fuzzy(location, options)
        best_confidence = result.confidence if result is not None else 0.0
        if fuzzy_results and fuzzy_results[0].confidence > best_confidence:
            result = fuzzy_results[0]

    if result is None:
        logger.info(f"Location validation complete: no match for {location}")
        return ValidationOutcome(
            valid=False,
            confidence=0.0,
            suggestions=build_failure_suggestions(location, context),
        )

    outcome = ValidationOutcome(
        valid=result.confidence >= VALID_CONFIDENCE,
        confidence=result.confidence,
        validated=result,
    )

    if include_alternatives and result.alternatives:
        outcome.alternatives = result.alternatives
        outcome.disambiguation_options = [result, *result.alternatives[:MAX_SUGGESTIONS]]
        outcome.disambiguation_message = (
            f'Multiple locations found for "{location}". '
            f"Please select the intended destination:"
        )

    if result.confidence < SUGGESTION_CONFIDENCE:
        outcome.suggestions = build_suggestions(location, result, fuzzy_results)

    logger.info(
        f"Location validation complete: {result.display_name} "
        f"(confidence: {result.confidence:.2f})"
    )
    return outcome
