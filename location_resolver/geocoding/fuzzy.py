"""
Typo recovery for place-name queries.

When a query resolves to nothing, or only weakly, plausible corrections are
generated and resolved independently. Corrected results are labelled as
guesses so callers can present them apart from direct matches.
"""

import asyncio
import logging
import re
from typing import Awaitable, Callable, List, Optional

from location_resolver.geocoding.base import GeocodeOptions, GeocodeResult

logger = logging.getLogger(__name__)

# Well-known misspellings, matched as substrings of the query
COMMON_MISSPELLINGS = {
    "mami": "Miami",
    "chigago": "Chicago",
    "pheonix": "Phoenix",
    "sanfransisco": "San Francisco",
    "wasington": "Washington",
    "seatle": "Seattle",
    "sandiego": "San Diego",
    "lasvegas": "Las Vegas",
    "newyork": "New York",
    "losangeles": "Los Angeles",
    "philidelphia": "Philadelphia",
    "nashvile": "Nashville",
    "barcelonna": "Barcelona",
    "amsterdamn": "Amsterdam",
}

MAX_CANDIDATES = 3
MAX_RESULTS = 5

Resolver = Callable[[str, GeocodeOptions], Awaitable[Optional[GeocodeResult]]]


def generate_typo_variations(query: str, max_candidates: int = MAX_CANDIDATES) -> List[str]:
    """
    Generate corrected spellings of a query.

    Sources, in order:
    - the misspelling table (substring match)
    - spacing variants: spaces removed, or for long single words a space
      inserted 3-5 characters from the end ("Newportbeach")

    Example:
        >>> generate_typo_variations("Mami")
        ['Miami']
        >>> generate_typo_variations("San Fransisco")
        ['San Francisco', 'SanFransisco']
    """
    stripped = query.strip()
    lowered = stripped.lower()
    compact = re.sub(r"\s+", "", lowered)

    candidates: List[str] = []
    for typo, correction in COMMON_MISSPELLINGS.items():
        if typo in lowered:
            candidates.append(re.sub(re.escape(typo), correction, stripped, flags=re.IGNORECASE))
        elif typo in compact:
            candidates.append(correction)

    if re.search(r"\s", stripped):
        candidates.append(re.sub(r"\s+", "", stripped))
    elif len(stripped) > 6:
        for offset in range(3, 6):
            candidates.append(f"{stripped[:-offset]} {stripped[-offset:]}")

    unique: List[str] = []
    seen = {lowered}
    for candidate in candidates:
        key = candidate.lower()
        if key not in seen:
            seen.add(key)
            unique.append(candidate)
    return unique[:max_candidates]


class FuzzyCorrector:
    """
    Resolve typo-corrected variants of a query.

    Args:
        resolve: Coroutine resolving (query, options) to a result or None
        trigger_confidence: Variants are tried only below this confidence
        accept_confidence: Corrected results are kept only above this
    """

    def __init__(
        self,
        resolve: Resolver,
        trigger_confidence: float,
        accept_confidence: float,
        max_results: int = MAX_RESULTS,
    ):
        self._resolve = resolve
        self.trigger_confidence = trigger_confidence
        self.accept_confidence = accept_confidence
        self.max_results = max_results

    async def correct(self, query: str, options: GeocodeOptions) -> List[GeocodeResult]:
        """
        Resolve a query and, if needed, its corrected variants.

        Returns:
            Direct match first if present, then corrected guesses by
            confidence; at most `max_results` entries
        """
        direct = await self._resolve(query, options)
        if direct is not None and direct.confidence >= self.trigger_confidence:
            return [direct]

        variations = generate_typo_variations(query)
        if variations:
            logger.debug(f"Trying corrections for {query}: {variations}")

        resolved = await asyncio.gather(
            *(self._resolve(variation, options) for variation in variations),
            return_exceptions=True,
        )

        seen = {direct.display_name} if direct is not None else set()
        corrected: List[GeocodeResult] = []
        for variation, result in zip(variations, resolved):
            if isinstance(result, BaseException):
                logger.warning(f"Correction {variation!r} failed for {query}: {result!r}")
                continue
            if result is None or result.confidence <= self.accept_confidence:
                continue
            if result.display_name in seen:
                continue
            seen.add(result.display_name)
            result.location = f'{result.location} (did you mean "{variation}"?)'
            corrected.append(result)

        corrected.sort(key=lambda r: r.confidence, reverse=True)
        results = ([direct] if direct is not None else []) + corrected
        return results[:self.max_results]
