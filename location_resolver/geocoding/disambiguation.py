"""
Alternative interpretations for ambiguous place names.

Only names on an explicit allow-list trigger disambiguation ("Paris" could
be France or Texas). Widening coverage means editing AMBIGUOUS_PLACE_NAMES,
not the lookup code.
"""

import asyncio
import logging
import re
from typing import Iterable, List, Optional

from location_resolver.core.utils.geo import haversine_distance
from location_resolver.geocoding.base import (
    BaseGeocoder,
    GeocodeOptions,
    GeocodeResult,
    ProviderError,
)

logger = logging.getLogger(__name__)

AMBIGUOUS_PLACE_NAMES = frozenset({
    "paris", "london", "berlin", "cambridge", "oxford", "manchester",
    "birmingham", "bristol", "glasgow", "dublin", "york", "newcastle",
    "springfield", "franklin", "georgetown", "madison", "clinton",
    "athens", "rome", "florence", "milan", "geneva", "basel",
    "portland", "richmond", "victoria", "perth", "hamilton", "kingston",
})

# Countries probed for other places sharing the name
ALTERNATIVE_COUNTRIES = ("us", "ca", "gb", "fr", "de", "it", "es", "au")

MAX_ALTERNATIVES = 3


def is_ambiguous(query: str) -> bool:
    """
    Check whether a normalized query is a known ambiguous place name.

    Qualified queries ("Paris, Texas") are not ambiguous.

    Example:
        >>> is_ambiguous("Paris")
        True
        >>> is_ambiguous("Paris, France")
        False
    """
    key = re.sub(r"[^\w\s]", "", query or "").lower()
    key = " ".join(key.split())
    return key in AMBIGUOUS_PLACE_NAMES


class DisambiguationFinder:
    """
    Find same-name places in other countries.

    Each candidate country gets one country-restricted lookup (limit 1)
    against a single provider, normally the free one. Lookups run
    concurrently under a small bound; a failing lookup is logged and
    skipped without affecting the others.

    Usage:
        finder = DisambiguationFinder(NominatimGeocoder())
        alternatives = await finder.find_alternatives("Paris", primary, GeocodeOptions())
    """

    def __init__(
        self,
        provider: BaseGeocoder,
        min_confidence: Optional[float] = None,
        min_distance_km: Optional[float] = None,
        concurrency: Optional[int] = None,
        timeout: Optional[float] = None,
        countries: Iterable[str] = ALTERNATIVE_COUNTRIES,
        max_alternatives: int = MAX_ALTERNATIVES,
    ):
        from location_resolver.core import settings

        self.provider = provider
        self.min_confidence = (
            min_confidence if min_confidence is not None
            else settings.ALTERNATIVE_MIN_CONFIDENCE
        )
        self.min_distance_km = (
            min_distance_km if min_distance_km is not None
            else settings.ALTERNATIVE_MIN_DISTANCE_KM
        )
        self.concurrency = max(1, concurrency or settings.DISAMBIGUATION_CONCURRENCY)
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT
        self.countries = tuple(c.lower() for c in countries)
        self.max_alternatives = max_alternatives

    def is_ambiguous(self, query: str) -> bool:
        return is_ambiguous(query)

    async def find_alternatives(
        self,
        query: str,
        primary: GeocodeResult,
        options: GeocodeOptions,
    ) -> List[GeocodeResult]:
        """
        Look up other interpretations of an ambiguous query.

        Args:
            query: Normalized query that produced `primary`
            primary: The accepted result
            options: Options of the original resolution

        Returns:
            Up to `max_alternatives` results in other countries, by confidence
        """
        if not is_ambiguous(query):
            return []

        primary_country = (primary.components.country_code or "").lower()
        countries = [c for c in self.countries if c != primary_country]
        semaphore = asyncio.Semaphore(self.concurrency)

        async def lookup(country: str) -> Optional[GeocodeResult]:
            country_options = options.replace(
                preferred_country=country,
                max_results=1,
                include_alternatives=False,
                bias_location=None,
            )
            async with semaphore:
                try:
                    return await asyncio.wait_for(
                        self.provider.geocode(query, country_options),
                        timeout=self.timeout,
                    )
                except asyncio.TimeoutError:
                    logger.warning(f"Disambiguation lookup timed out for {query} in {country}")
                except ProviderError as e:
                    logger.warning(f"Disambiguation lookup failed for {query} in {country}: {e}")
                except Exception as e:
                    logger.error(f"Disambiguation lookup error for {query} in {country}: {e!r}")
                return None

        candidates = await asyncio.gather(*(lookup(c) for c in countries))

        alternatives: List[GeocodeResult] = []
        for candidate in candidates:
            if candidate is None or candidate.confidence <= self.min_confidence:
                continue
            candidate_country = (candidate.components.country_code or "").lower()
            if primary_country and candidate_country == primary_country:
                continue
            if not self._is_distinct(candidate, [primary, *alternatives]):
                continue
            alternatives.append(candidate)

        alternatives.sort(key=lambda r: r.confidence, reverse=True)
        logger.debug(f"Found {len(alternatives)} alternatives for {query}")
        return alternatives[:self.max_alternatives]

    def _is_distinct(self, candidate: GeocodeResult, others: List[GeocodeResult]) -> bool:
        for other in others:
            distance = haversine_distance(
                candidate.coordinates.lat, candidate.coordinates.lng,
                other.coordinates.lat, other.coordinates.lng,
                unit='kilometers',
            )
            if distance < self.min_distance_km:
                return False
        return True
