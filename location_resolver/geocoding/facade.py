"""
Geocoding facade providing a simple interface to all providers.

`LocationResolver` is the single entry point used by query analyzers,
listing search and the disambiguation UI:

    resolver = build_resolver()
    result = await resolver.resolve("Austin")
    guesses = await resolver.resolve_fuzzy("Mami")
    resolver.cache_stats()

Providers are tried in priority order and the first result above the
acceptance threshold wins; later providers are not queried.
"""

import asyncio
import copy
import logging
from typing import Dict, Iterable, List, Literal, Optional

from location_resolver.core import settings
from location_resolver.core.utils.geo import haversine_distance
from location_resolver.geocoding.base import (
    BaseGeocoder,
    GeocodeOptions,
    GeocodeResult,
    ProviderError,
)
from location_resolver.geocoding.cache import ResultCache, make_cache_key
from location_resolver.geocoding.disambiguation import DisambiguationFinder
from location_resolver.geocoding.fuzzy import FuzzyCorrector
from location_resolver.geocoding.inflight import InflightRequests
from location_resolver.geocoding.normalizer import normalize_query
from location_resolver.geocoding.providers.google import GoogleGeocoder
from location_resolver.geocoding.providers.mapbox import MapboxGeocoder
from location_resolver.geocoding.providers.nominatim import NominatimGeocoder

logger = logging.getLogger(__name__)

ProviderType = Literal["mapbox", "nominatim", "google"]

PROVIDERS = {
    "mapbox": MapboxGeocoder,
    "nominatim": NominatimGeocoder,
    "google": GoogleGeocoder,
}


def get_geocoder(provider: ProviderType = "nominatim", **kwargs) -> BaseGeocoder:
    """
    Get a geocoder instance by provider name.

    Args:
        provider: Provider name ("mapbox", "nominatim", "google")
        **kwargs: Passed to the provider constructor (session, timeout, credentials)

    Returns:
        Geocoder instance
    """
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider}. Choose from: {list(PROVIDERS.keys())}")

    return PROVIDERS[provider](**kwargs)


def build_provider_chain(order: Optional[Iterable[str]] = None, **kwargs) -> List[BaseGeocoder]:
    """Instantiate providers in fallback order (defaults to settings.provider_order)."""
    names = list(order) if order is not None else settings.provider_order
    return [get_geocoder(name, **kwargs) for name in names]


class LocationResolver:
    """
    Multi-provider location resolution with caching, disambiguation and typo recovery.

    Concurrent calls for the same query and options share one provider
    round-trip. Every caller receives its own copy of the result.
    """

    def __init__(
        self,
        providers: Optional[Iterable[BaseGeocoder]] = None,
        cache: Optional[ResultCache] = None,
        disambiguator: Optional[DisambiguationFinder] = None,
        accept_confidence: Optional[float] = None,
        fuzzy_trigger_confidence: Optional[float] = None,
        fuzzy_accept_confidence: Optional[float] = None,
        provider_timeout: Optional[float] = None,
    ):
        """
        Args:
            providers: Adapters in priority order (built from settings if None)
            cache: Result cache (a fresh one if None)
            disambiguator: Alternative finder (uses settings.ALTERNATIVES_PROVIDER if None)
            accept_confidence: Chain accepts results strictly above this
            fuzzy_trigger_confidence: Fuzzy correction runs below this
            fuzzy_accept_confidence: Corrected guesses are kept strictly above this
            provider_timeout: Upper bound in seconds for each provider call
        """
        self.providers: List[BaseGeocoder] = (
            list(providers) if providers is not None else build_provider_chain()
        )
        self.cache = cache if cache is not None else ResultCache()
        self.accept_confidence = (
            accept_confidence if accept_confidence is not None
            else settings.ACCEPT_CONFIDENCE
        )
        self.provider_timeout = (
            provider_timeout if provider_timeout is not None
            else settings.PROVIDER_TIMEOUT
        )
        self.disambiguator = (
            disambiguator if disambiguator is not None
            else DisambiguationFinder(self._alternatives_provider(), timeout=self.provider_timeout)
        )
        self.fuzzy = FuzzyCorrector(
            self.geocode,
            trigger_confidence=(
                fuzzy_trigger_confidence if fuzzy_trigger_confidence is not None
                else settings.FUZZY_TRIGGER_CONFIDENCE
            ),
            accept_confidence=(
                fuzzy_accept_confidence if fuzzy_accept_confidence is not None
                else settings.FUZZY_ACCEPT_CONFIDENCE
            ),
        )
        self._inflight = InflightRequests()

    def _alternatives_provider(self) -> BaseGeocoder:
        for provider in self.providers:
            if provider.provider_name == settings.ALTERNATIVES_PROVIDER:
                return provider
        return get_geocoder(settings.ALTERNATIVES_PROVIDER)

    async def geocode(
        self,
        query: str,
        options: Optional[GeocodeOptions] = None,
    ) -> Optional[GeocodeResult]:
        """
        Resolve a free-text place name.

        Args:
            query: Place name as typed ("nyc", "vacation rental near Disney World")
            options: Resolution options

        Returns:
            The first acceptable result, with alternatives attached when
            requested and the name is ambiguous; None if unresolved
        """
        options = options or GeocodeOptions()
        normalized = normalize_query(query)
        if not normalized:
            logger.info(f"Nothing geographic left in query: {query!r}")
            return None

        key = make_cache_key(normalized, options)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Using cached geocoding result for: {normalized}")
            return cached

        result = await self._inflight.run(
            key, lambda: self._resolve_and_cache(normalized, options, key)
        )
        return copy.deepcopy(result) if result is not None else None

    resolve = geocode

    async def fuzzy_geocode(
        self,
        query: str,
        options: Optional[GeocodeOptions] = None,
    ) -> List[GeocodeResult]:
        """
        Resolve a query, falling back to typo-corrected variants.

        Meant for callers whose `geocode()` result was missing or weak.

        Returns:
            Up to 5 results: the direct match first if present, then
            corrected guesses labelled 'did you mean'
        """
        return await self.fuzzy.correct(query, options or GeocodeOptions())

    resolve_fuzzy = fuzzy_geocode

    def cache_stats(self) -> Dict[str, int]:
        """Cache size and hit counts, for logging/telemetry."""
        return self.cache.stats()

    async def _resolve_and_cache(
        self,
        query: str,
        options: GeocodeOptions,
        key: str,
    ) -> Optional[GeocodeResult]:
        logger.info(f"Geocoding location: {query!r}")
        result = await self._run_chain(query, options)
        if result is None:
            return None

        if options.include_alternatives and self.disambiguator.is_ambiguous(query):
            result.alternatives = await self.disambiguator.find_alternatives(query, result, options)

        self.cache.set(key, result)
        return result

    async def _run_chain(
        self,
        query: str,
        options: GeocodeOptions,
    ) -> Optional[GeocodeResult]:
        for provider in self.providers:
            name = provider.provider_name
            try:
                result = await asyncio.wait_for(
                    provider.geocode(query, options),
                    timeout=self.provider_timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"{name}: Timeout after {self.provider_timeout}s for {query}")
                continue
            except ProviderError as e:
                logger.warning(f"{name}: Provider failed for {query}: {e}")
                continue
            except Exception as e:
                logger.error(f"{name}: Unexpected error for {query}: {e!r}")
                continue

            if result is None:
                logger.debug(f"{name}: No match for {query}")
                continue

            if result.confidence > self.accept_confidence:
                logger.info(
                    f"Selected {result.display_name} "
                    f"(confidence: {result.confidence:.2f}, provider: {name})"
                )
                return result

            logger.debug(
                f"{name}: Low confidence {result.confidence:.2f} for {query}, trying next provider"
            )

        logger.info(f"All geocoding providers exhausted for: {query}")
        return None


def build_resolver(**kwargs) -> LocationResolver:
    """Construct a resolver from settings; call once at service start."""
    return LocationResolver(**kwargs)


async def compare_providers(
    query: str,
    options: Optional[GeocodeOptions] = None,
    providers: Optional[List[str]] = None,
) -> Dict[str, Optional[GeocodeResult]]:
    """
    Compare geocoding results from multiple providers.

    Useful for validating accuracy or finding discrepancies. No confidence
    threshold is applied; a failing provider maps to None.

    Args:
        query: Place name to geocode
        options: Resolution options
        providers: List of providers to compare (default: all configured)

    Returns:
        Dict mapping provider name to result
    """
    options = options or GeocodeOptions()
    normalized = normalize_query(query)

    if providers is None:
        providers = ["nominatim"]
        # Only add paid providers if credentials are configured
        if settings.validate_mapbox():
            providers.insert(0, "mapbox")
        if settings.validate_google_geocoding():
            providers.append("google")

    results: Dict[str, Optional[GeocodeResult]] = {}
    for provider in providers:
        geocoder = get_geocoder(provider)
        try:
            results[provider] = await geocoder.geocode(normalized, options)
        except ProviderError as e:
            logger.warning(f"{provider}: {e}")
            results[provider] = None

    # Calculate distances between results
    valid_results = {k: v for k, v in results.items() if v is not None}
    if len(valid_results) > 1:
        provider_names = list(valid_results.keys())
        for i, p1 in enumerate(provider_names):
            for p2 in provider_names[i+1:]:
                r1, r2 = valid_results[p1], valid_results[p2]
                dist = haversine_distance(
                    r1.coordinates.lat, r1.coordinates.lng,
                    r2.coordinates.lat, r2.coordinates.lng,
                    unit='kilometers'
                )
                logger.info(f"Distance {p1} vs {p2}: {dist:.1f}km")

    return results
