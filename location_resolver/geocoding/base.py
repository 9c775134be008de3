"""
Base classes and interfaces for geocoding providers.

Every provider adapter turns a normalized place-name query into at most one
canonical `GeocodeResult`. Provider-specific field names never leave the
adapter module that parses them.
"""

import asyncio
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict, replace as dataclass_replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

import aiohttp

T = TypeVar("T")


class LocationType(str, Enum):
    """Kind of place a result describes."""
    CITY = "city"
    NEIGHBORHOOD = "neighborhood"
    LANDMARK = "landmark"
    REGION = "region"
    COUNTRY = "country"


@dataclass(frozen=True)
class Coordinates:
    """WGS84 point."""

    lat: float
    lng: float


@dataclass
class AddressComponents:
    """Structured address parts; providers populate what they have."""

    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    postal_code: Optional[str] = None
    neighborhood: Optional[str] = None


@dataclass(frozen=True)
class GeocodeOptions:
    """Options that shape a single resolution attempt."""

    preferred_country: Optional[str] = None
    max_results: int = 5
    include_alternatives: bool = False
    fuzzy_matching: bool = False
    bias_location: Optional[Coordinates] = None

    @property
    def as_dict(self) -> dict:
        """Convert to dictionary; also the serialized form used in cache keys."""
        return {
            "preferred_country": self.preferred_country.lower() if self.preferred_country else None,
            "max_results": self.max_results,
            "include_alternatives": self.include_alternatives,
            "fuzzy_matching": self.fuzzy_matching,
            "bias_location": asdict(self.bias_location) if self.bias_location else None,
        }

    def replace(self, **changes) -> "GeocodeOptions":
        """Return a copy with the given fields changed."""
        return dataclass_replace(self, **changes)


@dataclass
class GeocodeResult:
    """Canonical result produced by every provider adapter."""

    location: str
    confidence: float  # 0.0 to 0.95
    coordinates: Coordinates
    display_name: str
    type: LocationType = LocationType.CITY
    components: AddressComponents = field(default_factory=AddressComponents)
    providers: List[str] = field(default_factory=list)
    alternatives: Optional[List["GeocodeResult"]] = None
    geocoded_at: str = field(default_factory=lambda: datetime.utcnow().isoformat() + "Z")

    @property
    def as_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            "location": self.location,
            "confidence": self.confidence,
            "coordinates": asdict(self.coordinates),
            "components": asdict(self.components),
            "display_name": self.display_name,
            "type": self.type.value,
            "providers": list(self.providers),
            "geocoded_at": self.geocoded_at,
        }
        if self.alternatives is not None:
            data["alternatives"] = [alt.as_dict for alt in self.alternatives]
        return data


class ProviderError(Exception):
    """Raised when a provider is unusable: transport, HTTP, or credential failure."""

    def __init__(self, message: str, provider: str = "", query: str = ""):
        self.message = message
        self.provider = provider
        self.query = query
        super().__init__(f"[{provider}] {message}" if provider else message)


def select_best_candidate(
    candidates: Sequence[T],
    *,
    is_administrative: Callable[[T], bool],
    importance: Callable[[T], float],
    country_code: Callable[[T], Optional[str]],
    preferred_country: Optional[str] = None,
) -> Optional[T]:
    """
    Pick the single best upstream candidate.

    Administrative areas (city/town/village) beat street-level entries, then
    higher provider importance wins, then provider order. When a preferred
    country is given, candidates located there win over all others.
    """
    if not candidates:
        return None

    pool = list(candidates)
    if preferred_country:
        wanted = preferred_country.lower()
        in_country = [c for c in pool if (country_code(c) or "").lower() == wanted]
        if in_country:
            pool = in_country

    ranked = max(
        enumerate(pool),
        key=lambda item: (is_administrative(item[1]), importance(item[1]), -item[0]),
    )
    return ranked[1]


def parse_float(value: Any, default: float) -> float:
    """Parse provider numbers that may arrive as strings, be missing, or be non-finite."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


class BaseGeocoder(ABC):
    """
    Abstract base class for geocoding providers.

    Subclasses must implement:
    - geocode(): Resolve a single place-name query
    - provider_name: Name of the provider

    Transport helpers:
    - _get_json(): bounded HTTP GET that raises ProviderError on any failure

    Adapters issue exactly one plain GET per call with no internal retries,
    so an outbound request-deduplication layer can wrap them.
    """

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            session: Shared aiohttp session (a short-lived one is opened per call if None)
            timeout: Per-call timeout in seconds (uses settings if not provided)
        """
        from location_resolver.core import settings

        self._session = session
        self.timeout = timeout if timeout is not None else settings.PROVIDER_TIMEOUT

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the geocoding provider."""
        pass

    @abstractmethod
    async def geocode(
        self,
        query: str,
        options: GeocodeOptions,
    ) -> Optional[GeocodeResult]:
        """
        Resolve a single normalized place-name query.

        Args:
            query: Normalized place name
            options: Resolution options

        Returns:
            GeocodeResult if the provider matched, None if it had no match

        Raises:
            ProviderError: If the provider is unusable (credential, HTTP, timeout)
        """
        pass

    async def _get_json(
        self,
        url: str,
        params: Dict[str, str],
        headers: Optional[Dict[str, str]] = None,
        query: str = "",
    ) -> Any:
        """GET `url` and decode JSON, converting every failure to ProviderError."""
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            if self._session is not None:
                return await self._fetch_json(self._session, url, params, headers, timeout, query)
            async with aiohttp.ClientSession() as session:
                return await self._fetch_json(session, url, params, headers, timeout, query)
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"Timeout after {self.timeout}s",
                provider=self.provider_name,
                query=query,
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderError(
                f"Transport error: {e}",
                provider=self.provider_name,
                query=query,
            ) from e

    async def _fetch_json(
        self,
        session: aiohttp.ClientSession,
        url: str,
        params: Dict[str, str],
        headers: Optional[Dict[str, str]],
        timeout: aiohttp.ClientTimeout,
        query: str,
    ) -> Any:
        async with session.get(url, params=params, headers=headers, timeout=timeout) as response:
            if response.status >= 300:
                raise ProviderError(
                    f"HTTP {response.status}",
                    provider=self.provider_name,
                    query=query,
                )
            try:
                return await response.json(content_type=None)
            except ValueError as e:
                raise ProviderError(
                    "Invalid JSON response",
                    provider=self.provider_name,
                    query=query,
                ) from e
