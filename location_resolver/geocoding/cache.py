"""
Bounded, time-expiring cache of resolved locations.

Entries live for a fixed TTL, or a longer one when the result was resolved
with high confidence. Expired entries behave exactly like misses and are
dropped on access. The size bound is enforced on writes by evicting the
least-recently-inserted entries, so no background sweep is needed.

Callers always get a copy of the cached result; mutating it cannot
corrupt the cache.
"""

import copy
import hashlib
import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from location_resolver.geocoding.base import GeocodeOptions, GeocodeResult

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached result and the time it was inserted."""

    result: GeocodeResult
    inserted_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at >= self.ttl


def make_cache_key(normalized_query: str, options: GeocodeOptions) -> str:
    """
    Build a stable key from the normalized query and serialized options.

    Queries differing only in case or surrounding whitespace share a key.
    """
    payload = json.dumps(
        {"q": normalized_query.strip().lower(), "o": options.as_dict},
        sort_keys=True,
    )
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class ResultCache:
    """
    In-memory TTL cache for geocoding results.

    Construct one per service (or per test); there is no module-level
    instance.

    Usage:
        cache = ResultCache(ttl_seconds=86400, max_entries=1000)
        cache.set(key, result)
        cached = cache.get(key)
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        high_confidence_ttl_seconds: Optional[float] = None,
        high_confidence_threshold: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_seconds: Default entry lifetime (uses settings if not provided)
            high_confidence_ttl_seconds: Lifetime for high-confidence results
            high_confidence_threshold: Confidence at/above which the long TTL applies
            max_entries: Size bound enforced on writes
            clock: Monotonic time source, injectable for tests
        """
        from location_resolver.core import settings

        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None
            else settings.GEOCODE_CACHE_TTL_SECONDS
        )
        self.high_confidence_ttl_seconds = (
            high_confidence_ttl_seconds if high_confidence_ttl_seconds is not None
            else settings.GEOCODE_CACHE_HIGH_CONFIDENCE_TTL_SECONDS
        )
        self.high_confidence_threshold = (
            high_confidence_threshold if high_confidence_threshold is not None
            else settings.GEOCODE_CACHE_HIGH_CONFIDENCE
        )
        self.max_entries = max(
            1,
            max_entries if max_entries is not None else settings.GEOCODE_CACHE_MAX_ENTRIES
        )
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def ttl_for(self, result: GeocodeResult) -> float:
        """TTL applied to a result, based on its confidence."""
        if result.confidence >= self.high_confidence_threshold:
            return max(self.ttl_seconds, self.high_confidence_ttl_seconds)
        return self.ttl_seconds

    def get(self, key: str) -> Optional[GeocodeResult]:
        """Return a copy of the fresh entry for `key`, or None."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            self._misses += 1
            logger.debug(f"Cache entry expired: {key}")
            return None

        self._hits += 1
        return copy.deepcopy(entry.result)

    def set(self, key: str, result: GeocodeResult) -> None:
        """Store a copy of `result`; re-setting a key counts as a new insertion."""
        now = self._clock()
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(
            result=copy.deepcopy(result),
            inserted_at=now,
            ttl=self.ttl_for(result),
        )

        if len(self._entries) > self.max_entries:
            self._evict(now)

    def _evict(self, now: float) -> None:
        expired = [k for k, entry in self._entries.items() if entry.is_expired(now)]
        for k in expired:
            del self._entries[k]

        evicted = 0
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            evicted += 1

        if expired or evicted:
            logger.debug(
                f"Cache eviction: {len(expired)} expired, {evicted} oldest, "
                f"size now {len(self._entries)}"
            )

    def clear(self) -> None:
        """Drop every entry (statistics are kept)."""
        self._entries.clear()
        logger.info("Geocoding result cache cleared")

    def stats(self) -> Dict[str, int]:
        """Size and hit counters for logging/telemetry."""
        return {
            "size": len(self._entries),
            "total_hits": self._hits,
            "total_misses": self._misses,
        }
