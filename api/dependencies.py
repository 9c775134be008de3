"""
FastAPI dependencies for the Location Resolver API.

Provides dependency injection for the shared resolver.
"""

from typing import Optional

from location_resolver.geocoding import LocationResolver, build_resolver

# One resolver (and so one cache) per process
_resolver: Optional[LocationResolver] = None


def get_resolver() -> LocationResolver:
    """
    Get the process-wide LocationResolver as a FastAPI dependency.

    Usage:
        @router.get("/resolve")
        async def resolve(q: str, resolver: LocationResolver = Depends(get_resolver)):
            return await resolver.resolve(q)
    """
    global _resolver

    if _resolver is None:
        _resolver = build_resolver()

    return _resolver
