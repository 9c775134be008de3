"""
Health check endpoints.
"""

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Location Resolver API"}


@router.get("/health")
async def health():
    """Detailed health check, including which providers have credentials."""
    from api.config import settings

    return {
        "status": "ok",
        "service": "Location Resolver API",
        "version": settings.API_VERSION,
        "providers": {
            "mapbox": settings.validate_mapbox(),
            "nominatim": True,
            "google": settings.validate_google_geocoding(),
        }
    }
