"""
API routers for the Location Resolver API.
"""

from api.routers.health import router as health_router
from api.routers.location import router as location_router

__all__ = ["health_router", "location_router"]
