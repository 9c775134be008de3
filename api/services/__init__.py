"""
Service layer for the Location Resolver API.
"""

from api.services.validation import validate_location, ValidationOutcome

__all__ = ["validate_location", "ValidationOutcome"]
