"""Travel location resolution: geocoding, disambiguation and typo recovery."""

__version__ = "1.0.0"
