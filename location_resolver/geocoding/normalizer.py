"""
Query normalization applied before any provider is called.

Travel searches arrive padded with words that do not help a geocoder
("vacation rental near ...") and with local abbreviations ("NYC"). The
normalizer strips the former and expands the latter. It is pure and
idempotent: normalize_query(normalize_query(x)) == normalize_query(x).

Usage:
    from location_resolver.geocoding.normalizer import normalize_query

    normalize_query("vacation home near Disney World")  # "Disney World"
    normalize_query("airbnb in nyc")                    # "New York City"
"""

import re
from typing import Optional

# Proximity phrasing: keep only the landmark after the proximity word
PROXIMITY_PATTERN = re.compile(
    r'\b(?:near|close\s+to|next\s+to|around)\s+(.+)',
    re.IGNORECASE
)

# Travel filler words that carry no geographic meaning
FILLER_PATTERN = re.compile(
    r'\b(?:close\s+to|next\s+to|vacation\s+homes?|vacation\s+rentals?|vacations?|'
    r'rentals?|airbnbs?|hotels?|stays?|trips?|visit|near|around)\b',
    re.IGNORECASE
)

# Connectors left dangling at the start once filler words are removed
LEADING_CONNECTOR_PATTERN = re.compile(r'^(?:(?:in|at|to|for)\s+)+', re.IGNORECASE)

# Expansions must not contain a key or filler word, or normalization stops being idempotent
ABBREVIATIONS = {
    "nyc": "New York City",
    "sf": "San Francisco",
    "dc": "Washington D.C.",
    "nola": "New Orleans",
    "philly": "Philadelphia",
    "atx": "Austin",
    "slc": "Salt Lake City",
    "usa": "United States",
    "uk": "United Kingdom",
}

ABBREVIATION_PATTERN = re.compile(
    r'\b(' + '|'.join(re.escape(abbr) for abbr in ABBREVIATIONS) + r')\b',
    re.IGNORECASE
)


def extract_proximity_landmark(query: str) -> Optional[str]:
    """
    Extract the landmark from a proximity query.

    Example:
        >>> extract_proximity_landmark("house close to Golden Gate Bridge")
        'Golden Gate Bridge'
        >>> extract_proximity_landmark("Austin") is None
        True
    """
    match = PROXIMITY_PATTERN.search(query)
    if match:
        landmark = match.group(1).strip()
        return landmark or None
    return None


def expand_abbreviations(query: str) -> str:
    """Expand known place abbreviations as whole words, case-insensitively."""
    return ABBREVIATION_PATTERN.sub(
        lambda m: ABBREVIATIONS[m.group(1).lower()],
        query
    )


def _tidy(text: str) -> str:
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'\s+,', ',', text)
    text = re.sub(r',(?:\s*,)+', ',', text)
    return text.strip(' ,;-')


def normalize_query(raw: str) -> str:
    """
    Clean a raw place-name query for geocoding.

    Steps:
    1. Keep only the landmark of proximity phrasing ("near X" -> "X")
    2. Remove travel filler words
    3. Drop dangling leading connectors ("in", "at", ...)
    4. Expand abbreviations

    Args:
        raw: Query text as typed by the user

    Returns:
        Normalized query (may be empty if nothing geographic remains)
    """
    if not raw:
        return ""

    text = extract_proximity_landmark(raw) or raw

    # Removal can bring new filler phrases together ("close hotel to"),
    # and tidying can expose another connector ("for - in Paris")
    previous = None
    while text != previous:
        previous = text
        text = _tidy(FILLER_PATTERN.sub(' ', text))
        text = _tidy(LEADING_CONNECTOR_PATTERN.sub('', text))

    text = expand_abbreviations(text)
    return _tidy(text)
