"""
Tests for confidence scoring.
"""

import pytest

from location_resolver.geocoding.scoring import MAX_CONFIDENCE, calculate_confidence


def test_containment_scores_by_relevance():
    assert calculate_confidence("Austin", "Austin, Texas, United States", 1.0) == 0.95
    assert calculate_confidence("Austin", "Austin, Texas, United States", 0.5) == pytest.approx(0.475)


def test_containment_is_case_insensitive():
    assert calculate_confidence("  SAN FRANCISCO ", "San Francisco, California", 1.0) == 0.95


def test_partial_token_overlap():
    score = calculate_confidence("new york city", "Manhattan, New York, United States", 1.0)
    # "new" and "york," match, "city" does not
    assert score == pytest.approx(2 / 3)


def test_partial_match_is_capped():
    score = calculate_confidence("york new", "New York, United States", 1.0)
    assert score == pytest.approx(0.85)


def test_no_overlap_scores_zero():
    assert calculate_confidence("Narnia", "Lisbon, Portugal", 1.0) == 0.0


def test_empty_inputs_score_zero():
    assert calculate_confidence("", "Austin, Texas", 1.0) == 0.0
    assert calculate_confidence("Austin", "", 1.0) == 0.0
    assert calculate_confidence(None, None, 1.0) == 0.0


@pytest.mark.parametrize("query,display,relevance", [
    ("Austin", "Austin, Texas", 5.0),
    ("Austin", "Austin, Texas", -1.0),
    ("new york", "New Yorkshire", 3.0),
    ("a b c d", "a", 1.0),
    ("paris", "Paris", 0.0),
    ("x", "yyy xx", 10.0),
])
def test_confidence_always_within_bounds(query, display, relevance):
    score = calculate_confidence(query, display, relevance)
    assert 0.0 <= score <= MAX_CONFIDENCE


def test_scoring_is_deterministic():
    args = ("Cape Cod", "Cape Cod National Seashore, Massachusetts", 0.7)
    assert calculate_confidence(*args) == calculate_confidence(*args)
