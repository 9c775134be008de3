"""
Tests for typo correction.
"""

import asyncio

from location_resolver.geocoding.base import GeocodeOptions
from location_resolver.geocoding.fuzzy import FuzzyCorrector, generate_typo_variations


def test_misspelling_table():
    assert generate_typo_variations("Mami") == ["Miami"]
    assert generate_typo_variations("Chigago")[0] == "Chicago"


def test_spacing_variants():
    assert generate_typo_variations("San Fransisco") == ["San Francisco", "SanFransisco"]
    assert "Newport Beach" in [v.title() for v in generate_typo_variations("Newportbeach")]


def test_variations_are_capped_and_unique():
    variations = generate_typo_variations("Newportbeach")
    assert len(variations) == 3
    assert len({v.lower() for v in variations}) == 3


def test_short_unknown_word_has_no_variations():
    assert generate_typo_variations("Narnia") == []


def _corrector(responses):
    calls = []

    async def resolve(query, options):
        calls.append(query)
        return responses.get(query)

    return FuzzyCorrector(resolve, trigger_confidence=0.7, accept_confidence=0.6), calls


def test_confident_direct_match_skips_corrections(make_result):
    corrector, calls = _corrector({"Mami": make_result("Mami", 0.8)})

    results = asyncio.run(corrector.correct("Mami", GeocodeOptions()))

    assert [r.location for r in results] == ["Mami"]
    assert calls == ["Mami"]


def test_weak_direct_match_stays_first(make_result):
    corrector, _ = _corrector({
        "Mami": make_result("Mami", 0.55, display_name="Mami, Crete, Greece"),
        "Miami": make_result("Miami", 0.9, display_name="Miami, Florida, United States"),
    })

    results = asyncio.run(corrector.correct("Mami", GeocodeOptions()))

    assert results[0].location == "Mami"
    assert results[1].location == 'Miami (did you mean "Miami"?)'


def test_weak_corrections_are_dropped(make_result):
    corrector, _ = _corrector({"Miami": make_result("Miami", 0.6)})

    assert asyncio.run(corrector.correct("Mami", GeocodeOptions())) == []


def test_duplicate_corrections_are_merged(make_result):
    same = make_result("Newport Beach", 0.9, display_name="Newport Beach, California, United States")
    corrector, _ = _corrector({
        "Newportb each": same,
        "Newport beach": same,
    })

    results = asyncio.run(corrector.correct("Newportbeach", GeocodeOptions()))

    assert len(results) == 1


def test_failing_correction_does_not_discard_others(make_result):
    calls = []

    async def resolve(query, options):
        calls.append(query)
        if query == "SanFransisco":
            raise RuntimeError("malformed payload")
        if query == "San Francisco":
            return make_result("San Francisco", 0.9, display_name="San Francisco, California, United States")
        return None

    corrector = FuzzyCorrector(resolve, trigger_confidence=0.7, accept_confidence=0.6)

    results = asyncio.run(corrector.correct("San Fransisco", GeocodeOptions()))

    assert [r.location for r in results] == ['San Francisco (did you mean "San Francisco"?)']
    assert "SanFransisco" in calls
