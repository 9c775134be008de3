"""
Confidence scoring for geocoding results.

Confidence estimates how well a provider's answer matches what the user
typed, weighted by the provider's own relevance signal. Scores never reach
1.0; the ceiling is kept free for exact place-ID matches.
"""

MAX_CONFIDENCE = 0.95
SINGLE_TOKEN_BOOST = 0.2
SINGLE_TOKEN_CAP = 0.9
PARTIAL_MATCH_CAP = 0.85


def calculate_confidence(
    original_query: str,
    result_display_name: str,
    provider_relevance: float,
) -> float:
    """
    Score a result against the query that produced it.

    Phrase containment is checked before token overlap, so a verbatim match
    always scores from the containment rule even when token overlap would
    compute lower.

    Args:
        original_query: Query text as the user meant it
        result_display_name: Full display name returned by the provider
        provider_relevance: Provider-reported relevance/importance (0-1)

    Returns:
        Confidence in [0, 0.95]

    Example:
        >>> calculate_confidence("Austin", "Austin, Texas, United States", 1.0)
        0.95
    """
    query = (original_query or "").lower().strip()
    result = (result_display_name or "").lower().strip()

    if not query or not result:
        return 0.0

    if query in result:
        return _clamp(min(MAX_CONFIDENCE, provider_relevance * MAX_CONFIDENCE))

    query_words = query.split()
    result_words = result.split()

    matching = [
        q for q in query_words
        if any(q in r or r in q for r in result_words)
    ]
    word_match_ratio = len(matching) / len(query_words)
    base_confidence = word_match_ratio * provider_relevance

    if len(query_words) == 1 and query_words[0] in result_words:
        return _clamp(min(SINGLE_TOKEN_CAP, base_confidence + SINGLE_TOKEN_BOOST))

    return _clamp(min(PARTIAL_MATCH_CAP, base_confidence))


def _clamp(value: float) -> float:
    return max(0.0, min(MAX_CONFIDENCE, value))
