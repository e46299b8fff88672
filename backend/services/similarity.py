"""Normalized edit-distance similarity for skill-name matching."""

from rapidfuzz.distance import Levenshtein


def levenshtein_similarity(text_a: str, text_b: str) -> float:
    """Return ``1 - distance / max(len(a), len(b))`` in the range 0.0-1.0.

    Two empty strings are identical (1.0); one empty string against a
    non-empty one shares nothing (0.0). Comparison is case-sensitive, callers
    lower-case first when they want otherwise.
    """
    if not text_a:
        return 1.0 if not text_b else 0.0
    if not text_b:
        return 0.0
    return float(Levenshtein.normalized_similarity(text_a, text_b))
