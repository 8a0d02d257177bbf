"""Approximate string matching for supplier and client names."""

from rapidfuzz.distance import Levenshtein


def edit_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance between two strings.

    Counts single-character insertions, deletions and substitutions.
    """
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Return a normalized similarity score in [0, 1].

    Comparison is case-insensitive and ignores surrounding whitespace. Two
    empty strings are identical (1.0); an empty string against a non-empty
    one scores 0.0.

    Args:
        a: First name
        b: Second name

    Returns:
        ``(max_len - edit_distance) / max_len``, or 1.0 for identical input
    """
    s1 = (a or "").strip().lower()
    s2 = (b or "").strip().lower()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    max_len = max(len(s1), len(s2))
    return (max_len - edit_distance(s1, s2)) / max_len
