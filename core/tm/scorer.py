"""
Similarity Scorer
Dice coefficient over character bigrams, reported on a 0-100 scale.
"""
import re
from collections import Counter

_WHITESPACE = re.compile(r"\s+")


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def similarity(first: str, second: str) -> float:
    """
    Score how close two strings are.

    2 * shared bigrams / total bigrams, whitespace ignored. Identical
    strings score 100, even single characters; otherwise a string shorter
    than two characters has no bigrams and scores 0. Symmetric and total.
    """
    first = _WHITESPACE.sub("", first or "")
    second = _WHITESPACE.sub("", second or "")

    if first == second:
        return 100.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = _bigrams(first)
    second_bigrams = _bigrams(second)
    shared = sum((first_bigrams & second_bigrams).values())
    total = (len(first) - 1) + (len(second) - 1)

    return round(200.0 * shared / total, 2)
