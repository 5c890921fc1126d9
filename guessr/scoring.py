"""
Fuzzy scoring of a free-text guess against the secret title.
"""

from __future__ import annotations
import re

# Normalised similarity at or above this earns a near-miss (0.5).
NEAR_GUESS_THRESHOLD = 0.8

EXACT = 1.0
NEAR = 0.5
MISS = 0.0

# Unicode-aware: letters and digits of any script survive
_NON_WORD = re.compile(r"[\W_]+")


def normalize_title(text: str) -> str:
    """Casefold and drop spaces, punctuation and underscores."""
    return _NON_WORD.sub("", text.casefold())


def levenshtein(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute edit distance."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Keep the shorter string as the row.
    if len(a) < len(b):
        a, b = b, a

    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        curr = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            curr[j] = min(
                curr[j - 1] + 1,      # insertion
                prev[j] + 1,          # deletion
                prev[j - 1] + cost,   # substitution
            )
        prev = curr
    return prev[-1]


def similarity(a: str, b: str) -> float:
    """1 - distance / max length, on already-normalised strings."""
    if a == b:
        return 1.0
    return 1.0 - levenshtein(a, b) / max(len(a), len(b))


def score(guess: str, secret: str) -> float:
    """
    Score a guess against the secret title.

    Returns:
        1.0 for an exact (case/punctuation-insensitive) match,
        0.5 when similarity >= NEAR_GUESS_THRESHOLD,
        0.0 otherwise.
    """
    g = normalize_title(guess)
    s = normalize_title(secret)

    if g == s:
        return EXACT

    return NEAR if similarity(g, s) >= NEAR_GUESS_THRESHOLD else MISS
