"""
Clarifications for yes/no answers that would mislead the player.

Only one case is handled: a "series"/"franchise" question about a spin-off
title (e.g. The Elder Scrolls Online). The truthful answer is yes, but there
is no numbered sequel, so a bare "Yes" sends the player the wrong way.
"""

from __future__ import annotations
import re
from typing import Optional

SERIES_CLARIFICATION = "It's branded as part of a series but has no direct sequels or prequels."

_SERIES_QUESTION = re.compile(r"(series|franchise)", re.IGNORECASE)
_ROMAN_NUMERAL = re.compile(r"\b(?:ii|iii|iv|v|vi|vii|viii|ix|x|xi|xii|xiii|xiv|xv|xvi)\b")
_DIGIT = re.compile(r"[0-9]")

SUBTITLE_KEYWORDS = (
    "online",
    "legends",
    "origins",
    "chronicles",
    "story",
    "stories",
    "tactics",
    "odyssey",
    "valhalla",
    "anniversary",
    "definitive",
)


def is_series_question(question: str) -> bool:
    return bool(_SERIES_QUESTION.search(question))


def looks_like_spinoff(title: str) -> bool:
    """No sequel number or numeral, but a typical spin-off subtitle word."""
    lower = title.lower()
    if _DIGIT.search(lower) or _ROMAN_NUMERAL.search(lower):
        return False
    return any(kw in lower for kw in SUBTITLE_KEYWORDS)


def get_clarification(secret_title: str, question: str) -> Optional[str]:
    """Clarification text for this question, or None. Never mentions the title."""
    if not is_series_question(question):
        return None
    if not looks_like_spinoff(secret_title):
        return None
    return SERIES_CLARIFICATION
