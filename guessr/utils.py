"""
Utility functions for parsing model outputs.
"""

import re
import json
from typing import Any, Optional

_FENCED = re.compile(r'```(?:json)?\s*(\{.*?\})\s*```', re.DOTALL)

_MISSING = object()


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _MISSING


def extract_json_from_response(text: str) -> Optional[Any]:
    """
    Extract a JSON value from a raw model reply.
    Handles a bare JSON document, ```json blocks, and an object embedded in prose.
    Returns None when nothing parses.
    """
    if not isinstance(text, str):
        return None

    stripped = text.strip()
    value = _loads(stripped)
    if value is not _MISSING:
        return value

    # Fenced code blocks next, last one wins
    matches = list(_FENCED.finditer(text))
    if matches:
        value = _loads(matches[-1].group(1))
        if value is not _MISSING:
            return value

    # First balanced {...} that parses
    start = text.find('{')
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i, c in enumerate(text[start:]):
            if in_string:
                if escaped:
                    escaped = False
                elif c == '\\':
                    escaped = True
                elif c == '"':
                    in_string = False
                continue
            if c == '"':
                in_string = True
            elif c == '{':
                depth += 1
            elif c == '}':
                depth -= 1
                if depth == 0:
                    value = _loads(text[start:start + i + 1])
                    if value is not _MISSING:
                        return value
                    break
        start = text.find('{', start + 1)

    return None


def truncate(text: str, limit: int = 200) -> str:
    """Shorten raw model text for error messages and logs."""
    text = text if isinstance(text, str) else repr(text)
    return text if len(text) <= limit else text[:limit] + "…"
