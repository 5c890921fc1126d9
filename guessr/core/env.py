# guessr/core/env.py
from __future__ import annotations
import os
from dotenv import load_dotenv

KNOWN_KEYS = [
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "TOGETHER_API_KEY",
    "GEMINI_API_KEY",        # alias for GOOGLE API key (AI Studio)
    "GOOGLE_API_KEY",        # AI Studio
    "GUESSR_MODEL",
    "GUESSR_QUESTION_BUDGET",
    "GUESSR_MAX_ROUND_RETRIES",
    "GUESSR_TIMEOUT_SEC",
    "GUESSR_TEMPERATURE",
]

SECRET_SUFFIXES = ("_API_KEY",)


def load_env(dotenv_path: str | None = None) -> dict[str, str]:
    """
    Load .env once. Returns a dict of which keys are present (secrets masked).
    """
    load_dotenv(dotenv_path or os.getenv("DOTENV_PATH", ".env"), override=False)
    found = {}
    for k in KNOWN_KEYS:
        v = os.getenv(k)
        if not v:
            continue
        if k.endswith(SECRET_SUFFIXES):
            v = v[:4] + "…" if len(v) > 4 else "…"
        found[k] = v
    return found
