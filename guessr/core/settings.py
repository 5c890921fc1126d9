from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional


def _env_int(env: Mapping[str, str], key: str, default: int, minimum: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{key} must be >= {minimum}, got {value}")
    return value


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Runtime knobs, read from the environment (after load_env())."""
    model: str = "gemini"
    question_budget: int = 20
    max_round_retries: int = 1
    timeout_sec: float = 60.0
    temperature: float = 0.7

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            model=env.get("GUESSR_MODEL") or cls.model,
            question_budget=_env_int(env, "GUESSR_QUESTION_BUDGET", cls.question_budget, 1),
            max_round_retries=_env_int(env, "GUESSR_MAX_ROUND_RETRIES", cls.max_round_retries, 0),
            timeout_sec=_env_float(env, "GUESSR_TIMEOUT_SEC", cls.timeout_sec),
            temperature=_env_float(env, "GUESSR_TEMPERATURE", cls.temperature),
        )
