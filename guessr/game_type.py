"""
Game type literals and their validation.
"""

from __future__ import annotations
from enum import Enum

from .errors import UnknownGameTypeError


class GameType(str, Enum):
    """The two supported game modes. The value is the wire literal."""
    PLAYER_GUESSES = "player-guesses"
    AI_GUESSES = "ai-guesses"


GAME_TYPES = tuple(t.value for t in GameType)


def is_valid_game_type(value: object) -> bool:
    """Exact, case-sensitive membership check against the two literals."""
    return isinstance(value, str) and value in GAME_TYPES


def parse_game_type(value: object) -> GameType:
    """Return the GameType for `value` or raise UnknownGameTypeError."""
    if isinstance(value, GameType):
        return value
    if not is_valid_game_type(value):
        raise UnknownGameTypeError(value)
    return GameType(value)
