"""
guessr - "20 Questions" about video games, refereed by a language model.
"""

from .errors import (
    GuessrError,
    ShapeValidationError,
    TransportError,
    DuplicateSecretError,
    UnknownGameTypeError,
    SessionStateError,
)
from .game_type import GameType, parse_game_type, is_valid_game_type
from .scoring import score, NEAR_GUESS_THRESHOLD
from .schemas import validate, ResponseFamily
from .prompts import secret_pick_prompt, player_qa_prompt, ai_guess_initial_prompt
from .exclusions import ExclusionList, process_exclusions
from .game_loop import GameSession, GameStatus, Session, RoundResult

__all__ = [
    "GuessrError",
    "ShapeValidationError",
    "TransportError",
    "DuplicateSecretError",
    "UnknownGameTypeError",
    "SessionStateError",
    "GameType",
    "parse_game_type",
    "is_valid_game_type",
    "score",
    "NEAR_GUESS_THRESHOLD",
    "validate",
    "ResponseFamily",
    "secret_pick_prompt",
    "player_qa_prompt",
    "ai_guess_initial_prompt",
    "ExclusionList",
    "process_exclusions",
    "GameSession",
    "GameStatus",
    "Session",
    "RoundResult",
]
