"""
Response shapes accepted from the model, and their validation.

Every reply is untrusted. A reply is accepted only when it matches exactly
one variant of the expected family: the `type` field selects the variant,
then every field of that variant is checked (presence, primitive kind, enum
membership). Nothing is coerced; unknown keys are rejected.

Families:
- SECRET_PICK:  {"secretGame": "<Title>"}
- PLAYER_QA:    {"type": "answer", ...} | {"type": "guessResult", ...}
- AI_GUESS:     {"type": "question", ...} | {"type": "guess", ...}
- SPECIAL_HINT: {"special": "<hint>"}
- GAME_FACTS:   {"developer": "...", "publisher": "...", "releaseYear": 1990}
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    confloat,
    conint,
)
from typing_extensions import Annotated

from .errors import ShapeValidationError
from .utils import extract_json_from_response, truncate


class ResponseFamily(str, Enum):
    """Which set of variants a reply is validated against."""
    SECRET_PICK = "secret-pick"
    PLAYER_QA = "player-qa"
    AI_GUESS = "ai-guess"
    SPECIAL_HINT = "special-hint"
    GAME_FACTS = "game-facts"


NonEmptyStr = Annotated[StrictStr, StringConstraints(strip_whitespace=True, min_length=1)]
Confidence = Union[conint(strict=True, ge=1, le=10), confloat(strict=True, ge=1, le=10)]


class _Shape(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


# =============================================================================
# Player-guesses: the model answers as oracle
# =============================================================================

class YesNoClarification(_Shape):
    answer: Literal["Yes", "No", "I don't know"]
    clarification: Optional[StrictStr] = None
    confidence: Optional[Confidence] = None


class GuessVerdict(_Shape):
    correct: StrictBool
    response: StrictStr
    confidence: Optional[Confidence] = None


class AnswerToQuestion(_Shape):
    type: Literal["answer"]
    question_count: StrictInt = Field(alias="questionCount", ge=0)
    content: YesNoClarification


class AnswerToGuess(_Shape):
    type: Literal["guessResult"]
    question_count: StrictInt = Field(alias="questionCount", ge=0)
    content: GuessVerdict


PlayerQAResponse = Annotated[
    Union[AnswerToQuestion, AnswerToGuess], Field(discriminator="type")
]


# =============================================================================
# AI-guesses: the model asks and guesses
# =============================================================================

class AIQuestion(_Shape):
    type: Literal["question"]
    content: NonEmptyStr
    confidence: Optional[Confidence] = None


class AIGuess(_Shape):
    type: Literal["guess"]
    content: NonEmptyStr
    confidence: Optional[Confidence] = None


AIJsonResponse = Annotated[Union[AIQuestion, AIGuess], Field(discriminator="type")]


# =============================================================================
# Setup and hints
# =============================================================================

class SecretPick(_Shape):
    secret_game: NonEmptyStr = Field(alias="secretGame")


class SpecialHint(_Shape):
    special: NonEmptyStr


class GameFacts(_Shape):
    developer: NonEmptyStr
    publisher: NonEmptyStr
    release_year: StrictInt = Field(alias="releaseYear", ge=1950, le=2100)


ClassifiedResponse = Union[
    AnswerToQuestion, AnswerToGuess, AIQuestion, AIGuess, SecretPick, SpecialHint, GameFacts
]

_ADAPTERS: Dict[ResponseFamily, TypeAdapter] = {
    ResponseFamily.SECRET_PICK: TypeAdapter(SecretPick),
    ResponseFamily.PLAYER_QA: TypeAdapter(PlayerQAResponse),
    ResponseFamily.AI_GUESS: TypeAdapter(AIJsonResponse),
    ResponseFamily.SPECIAL_HINT: TypeAdapter(SpecialHint),
    ResponseFamily.GAME_FACTS: TypeAdapter(GameFacts),
}


def _describe(exc: ValidationError) -> str:
    """Flatten pydantic errors into 'field.path: reason; ...'."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def validate(
    raw: Any,
    family: Union[ResponseFamily, str],
    expected_question_count: Optional[int] = None,
) -> ClassifiedResponse:
    """
    Validate a model reply against a response family.

    Args:
        raw: Raw reply text, or an already-decoded JSON value
        family: ResponseFamily (or its string value)
        expected_question_count: When given, a `questionCount` in the reply
            must equal it exactly

    Returns:
        The classified variant (a frozen pydantic model)

    Raises:
        ShapeValidationError: If the reply matches no variant of the family
    """
    family = ResponseFamily(family)

    value = raw
    if isinstance(raw, (str, bytes)):
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        value = extract_json_from_response(text)
        if value is None:
            raise ShapeValidationError(family.value, f"no JSON object in reply: {truncate(text)!r}")

    if not isinstance(value, dict):
        raise ShapeValidationError(family.value, f"expected a JSON object, got {type(value).__name__}")

    try:
        classified = _ADAPTERS[family].validate_python(value)
    except ValidationError as e:
        raise ShapeValidationError(family.value, _describe(e)) from e

    if expected_question_count is not None and hasattr(classified, "question_count"):
        if classified.question_count != expected_question_count:
            raise ShapeValidationError(
                family.value,
                f"questionCount: got {classified.question_count}, expected {expected_question_count}",
            )

    return classified
