"""
Error taxonomy for the game engine.

Round failures (bad shape, transport, duplicate secret) derive from
RetryableRoundError and are absorbed by the session's retry policy.
Losing a game is a normal outcome and is never raised.
"""

from __future__ import annotations


class GuessrError(Exception):
    """Base class for all guessr errors."""


class RetryableRoundError(GuessrError):
    """A round failed without mutating the session; it may be re-issued."""


class ShapeValidationError(RetryableRoundError, ValueError):
    """Model output did not match any variant of the expected family."""

    def __init__(self, family: str, detail: str):
        self.family = family
        self.detail = detail
        super().__init__(f"Invalid {family} response: {detail}")


class TransportError(RetryableRoundError, RuntimeError):
    """The model call failed or timed out."""


class DuplicateSecretError(RetryableRoundError):
    """The model picked a title that is already in the exclusion list."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Secret pick returned an excluded title: {title!r}")


class UnknownGameTypeError(GuessrError, ValueError):
    """Caller supplied a game type outside the supported set."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Unknown game type: {value!r} (expected 'player-guesses' or 'ai-guesses')"
        )


class SessionStateError(GuessrError):
    """Operation not allowed in the session's current state, or input missing."""
