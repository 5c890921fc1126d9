"""
Game session state machine for both "20 Questions" modes.

A GameSession owns one Session record. Each operation builds a prompt, calls
the model, validates the reply, and only then mutates the session. Failed
rounds (bad shape, transport, duplicate secret) are retried a bounded number
of times; when retries run out the session ends in LOST with `error` set.
Winning and losing are returned as ordinary RoundResults.

    awaiting-secret --start--> active --ask/answer--> won | lost
"""

from __future__ import annotations
import logging
import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .clarifications import get_clarification
from .errors import (
    DuplicateSecretError,
    RetryableRoundError,
    SessionStateError,
    ShapeValidationError,
    TransportError,
)
from .exclusions import ExclusionList, process_exclusions
from .game_type import GameType, parse_game_type
from .models.base_client import ChatClient, ChatMessage
from .prompts import (
    ai_guess_initial_prompt,
    ai_guess_next_prompt,
    game_facts_prompt,
    player_qa_prompt,
    secret_pick_prompt,
    special_hint_prompt,
)
from .schemas import (
    AIGuess,
    AnswerToGuess,
    AnswerToQuestion,
    ClassifiedResponse,
    GameFacts,
    ResponseFamily,
    validate,
)
from .scoring import EXACT, normalize_title, score

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_QUESTION_BUDGET = 20
DEFAULT_MAX_ROUND_RETRIES = 1
# Only the most recent titles are listed in the secret-pick prompt
EXCLUSION_PROMPT_LIMIT = 100

USER_ANSWERS = ("Yes", "No", "Unsure")
HINT_TYPES = ("developer", "publisher", "releaseYear")


class GameStatus(str, Enum):
    AWAITING_SECRET = "awaiting-secret"
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


@dataclass
class Session:
    """State of one game. Mutated only by its GameSession."""
    game_type: GameType
    question_budget: int = DEFAULT_QUESTION_BUDGET
    secret_title: Optional[str] = None
    question_count: int = 0
    status: GameStatus = GameStatus.AWAITING_SECRET
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    used_hint: bool = False
    error: Optional[str] = None
    history: List[ChatMessage] = field(default_factory=list)
    facts: Optional[GameFacts] = None

    @property
    def questions_left(self) -> int:
        return max(0, self.question_budget - self.question_count)

    def to_dict(self, reveal_secret: bool = False) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "gameType": self.game_type.value,
            "status": self.status.value,
            "questionCount": self.question_count,
            "questionBudget": self.question_budget,
            "usedHint": self.used_hint,
            "error": self.error,
            "secretTitle": self.secret_title if reveal_secret else None,
        }


@dataclass(frozen=True)
class RoundResult:
    """Outcome of one round, as delivered to the caller."""
    status: GameStatus
    question_count: int
    response: Optional[ClassifiedResponse] = None
    score: Optional[float] = None
    clarification: Optional[str] = None
    error: Optional[str] = None

    @property
    def kind(self) -> Optional[str]:
        return getattr(self.response, "type", None)

    @property
    def is_over(self) -> bool:
        return self.status.is_terminal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "questionCount": self.question_count,
            "response": (
                self.response.model_dump(by_alias=True, exclude_none=True)
                if self.response is not None else None
            ),
            "score": self.score,
            "clarification": self.clarification,
            "error": self.error,
        }


@dataclass(frozen=True)
class HintResult:
    hint_type: str
    text: str


class GameSession:
    """Drives one Session through its rounds against a ChatClient."""

    def __init__(
        self,
        session: Session,
        client: ChatClient,
        exclusions: Optional[ExclusionList] = None,
        max_round_retries: int = DEFAULT_MAX_ROUND_RETRIES,
        wait: Optional[Callable[..., float]] = None,
        rng: Optional[random.Random] = None,
    ):
        if max_round_retries < 0:
            raise ValueError(f"max_round_retries must be >= 0, got {max_round_retries}")
        self.session = session
        self.client = client
        self.exclusions = exclusions if exclusions is not None else process_exclusions()
        self.max_round_retries = max_round_retries
        self.wait = wait if wait is not None else wait_exponential(multiplier=1, min=1, max=8)
        self.rng = rng or random.Random()

    @classmethod
    def create(
        cls,
        game_type: Union[GameType, str],
        client: ChatClient,
        question_budget: int = DEFAULT_QUESTION_BUDGET,
        **kwargs,
    ) -> "GameSession":
        """
        Validate the game type and build a session awaiting its secret.

        Raises:
            UnknownGameTypeError: Before any model call, for an unknown game type
            ValueError: If question_budget is not a positive integer
        """
        game_type = parse_game_type(game_type)
        if isinstance(question_budget, bool) or not isinstance(question_budget, int) or question_budget < 1:
            raise ValueError(f"question_budget must be a positive integer, got {question_budget!r}")
        session = Session(game_type=game_type, question_budget=question_budget)
        logger.info("session %s created: %s, budget %d", session.session_id, game_type.value, question_budget)
        return cls(session, client, **kwargs)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def start(self, secret_title: Optional[str] = None) -> RoundResult:
        """
        Leave awaiting-secret.

        player-guesses: the model picks the secret (secret_title must be None).
        ai-guesses: the player's secret_title is stored and the model asks
        its first question.
        """
        s = self.session
        if s.status is not GameStatus.AWAITING_SECRET:
            raise SessionStateError(f"Session {s.session_id} already started ({s.status.value})")

        if s.game_type is GameType.PLAYER_GUESSES:
            if secret_title is not None:
                raise SessionStateError("The secret is picked by the model in player-guesses mode.")
            return self._start_player_guesses()

        secret_title = (secret_title or "").strip()
        if not secret_title:
            raise SessionStateError("A secret title is required to start an ai-guesses game.")
        s.secret_title = secret_title
        self._transition(GameStatus.ACTIVE)
        return self._play_ai_turn(ai_guess_initial_prompt(s.question_budget))

    def ask(self, question: str) -> RoundResult:
        """Player-guesses: submit one question or guess to the model oracle."""
        s = self._require(GameType.PLAYER_GUESSES)
        question = (question or "").strip()
        if not question:
            raise SessionStateError("A question is required.")

        prompt = player_qa_prompt(question, s.secret_title, s.question_count)
        expected = s.question_count

        def attempt():
            raw = self._send(prompt)
            return validate(raw, ResponseFamily.PLAYER_QA, expected_question_count=expected)

        reply = self._run_round("player-qa", attempt)
        if reply is None:
            return self._failed_result()

        s.question_count += 1
        self._remember(prompt, reply)

        clarification = None
        if isinstance(reply, AnswerToQuestion):
            clarification = reply.content.clarification or get_clarification(s.secret_title, question)
            self._check_budget()
        elif isinstance(reply, AnswerToGuess):
            if reply.content.correct:
                self._transition(GameStatus.WON)
            else:
                self._check_budget()

        logger.info(
            "session %s: round %d/%d %s -> %s",
            s.session_id, s.question_count, s.question_budget, reply.type, s.status.value,
        )
        return RoundResult(
            status=s.status,
            question_count=s.question_count,
            response=reply,
            clarification=clarification,
        )

    def answer(self, user_answer: str) -> RoundResult:
        """AI-guesses: answer the model's last question with Yes, No or Unsure."""
        s = self._require(GameType.AI_GUESSES)
        canonical = _canonical_answer(user_answer)
        if canonical is None:
            raise SessionStateError(f"Answer must be one of {', '.join(USER_ANSWERS)}; got {user_answer!r}")
        return self._play_ai_turn(ai_guess_next_prompt(canonical, s.questions_left))

    def hint(self, hint_type: Optional[str] = None) -> Optional[HintResult]:
        """
        Player-guesses: a factual hint (developer, publisher or release year).

        Facts are fetched once per session. Returns None if the model could
        not supply them; the game itself is unaffected.
        """
        s = self._require(GameType.PLAYER_GUESSES)
        if hint_type is not None and hint_type not in HINT_TYPES:
            raise SessionStateError(f"Unknown hint type {hint_type!r}; expected one of {', '.join(HINT_TYPES)}")

        if s.facts is None:
            prompt = game_facts_prompt(s.secret_title)
            facts = self._run_round(
                "game-facts",
                lambda: validate(self._send(prompt, history=()), ResponseFamily.GAME_FACTS),
                fatal=False,
            )
            if facts is None:
                return None
            s.facts = facts

        candidates = {
            "developer": f"The developer is {s.facts.developer}.",
            "publisher": f"The publisher is {s.facts.publisher}.",
            "releaseYear": f"It was released in {s.facts.release_year}.",
        }
        chosen = hint_type or self.rng.choice(HINT_TYPES)
        s.used_hint = True
        return HintResult(hint_type=chosen, text=candidates[chosen])

    def special_hint(self) -> Optional[HintResult]:
        """Player-guesses: a model-written hint that must not contain the title."""
        s = self._require(GameType.PLAYER_GUESSES)
        prompt = special_hint_prompt(s.secret_title)
        secret_key = normalize_title(s.secret_title)

        def attempt():
            hint = validate(self._send(prompt, history=()), ResponseFamily.SPECIAL_HINT)
            if secret_key and secret_key in normalize_title(hint.special):
                raise ShapeValidationError(ResponseFamily.SPECIAL_HINT.value, "hint reveals the secret title")
            return hint

        hint = self._run_round("special-hint", attempt, fatal=False)
        if hint is None:
            return None
        s.used_hint = True
        return HintResult(hint_type="special", text=hint.special)

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def _start_player_guesses(self) -> RoundResult:
        s = self.session
        prompt = secret_pick_prompt(self.exclusions.recent(EXCLUSION_PROMPT_LIMIT))

        def attempt():
            pick = validate(self._send(prompt, history=()), ResponseFamily.SECRET_PICK)
            # Check and record in one step so two sessions can't share a title
            if not self.exclusions.append(pick.secret_game):
                raise DuplicateSecretError(pick.secret_game)
            return pick

        pick = self._run_round("secret-pick", attempt)
        if pick is None:
            return self._failed_result()

        s.secret_title = pick.secret_game
        self._transition(GameStatus.ACTIVE)
        logger.debug("session %s: secret is %r", s.session_id, s.secret_title)
        return RoundResult(status=s.status, question_count=s.question_count)

    def _play_ai_turn(self, prompt: str) -> RoundResult:
        s = self.session

        def attempt():
            return validate(self._send(prompt), ResponseFamily.AI_GUESS)

        reply = self._run_round("ai-guess", attempt)
        if reply is None:
            return self._failed_result()

        s.question_count += 1
        self._remember(prompt, reply)

        guess_score = None
        if isinstance(reply, AIGuess):
            guess_score = score(reply.content, s.secret_title)
            if guess_score == EXACT:
                self._transition(GameStatus.WON)
            else:
                self._check_budget()
        else:
            self._check_budget()

        logger.info(
            "session %s: model turn %d/%d %s%s -> %s",
            s.session_id, s.question_count, s.question_budget, reply.type,
            f" (score {guess_score})" if guess_score is not None else "", s.status.value,
        )
        return RoundResult(
            status=s.status,
            question_count=s.question_count,
            response=reply,
            score=guess_score,
        )

    def _run_round(self, label: str, attempt: Callable[[], T], fatal: bool = True) -> Optional[T]:
        """
        Run `attempt` with the bounded retry policy.

        Returns the attempt's value, or None once retries are exhausted. With
        `fatal`, exhaustion also ends the session in LOST.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_round_retries + 1),
            wait=self.wait,
            retry=retry_if_exception_type(RetryableRoundError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            return retrying(attempt)
        except RetryableRoundError as e:
            logger.error(
                "session %s: %s failed after %d attempt(s): %s",
                self.session.session_id, label, self.max_round_retries + 1, e,
            )
            if fatal:
                self.session.error = str(e)
                self._transition(GameStatus.LOST)
            return None

    def _send(self, prompt: str, history: Optional[Sequence[ChatMessage]] = None) -> str:
        history = self.session.history if history is None else history
        try:
            return self.client.send(prompt, tuple(history))
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(f"Model call failed: {e}") from e

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _require(self, game_type: GameType) -> Session:
        s = self.session
        if s.game_type is not game_type:
            raise SessionStateError(f"Operation not available in {s.game_type.value} mode.")
        if s.status is not GameStatus.ACTIVE:
            raise SessionStateError(f"Session {s.session_id} is not active ({s.status.value}).")
        return s

    def _remember(self, prompt: str, reply: ClassifiedResponse) -> None:
        self.session.history.append(ChatMessage(role="user", content=prompt))
        self.session.history.append(
            ChatMessage(role="model", content=reply.model_dump_json(by_alias=True, exclude_none=True))
        )

    def _check_budget(self) -> None:
        if self.session.question_count >= self.session.question_budget:
            self._transition(GameStatus.LOST)

    def _transition(self, status: GameStatus) -> None:
        s = self.session
        if s.status is not status:
            logger.debug("session %s: %s -> %s", s.session_id, s.status.value, status.value)
        s.status = status

    def _failed_result(self) -> RoundResult:
        s = self.session
        return RoundResult(status=s.status, question_count=s.question_count, error=s.error)


def _canonical_answer(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    lowered = value.strip().lower()
    for option in USER_ANSWERS:
        if option.lower() == lowered:
            return option
    return None
