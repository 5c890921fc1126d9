"""
Pytest fixtures for guessr tests.
"""

import json
from typing import Any, Callable, List, Sequence

import pytest
from tenacity import wait_none

from guessr.exclusions import ExclusionList
from guessr.game_loop import GameSession
from guessr.models.base_client import ChatMessage


class ScriptedClient:
    """ChatClient that replays canned replies and records every call.

    Replies may be strings (returned as-is), dicts (JSON-encoded) or
    exceptions (raised).
    """

    model = "scripted"

    def __init__(self, replies: Sequence[Any] = ()):
        self.replies: List[Any] = list(replies)
        self.prompts: List[str] = []
        self.histories: List[tuple] = []

    def queue(self, *replies: Any) -> None:
        self.replies.extend(replies)

    def send(self, prompt: str, history: Sequence[ChatMessage] = ()) -> str:
        self.prompts.append(prompt)
        self.histories.append(tuple(history))
        if not self.replies:
            raise LookupError("ScriptedClient has no reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply

    @property
    def calls(self) -> int:
        return len(self.prompts)


def answer(n: int, value: str = "Yes", **extra) -> dict:
    return {"type": "answer", "questionCount": n, "content": {"answer": value, **extra}}


def guess_result(n: int, correct: bool, response: str = "Nope.") -> dict:
    return {"type": "guessResult", "questionCount": n, "content": {"correct": correct, "response": response}}


def ai_question(text: str = "Is it an RPG?") -> dict:
    return {"type": "question", "content": text, "confidence": 3}


def ai_guess(title: str) -> dict:
    return {"type": "guess", "content": title, "confidence": 8}


@pytest.fixture
def exclusions() -> ExclusionList:
    """A fresh exclusion list so tests never touch the process-wide one."""
    return ExclusionList()


@pytest.fixture
def client() -> ScriptedClient:
    return ScriptedClient()


@pytest.fixture
def make_game(client: ScriptedClient, exclusions: ExclusionList) -> Callable[..., GameSession]:
    """Build a GameSession on the scripted client with no retry back-off."""

    def _make(game_type: str, question_budget: int = 20, max_round_retries: int = 1) -> GameSession:
        return GameSession.create(
            game_type,
            client,
            question_budget=question_budget,
            exclusions=exclusions,
            max_round_retries=max_round_retries,
            wait=wait_none(),
        )

    return _make


@pytest.fixture
def player_game(client: ScriptedClient, make_game) -> Callable[..., GameSession]:
    """A started player-guesses game whose secret is `secret`."""

    def _start(secret: str = "Portal", **kwargs) -> GameSession:
        game = make_game("player-guesses", **kwargs)
        client.queue({"secretGame": secret})
        game.start()
        return game

    return _start
