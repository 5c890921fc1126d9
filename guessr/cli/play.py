#!/usr/bin/env python3
"""Play "20 Questions" about video games against a language model."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import orjson
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from ..core.env import load_env
from ..core.settings import Settings
from ..errors import GuessrError
from ..game_loop import GameSession, GameStatus, RoundResult
from ..game_type import GameType
from ..models import get_client_for_model, resolve_model
from ..schemas import AIGuess, AIQuestion, AnswerToGuess, AnswerToQuestion

app = typer.Typer(help="Play 20 Questions about video games against a language model.")
console = Console()

QUIT_WORDS = {"quit", "exit"}


def setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


class Transcript:
    """Append one JSON line per round, like the baseline's raw log."""

    def __init__(self, path: Optional[Path]):
        self.path = path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, game: GameSession, user_input: Optional[str], result: RoundResult) -> None:
        if self.path is None:
            return
        record: Dict[str, Any] = {
            "sessionId": game.session.session_id,
            "gameType": game.session.game_type.value,
            "input": user_input,
            **result.to_dict(),
        }
        with self.path.open("ab") as f:
            f.write(orjson.dumps(record) + b"\n")


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Turn game and configuration errors into a red message and exit code 1."""
    try:
        yield
    except GuessrError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/] {e}")
        raise typer.Exit(1)


def build_game(
    game_type: GameType,
    model: Optional[str],
    budget: Optional[int],
    retries: Optional[int],
    debug: bool,
) -> GameSession:
    seen = load_env()
    settings = Settings.from_env()
    model = model or settings.model
    if debug:
        console.print({"env_keys_detected": seen, "settings": settings})

    client = get_client_for_model(
        model,
        temperature=settings.temperature,
        timeout=settings.timeout_sec,
    )
    budget = budget if budget is not None else settings.question_budget
    console.rule(
        f"[bold green]{game_type.value}[/]\n"
        f"Model: {model} → {resolve_model(model)} | Questions: {budget}"
    )
    return GameSession.create(
        game_type,
        client,
        question_budget=budget,
        max_round_retries=retries if retries is not None else settings.max_round_retries,
    )


def render_player_round(result: RoundResult) -> None:
    reply = result.response
    if isinstance(reply, AnswerToQuestion):
        line = f"[bold cyan]{reply.content.answer}[/]"
        if result.clarification:
            line += f" [dim]({result.clarification})[/]"
        console.print(line)
    elif isinstance(reply, AnswerToGuess):
        colour = "green" if reply.content.correct else "red"
        console.print(f"[{colour}]{reply.content.response}[/]")


def render_ai_round(result: RoundResult) -> None:
    reply = result.response
    if isinstance(reply, AIQuestion):
        console.print(f"[bold cyan]Q{result.question_count}:[/] {reply.content}")
    elif isinstance(reply, AIGuess):
        console.print(f"[bold magenta]Guess #{result.question_count}:[/] {reply.content}")
        if result.score == 0.5:
            console.print("[yellow]So close! Not quite.[/]")
        elif result.score == 0.0:
            console.print("[red]Wrong guess.[/]")


def finish(game: GameSession) -> None:
    s = game.session
    if s.error:
        console.print(f"[red]Game aborted:[/] {s.error}")
    if s.status is GameStatus.WON:
        console.rule("[bold green]Won")
    elif s.status is GameStatus.LOST:
        console.rule("[bold red]Lost")
    else:
        console.rule("[dim]Stopped")
    if s.secret_title:
        console.print(f"The game was [bold]{s.secret_title}[/] ({s.question_count}/{s.question_budget} questions used).")


@app.command()
def player(
    model: Optional[str] = None,
    budget: Optional[int] = None,
    retries: Optional[int] = None,
    transcript: Optional[Path] = None,
    debug: bool = False,
):
    """
    You ask, the model answers. Type 'hint' or 'special' for a hint, 'quit' to stop.
    """
    setup_logging(debug)
    log = Transcript(transcript)
    with exit_on_error():
        game = build_game(GameType.PLAYER_GUESSES, model, budget, retries, debug)
        with console.status("Picking a secret game..."):
            result = game.start()
        log.write(game, None, result)

        if not result.is_over:
            console.print(f"I'm thinking of a video game. You have {game.session.question_budget} questions.")

        while not game.session.status.is_terminal:
            text = Prompt.ask(f"[bold]Question {game.session.question_count + 1}[/]").strip()
            command = text.lower()
            if command in QUIT_WORDS:
                break
            if command in ("hint", "special"):
                hint = game.hint() if command == "hint" else game.special_hint()
                if hint is None:
                    console.print("[yellow]No hint available right now.[/]")
                else:
                    console.print(f"[italic]Hint:[/] {hint.text}")
                continue
            if not text:
                continue

            with console.status("Thinking..."):
                result = game.ask(text)
            log.write(game, text, result)
            render_player_round(result)
    finish(game)


@app.command()
def ai(
    model: Optional[str] = None,
    budget: Optional[int] = None,
    retries: Optional[int] = None,
    transcript: Optional[Path] = None,
    debug: bool = False,
):
    """
    The model asks, you answer Yes, No or Unsure. Type 'quit' to stop.
    """
    setup_logging(debug)
    log = Transcript(transcript)
    with exit_on_error():
        game = build_game(GameType.AI_GUESSES, model, budget, retries, debug)
        secret = Prompt.ask("Which game are you thinking of? [dim](never sent to the model)[/]").strip()

        with console.status("Thinking..."):
            result = game.start(secret)
        log.write(game, None, result)
        render_ai_round(result)

        while not game.session.status.is_terminal:
            reply = Prompt.ask("Your answer", choices=["yes", "no", "unsure", "quit"])
            if reply in QUIT_WORDS:
                break
            with console.status("Thinking..."):
                result = game.answer(reply)
            log.write(game, reply, result)
            render_ai_round(result)
    finish(game)


def cli():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    cli()
