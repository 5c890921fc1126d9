"""
Tests for the game session state machine.
"""

import pytest

from guessr.clarifications import SERIES_CLARIFICATION
from guessr.errors import SessionStateError, TransportError, UnknownGameTypeError
from guessr.exclusions import ExclusionList
from guessr.game_loop import GameSession, GameStatus
from guessr.game_type import GameType
from guessr.schemas import AIGuess, AIQuestion, AnswerToGuess, AnswerToQuestion

from conftest import ScriptedClient, ai_guess, ai_question, answer, guess_result


class TestCreate:

    @pytest.mark.parametrize("bad", ["Player-Guesses", "", "ai_guesses", None, 1])
    def test_unknown_game_type_rejected_before_model_call(self, client, bad):
        with pytest.raises(UnknownGameTypeError):
            GameSession.create(bad, client)
        assert client.calls == 0

    @pytest.mark.parametrize("budget", [0, -1, True])
    def test_budget_must_be_positive(self, client, budget):
        with pytest.raises(ValueError):
            GameSession.create("player-guesses", client, question_budget=budget)

    def test_new_session_awaits_secret(self, make_game):
        game = make_game("ai-guesses", question_budget=10)
        s = game.session
        assert s.game_type is GameType.AI_GUESSES
        assert s.status is GameStatus.AWAITING_SECRET
        assert s.question_count == 0
        assert s.question_budget == 10
        assert s.secret_title is None


class TestPlayerGuessesStart:

    def test_start_picks_secret(self, make_game, client, exclusions):
        exclusions.append("Halo")
        game = make_game("player-guesses")
        client.queue({"secretGame": "Portal"})

        result = game.start()

        assert result.status is GameStatus.ACTIVE
        assert game.session.secret_title == "Portal"
        assert "[Halo]" in client.prompts[0]
        assert exclusions.titles() == ("Halo", "Portal")

    def test_excluded_pick_is_retried(self, make_game, client, exclusions):
        exclusions.append("Halo")
        game = make_game("player-guesses")
        client.queue({"secretGame": "halo"}, {"secretGame": "Celeste"})

        game.start()

        assert client.calls == 2
        assert game.session.secret_title == "Celeste"

    def test_pick_failure_ends_session(self, make_game, client, exclusions):
        game = make_game("player-guesses")
        client.queue("no idea", {"title": "Doom"})

        result = game.start()

        assert result.status is GameStatus.LOST
        assert result.error
        assert game.session.secret_title is None
        assert len(exclusions) == 0

    def test_cannot_start_twice(self, player_game):
        game = player_game()
        with pytest.raises(SessionStateError):
            game.start()

    def test_secret_is_not_accepted_from_caller(self, make_game):
        game = make_game("player-guesses")
        with pytest.raises(SessionStateError):
            game.start("Portal")


class TestPlayerGuessesRounds:

    def test_answer_increments_count(self, player_game, client):
        game = player_game()
        client.queue(answer(0, "No"))

        result = game.ask("Is it an RPG?")

        assert isinstance(result.response, AnswerToQuestion)
        assert result.kind == "answer"
        assert result.response.content.answer == "No"
        assert result.question_count == 1
        assert result.status is GameStatus.ACTIVE
        assert "Is it an RPG?" in client.prompts[-1]
        assert '"questionCount": 0' in client.prompts[-1]

    def test_history_is_sent_on_later_rounds(self, player_game, client):
        game = player_game()
        client.queue(answer(0), answer(1))
        game.ask("Is it a puzzle game?")
        game.ask("Is it by Valve?")

        assert client.histories[1] == ()
        assert len(client.histories[2]) == 2
        assert client.histories[2][1].role == "model"

    def test_correct_guess_wins(self, player_game, client):
        game = player_game()
        client.queue(answer(0), guess_result(1, True, "Portal!"))
        game.ask("Is it first person?")

        result = game.ask("Is it Portal?")

        assert isinstance(result.response, AnswerToGuess)
        assert result.status is GameStatus.WON
        assert result.question_count == 2
        assert result.score is None

    def test_wrong_guess_continues(self, player_game, client):
        game = player_game()
        client.queue(guess_result(0, False))

        result = game.ask("Is it Half-Life?")

        assert result.status is GameStatus.ACTIVE
        assert result.question_count == 1

    def test_last_round_without_win_loses(self, player_game, client):
        game = player_game(question_budget=3)
        client.queue(answer(0), answer(1), guess_result(2, False))

        statuses = [game.ask(q).status for q in ("A?", "B?", "Is it Doom?")]

        assert statuses == [GameStatus.ACTIVE, GameStatus.ACTIVE, GameStatus.LOST]
        assert game.session.question_count == 3

    def test_correct_guess_on_last_round_wins(self, player_game, client):
        game = player_game(question_budget=1)
        client.queue(guess_result(0, True))
        assert game.ask("Portal?").status is GameStatus.WON

    @pytest.mark.parametrize("budget", [1, 2, 5])
    def test_session_ends_within_budget(self, player_game, client, budget):
        game = player_game(question_budget=budget)
        client.queue(*[answer(i, "No") for i in range(budget)])

        rounds = 0
        while not game.session.status.is_terminal:
            game.ask("Is it a racing game?")
            rounds += 1

        assert rounds == budget
        assert game.session.status is GameStatus.LOST
        assert game.session.question_count == budget

    def test_invalid_reply_is_retried_without_counting(self, player_game, client):
        game = player_game()
        client.queue(answer(0, "Maybe"), answer(0, "Yes"))

        result = game.ask("Is it a platformer?")

        assert client.calls == 3  # pick + two attempts
        assert result.question_count == 1
        assert result.status is GameStatus.ACTIVE

    def test_question_count_mismatch_is_retried(self, player_game, client):
        game = player_game()
        client.queue(answer(5), answer(0))
        assert game.ask("Is it new?").question_count == 1

    def test_transport_error_is_retried(self, player_game, client):
        game = player_game()
        client.queue(TransportError("timeout"), answer(0))
        assert game.ask("Is it old?").status is GameStatus.ACTIVE

    def test_unexpected_client_exception_counts_as_transport(self, player_game, client):
        game = player_game()
        client.queue(RuntimeError("socket closed"), answer(0))
        assert game.ask("Is it old?").question_count == 1

    def test_exhausted_retries_lose_without_counting(self, player_game, client):
        game = player_game()
        client.queue(answer(0), TransportError("offline"), "garbage")
        game.ask("Is it 3D?")

        result = game.ask("Is it multiplayer?")

        assert result.status is GameStatus.LOST
        assert result.question_count == 1
        assert result.response is None
        assert "Invalid player-qa response" in result.error
        assert game.session.error == result.error

    def test_zero_retries(self, player_game, client):
        game = player_game(max_round_retries=0)
        client.queue("garbage", answer(0))

        result = game.ask("Is it 3D?")

        assert result.status is GameStatus.LOST
        assert client.calls == 2

    def test_terminal_session_rejects_more_questions(self, player_game, client):
        game = player_game(question_budget=1)
        client.queue(answer(0))
        game.ask("Is it 2D?")
        with pytest.raises(SessionStateError):
            game.ask("Is it 3D?")

    def test_empty_question_rejected_before_model_call(self, player_game, client):
        game = player_game()
        with pytest.raises(SessionStateError):
            game.ask("   ")
        assert client.calls == 1

    def test_ask_before_start(self, make_game):
        with pytest.raises(SessionStateError):
            make_game("player-guesses").ask("Is it Doom?")

    def test_answer_not_available(self, player_game):
        with pytest.raises(SessionStateError):
            player_game().answer("Yes")


class TestClarifications:

    def test_series_question_on_spinoff_is_clarified(self, player_game, client):
        game = player_game("The Elder Scrolls Online")
        client.queue(answer(0, "Yes"))
        result = game.ask("Is it part of a series?")
        assert result.clarification == SERIES_CLARIFICATION

    def test_model_clarification_wins(self, player_game, client):
        game = player_game("The Elder Scrolls Online")
        client.queue(answer(0, "Yes", clarification="It's an MMO entry."))
        assert game.ask("Is it a franchise game?").clarification == "It's an MMO entry."

    def test_plain_question_has_no_clarification(self, player_game, client):
        game = player_game("Portal")
        client.queue(answer(0))
        assert game.ask("Is it a puzzle game?").clarification is None


class TestHints:

    FACTS = {"developer": "Valve", "publisher": "Valve", "releaseYear": 2007}

    def test_fact_hint_fetched_once(self, player_game, client):
        game = player_game()
        client.queue(self.FACTS)

        first = game.hint("releaseYear")
        second = game.hint("developer")

        assert first.text == "It was released in 2007."
        assert second.text == "The developer is Valve."
        assert client.calls == 2
        assert game.session.used_hint is True
        assert game.session.question_count == 0

    def test_random_hint_type(self, player_game, client):
        game = player_game()
        client.queue(self.FACTS)
        hint = game.hint()
        assert hint.hint_type in ("developer", "publisher", "releaseYear")

    def test_unknown_hint_type(self, player_game):
        with pytest.raises(SessionStateError):
            player_game().hint("genre")

    def test_hint_failure_keeps_game_alive(self, player_game, client):
        game = player_game()
        client.queue("nope", {"developer": "Valve"})

        assert game.hint() is None
        assert game.session.status is GameStatus.ACTIVE
        assert game.session.used_hint is False

    def test_special_hint_that_leaks_title_is_retried(self, player_game, client):
        game = player_game("Portal")
        client.queue({"special": "It's Portal, obviously."}, {"special": "Think with holes."})

        hint = game.special_hint()

        assert hint.text == "Think with holes."
        assert game.session.used_hint is True


class TestAIGuesses:

    def test_start_requires_secret(self, make_game, client):
        game = make_game("ai-guesses")
        with pytest.raises(SessionStateError):
            game.start("  ")
        assert client.calls == 0

    def test_start_asks_first_question(self, make_game, client):
        game = make_game("ai-guesses", question_budget=20)
        client.queue(ai_question("Is it an RPG?"))

        result = game.start("Stardew Valley")

        assert isinstance(result.response, AIQuestion)
        assert result.question_count == 1
        assert result.status is GameStatus.ACTIVE
        assert "Total questions: 20" in client.prompts[0]
        assert "Stardew" not in client.prompts[0]

    def test_answer_builds_follow_up(self, make_game, client):
        game = make_game("ai-guesses", question_budget=20)
        client.queue(ai_question(), ai_question("Is it by Valve?"))
        game.start("Portal")

        result = game.answer("yes")

        assert result.question_count == 2
        assert 'just answered "Yes"' in client.prompts[1]
        assert "19 questions left" in client.prompts[1]
        assert len(client.histories[1]) == 2

    def test_exact_guess_wins(self, make_game, client):
        game = make_game("ai-guesses")
        client.queue(ai_question(), ai_guess("portal"))
        game.start("Portal")

        result = game.answer("No")

        assert isinstance(result.response, AIGuess)
        assert result.score == 1.0
        assert result.status is GameStatus.WON

    def test_near_guess_continues(self, make_game, client):
        game = make_game("ai-guesses")
        client.queue(ai_guess("Portel"))

        result = game.start("Portal")

        assert result.score == 0.5
        assert result.status is GameStatus.ACTIVE

    def test_budget_exhaustion_loses(self, make_game, client):
        game = make_game("ai-guesses", question_budget=2)
        client.queue(ai_question(), ai_guess("Doom"))
        game.start("Stardew Valley")

        result = game.answer("Unsure")

        assert result.score == 0.0
        assert result.status is GameStatus.LOST
        assert result.question_count == 2

    def test_invalid_answer_rejected(self, make_game, client):
        game = make_game("ai-guesses")
        client.queue(ai_question())
        game.start("Portal")
        with pytest.raises(SessionStateError):
            game.answer("maybe")
        assert client.calls == 1

    def test_failed_first_turn_loses(self, make_game, client):
        game = make_game("ai-guesses")
        client.queue(answer(0), TransportError("down"))

        result = game.start("Portal")

        assert result.status is GameStatus.LOST
        assert result.question_count == 0

    def test_ask_not_available(self, make_game, client):
        game = make_game("ai-guesses")
        client.queue(ai_question())
        game.start("Portal")
        with pytest.raises(SessionStateError):
            game.ask("Is it Doom?")


    def test_wrong_non_latin_guess_does_not_win(self, make_game, client):
        game = make_game("ai-guesses")
        client.queue(ai_guess("ドラゴンクエスト"))

        result = game.start("ファイナルファンタジー")

        assert result.score == 0.0
        assert result.status is GameStatus.ACTIVE


class TestSerialization:

    def test_round_result_to_dict(self, player_game, client):
        game = player_game()
        client.queue(answer(0, "Yes", confidence=9))
        data = game.ask("Is it fun?").to_dict()
        assert data["status"] == "active"
        assert data["questionCount"] == 1
        assert data["response"] == {
            "type": "answer",
            "questionCount": 0,
            "content": {"answer": "Yes", "confidence": 9},
        }

    def test_session_to_dict_hides_secret(self, player_game):
        game = player_game("Portal")
        assert game.session.to_dict()["secretTitle"] is None
        assert game.session.to_dict(reveal_secret=True)["secretTitle"] == "Portal"


def test_sessions_share_process_exclusions_only_when_not_given():
    shared = ExclusionList()
    a = GameSession.create("player-guesses", ScriptedClient([{"secretGame": "Doom"}]), exclusions=shared)
    b = GameSession.create("player-guesses", ScriptedClient([{"secretGame": "Quake"}]), exclusions=shared)
    a.start()
    b.start()
    assert shared.titles() == ("Doom", "Quake")
