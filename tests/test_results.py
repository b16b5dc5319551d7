from __future__ import annotations

from datetime import datetime, timezone

import pytest

from trivia_game.leaderboard import LeaderboardStore
from trivia_game.persistence import MemoryStorage
from trivia_game.question_bank import DEFAULT_QUESTION_BANK
from trivia_game.quiz_core import Category, Difficulty, SeededRng
from trivia_game.results import session_result_from_session
from trivia_game.session import TriviaSession


class FixedClock:
    def now(self) -> datetime:
        return datetime(2024, 1, 1, tzinfo=timezone.utc)


def _session() -> TriviaSession:
    return TriviaSession(
        bank=DEFAULT_QUESTION_BANK,
        leaderboard=LeaderboardStore(MemoryStorage()),
        clock=FixedClock(),
        rng=SeededRng(8),
    )


def test_result_requires_finished_session() -> None:
    session = _session()
    with pytest.raises(ValueError):
        session_result_from_session(session)


def test_result_summarises_answers() -> None:
    session = _session()
    session.configure_session(" Ada ", Difficulty.MEDIUM)
    session.start_session()
    total = len(session.batch)
    assert total == 3

    q = session.current_question
    assert q is not None
    session.submit_answer(q.answer_index)
    session.advance()
    q = session.current_question
    assert q is not None
    session.submit_answer((q.answer_index + 1) % len(q.options))
    session.advance()
    session.advance()  # skip the last one

    result = session_result_from_session(session)
    assert result.player_name == "Ada"
    assert result.difficulty is Difficulty.MEDIUM
    assert result.category is None
    assert (result.total_questions, result.answered, result.correct) == (3, 2, 1)
    assert (result.score, result.max_score) == (20, 60)
    assert result.accuracy == pytest.approx(0.5)
    assert result.rank == 1
    assert [o.is_correct for o in result.outcomes] == [True, False]


def test_result_with_no_answers_has_zero_accuracy() -> None:
    session = _session()
    session.configure_session("Ada", Difficulty.EASY, Category.PREP)
    session.start_session()
    session.advance()

    result = session_result_from_session(session)
    assert result.answered == 0
    assert result.accuracy == 0.0
    assert result.category is Category.PREP
