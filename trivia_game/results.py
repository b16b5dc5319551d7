from __future__ import annotations

from dataclasses import dataclass

from .quiz_core import AnswerOutcome, Category, Difficulty, Phase, points_for
from .session import TriviaSession


@dataclass(frozen=True, slots=True)
class SessionResult:
    """Summary of a finished play-through, for the result screen."""

    player_name: str
    difficulty: Difficulty
    category: Category | None
    total_questions: int
    answered: int
    correct: int
    score: int
    max_score: int
    accuracy: float
    rank: int | None

    outcomes: list[AnswerOutcome]

    @property
    def ranked(self) -> bool:
        return self.rank is not None


def session_result_from_session(session: TriviaSession) -> SessionResult:
    """Build a SessionResult from a TriviaSession in the result phase."""

    if session.phase is not Phase.RESULT:
        raise ValueError("session has not finished yet")

    outcomes = session.outcomes()
    total = len(session.batch)
    answered = len(outcomes)
    correct = sum(1 for o in outcomes if o.is_correct)

    return SessionResult(
        player_name=session.player_name.strip(),
        difficulty=session.difficulty,
        category=session.category,
        total_questions=total,
        answered=answered,
        correct=correct,
        score=int(session.score),
        max_score=total * points_for(session.difficulty),
        accuracy=0.0 if answered == 0 else correct / answered,
        rank=session.rank,
        outcomes=outcomes,
    )
