from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .clock import Clock, iso_timestamp
from .leaderboard import LeaderboardStore, ScoreEntry
from .quiz_core import (
    AnswerOutcome,
    Category,
    Difficulty,
    Phase,
    PhaseChanged,
    Question,
    RandomSource,
    SessionEvent,
    SessionSnapshot,
    ValidationNotice,
    points_for,
    select_questions,
)

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5

SessionListener = Callable[[SessionEvent], None]


class TriviaSession:
    """One player's play-through: setup -> playing -> result -> setup.

    - Deterministic: batches come from the injected random source.
    - Time is entirely via injected Clock (only used to stamp score entries).
    - Calls made in the wrong phase are ignored and return False.
    """

    def __init__(
        self,
        *,
        bank: Sequence[Question],
        leaderboard: LeaderboardStore,
        clock: Clock,
        rng: RandomSource,
        batch_size: int = DEFAULT_BATCH_SIZE,
        difficulty: Difficulty = Difficulty.EASY,
        category: Category | None = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be > 0")

        self._bank = tuple(bank)
        self._leaderboard = leaderboard
        self._clock = clock
        self._rng = rng
        self._batch_size = int(batch_size)

        self._player_name = ""
        self._difficulty = Difficulty(difficulty)
        self._category = None if category is None else Category(category)

        self._phase = Phase.SETUP
        self._batch: tuple[Question, ...] = ()
        self._current_index = 0
        self._score = 0
        self._selected_option: int | None = None
        self._rank: int | None = None
        self._last_entry: ScoreEntry | None = None
        self._outcomes: list[AnswerOutcome] = []

        self._listeners: list[SessionListener] = []
        self._enter_setup()

    # -- observers -----------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` for session events; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # -- read accessors ------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def player_name(self) -> str:
        return self._player_name

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @property
    def category(self) -> Category | None:
        return self._category

    @property
    def batch(self) -> tuple[Question, ...]:
        return self._batch

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def score(self) -> int:
        return self._score

    @property
    def selected_option(self) -> int | None:
        return self._selected_option

    @property
    def rank(self) -> int | None:
        return self._rank

    @property
    def last_entry(self) -> ScoreEntry | None:
        return self._last_entry

    @property
    def points_per_correct(self) -> int:
        return points_for(self._difficulty)

    @property
    def current_question(self) -> Question | None:
        if self._phase is not Phase.PLAYING:
            return None
        if self._current_index >= len(self._batch):
            return None
        return self._batch[self._current_index]

    def outcomes(self) -> list[AnswerOutcome]:
        return list(self._outcomes)

    def leaderboard_snapshot(self, limit: int = 10) -> list[ScoreEntry]:
        return self._leaderboard.list(limit)

    def snapshot(self) -> SessionSnapshot:
        question = self.current_question
        return SessionSnapshot(
            phase=self._phase,
            player_name=self._player_name,
            difficulty=self._difficulty,
            category=self._category,
            question=question,
            question_number=0 if question is None else self._current_index + 1,
            total_questions=len(self._batch),
            score=self._score,
            selected_option=self._selected_option,
            points_per_correct=self.points_per_correct,
            rank=self._rank,
            last_outcome=self._outcomes[-1] if self._outcomes else None,
        )

    # -- setup ---------------------------------------------------------------

    def configure_session(
        self,
        name: str,
        difficulty: Difficulty,
        category: Category | None = None,
    ) -> bool:
        if self._phase is not Phase.SETUP:
            return False

        difficulty = Difficulty(difficulty)
        category = None if category is None else Category(category)
        redraw = difficulty != self._difficulty or category != self._category

        self._player_name = str(name)
        self._difficulty = difficulty
        self._category = category
        if redraw:
            self._draw_batch()
        return True

    def start_session(self) -> bool:
        """Setup -> Playing. Refuses (with a notice) on a blank name or an empty batch."""

        if self._phase is not Phase.SETUP:
            return False
        if self._player_name.strip() == "":
            self._emit(ValidationNotice("Enter your name", "We'll use it on the leaderboard."))
            return False
        if not self._batch:
            self._emit(
                ValidationNotice(
                    "No questions available",
                    "Try another category or difficulty.",
                )
            )
            return False

        self._set_phase(Phase.PLAYING)
        return True

    # -- playing -------------------------------------------------------------

    def submit_answer(self, option_index: int) -> bool:
        """Answer the current question. Only the first submission per question counts."""

        question = self.current_question
        if question is None:
            return False
        if self._selected_option is not None:
            return False
        if not (0 <= option_index < len(question.options)):
            return False

        self._selected_option = int(option_index)
        is_correct = self._selected_option == question.answer_index
        awarded = self.points_per_correct if is_correct else 0
        self._score += awarded

        outcome = AnswerOutcome(
            question_index=self._current_index,
            question_id=question.id,
            selected_option=self._selected_option,
            answer_index=question.answer_index,
            is_correct=is_correct,
            points_awarded=awarded,
            explanation=question.explanation,
        )
        self._outcomes.append(outcome)
        self._emit(outcome)
        return True

    def advance(self) -> bool:
        """Move to the next question, or finish the batch and record the score.

        Advancing without answering is allowed; that question scores nothing.
        """

        if self._phase is not Phase.PLAYING:
            return False

        if self._current_index + 1 < len(self._batch):
            self._current_index += 1
            self._selected_option = None
            return True

        self._finish()
        return True

    # -- result --------------------------------------------------------------

    def restart_session(self) -> bool:
        if self._phase is not Phase.RESULT:
            return False
        self._enter_setup()
        return True

    # -- internals -----------------------------------------------------------

    def _finish(self) -> None:
        entry = ScoreEntry(
            name=self._player_name.strip(),
            score=self._score,
            timestamp=iso_timestamp(self._clock.now()),
        )
        self._last_entry = entry
        self._rank = self._leaderboard.record(entry)
        self._set_phase(Phase.RESULT)

    def _enter_setup(self) -> None:
        previous = self._phase
        self._phase = Phase.SETUP
        self._rank = None
        self._last_entry = None
        self._draw_batch()
        if previous is not Phase.SETUP:
            self._announce(previous, Phase.SETUP)

    def _draw_batch(self) -> None:
        self._batch = select_questions(
            self._bank,
            self._difficulty,
            self._batch_size,
            rng=self._rng,
            category=self._category,
        )
        self._current_index = 0
        self._score = 0
        self._selected_option = None
        self._outcomes = []

    def _set_phase(self, phase: Phase) -> None:
        previous = self._phase
        self._phase = phase
        self._announce(previous, phase)

    def _announce(self, previous: Phase, current: Phase) -> None:
        logger.debug("Session phase %s -> %s", previous.value, current.value)
        self._emit(PhaseChanged(previous=previous, current=current))
