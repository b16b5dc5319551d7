from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, TypeVar

T = TypeVar("T")


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Category(StrEnum):
    HIV_SELF_TESTING = "HIV Self-Testing"
    PREP = "PrEP"
    REPRODUCTIVE_HEALTH = "Reproductive Health"


class Phase(StrEnum):
    SETUP = "setup"
    PLAYING = "playing"
    RESULT = "result"


DIFFICULTY_POINTS: dict[Difficulty, int] = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 20,
    Difficulty.HARD: 30,
}


def points_for(difficulty: Difficulty) -> int:
    """Points awarded for one correct answer at ``difficulty``."""

    return DIFFICULTY_POINTS[Difficulty(difficulty)]


@dataclass(frozen=True, slots=True)
class Question:
    id: str
    category: Category
    difficulty: Difficulty
    text: str
    options: tuple[str, ...]
    answer_index: int
    explanation: str | None = None

    def __post_init__(self) -> None:
        # Normalise plain strings/lists coming from JSON.
        object.__setattr__(self, "category", Category(self.category))
        object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        object.__setattr__(self, "options", tuple(str(o) for o in self.options))
        if isinstance(self.answer_index, bool) or not isinstance(self.answer_index, int):
            raise TypeError(f"question {self.id!r} answer_index must be an int")
        if str(self.id).strip() == "":
            raise ValueError("question id must be non-empty")
        if len(self.options) < 2:
            raise ValueError(f"question {self.id!r} needs at least two options")
        if not (0 <= self.answer_index < len(self.options)):
            raise ValueError(
                f"question {self.id!r} answer_index {self.answer_index} is outside 0..{len(self.options) - 1}"
            )

    @property
    def answer(self) -> str:
        return self.options[self.answer_index]


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b] inclusive."""
        ...


class SeededRng:
    """Simple seeded RNG wrapper to keep deterministic streams explicit."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(int(seed))

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)


def shuffled(items: Iterable[T], *, rng: RandomSource) -> list[T]:
    """Return a Fisher-Yates permutation of ``items``; the input is not touched."""

    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def select_questions(
    pool: Iterable[Question],
    difficulty: Difficulty,
    batch_size: int,
    *,
    rng: RandomSource,
    category: Category | None = None,
) -> tuple[Question, ...]:
    """Draw a randomized batch of at most ``batch_size`` matching questions.

    A pool smaller than ``batch_size`` yields a shorter batch. Questions that
    share an id with an earlier one are dropped.
    """

    if batch_size < 0:
        raise ValueError("batch_size must be >= 0")

    seen: set[str] = set()
    matching: list[Question] = []
    for q in pool:
        if q.difficulty != difficulty:
            continue
        if category is not None and q.category != category:
            continue
        if q.id in seen:
            continue
        seen.add(q.id)
        matching.append(q)

    return tuple(shuffled(matching, rng=rng)[:batch_size])


@dataclass(frozen=True, slots=True)
class AnswerOutcome:
    """Emitted once per scored submission."""

    question_index: int
    question_id: str
    selected_option: int
    answer_index: int
    is_correct: bool
    points_awarded: int
    explanation: str | None = None

    @property
    def title(self) -> str:
        return "Correct!" if self.is_correct else "Not quite"

    @property
    def message(self) -> str:
        if self.explanation:
            return self.explanation
        return "Great job!" if self.is_correct else "You've got this next time."


@dataclass(frozen=True, slots=True)
class PhaseChanged:
    previous: Phase
    current: Phase


@dataclass(frozen=True, slots=True)
class ValidationNotice:
    title: str
    message: str


SessionEvent = AnswerOutcome | PhaseChanged | ValidationNotice


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """View model for the UI (pure data)."""

    phase: Phase
    player_name: str
    difficulty: Difficulty
    category: Category | None
    question: Question | None
    question_number: int
    total_questions: int
    score: int
    selected_option: int | None
    points_per_correct: int
    rank: int | None = None
    last_outcome: AnswerOutcome | None = None

    @property
    def is_last_question(self) -> bool:
        return self.total_questions > 0 and self.question_number >= self.total_questions

    @property
    def progress_percent(self) -> int:
        if self.total_questions == 0:
            return 0
        return int(round((max(0, self.question_number - 1) / self.total_questions) * 100))
