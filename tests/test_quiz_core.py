"""Tests for question selection, the Question model and the scoring policy."""

from __future__ import annotations

from collections import Counter

import pytest

from trivia_game.quiz_core import (
    DIFFICULTY_POINTS,
    AnswerOutcome,
    Category,
    Difficulty,
    Question,
    SeededRng,
    points_for,
    select_questions,
    shuffled,
)


def _q(
    qid: str,
    difficulty: Difficulty = Difficulty.EASY,
    *,
    category: Category = Category.PREP,
    answer_index: int = 0,
) -> Question:
    return Question(
        id=qid,
        category=category,
        difficulty=difficulty,
        text=f"Question {qid}?",
        options=("A", "B", "C", "D"),
        answer_index=answer_index,
    )


class ScriptedRng:
    """Returns pre-recorded draws so permutations can be asserted exactly."""

    def __init__(self, draws: list[int]) -> None:
        self._draws = list(draws)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return self._draws.pop(0)


def _mixed_pool() -> list[Question]:
    pool: list[Question] = []
    for d in Difficulty:
        for i in range(6):
            pool.append(_q(f"{d.value}-{i}", d, category=list(Category)[i % 3]))
    return pool


@pytest.mark.parametrize("difficulty", list(Difficulty))
@pytest.mark.parametrize("batch_size", [0, 1, 4, 6, 10])
def test_select_filters_by_difficulty_without_duplicates(difficulty: Difficulty, batch_size: int) -> None:
    pool = _mixed_pool()
    batch = select_questions(pool, difficulty, batch_size, rng=SeededRng(7))

    assert all(q.difficulty is difficulty for q in batch)
    assert len({q.id for q in batch}) == len(batch)
    assert len(batch) == min(batch_size, 6)


def test_select_with_full_batch_is_a_permutation() -> None:
    pool = [q for q in _mixed_pool() if q.difficulty is Difficulty.HARD]
    batch = select_questions(pool, Difficulty.HARD, len(pool), rng=SeededRng(3))
    assert Counter(q.id for q in batch) == Counter(q.id for q in pool)


def test_select_returns_short_batch_when_pool_is_small() -> None:
    pool = [_q("e1"), _q("e2"), _q("e3"), _q("m1", Difficulty.MEDIUM)]
    batch = select_questions(pool, Difficulty.EASY, 5, rng=SeededRng(11))
    assert sorted(q.id for q in batch) == ["e1", "e2", "e3"]


def test_select_filters_by_category_when_given() -> None:
    pool = _mixed_pool()
    batch = select_questions(pool, Difficulty.EASY, 10, rng=SeededRng(1), category=Category.PREP)
    assert batch
    assert all(q.category is Category.PREP for q in batch)
    assert len(batch) == 2


def test_select_drops_repeated_ids() -> None:
    pool = [_q("dup"), _q("dup"), _q("other")]
    batch = select_questions(pool, Difficulty.EASY, 5, rng=SeededRng(5))
    assert sorted(q.id for q in batch) == ["dup", "other"]


def test_select_rejects_negative_batch_size() -> None:
    with pytest.raises(ValueError):
        select_questions([_q("a")], Difficulty.EASY, -1, rng=SeededRng(1))


def test_select_same_seed_same_batch() -> None:
    pool = _mixed_pool()
    b1 = select_questions(pool, Difficulty.MEDIUM, 4, rng=SeededRng(99))
    b2 = select_questions(pool, Difficulty.MEDIUM, 4, rng=SeededRng(99))
    assert [q.id for q in b1] == [q.id for q in b2]


def test_fisher_yates_uses_descending_ranges() -> None:
    rng = ScriptedRng([0, 1])
    out = shuffled(["a", "b", "c"], rng=rng)
    # i=2 swaps with j=0, then i=1 stays put.
    assert out == ["c", "b", "a"]
    assert rng.calls == [(0, 2), (0, 1)]


def test_shuffled_does_not_touch_input() -> None:
    items = [1, 2, 3, 4, 5]
    shuffled(items, rng=SeededRng(4))
    assert items == [1, 2, 3, 4, 5]


def test_shuffle_of_empty_and_single_makes_no_draws() -> None:
    rng = ScriptedRng([])
    assert shuffled([], rng=rng) == []
    assert shuffled(["x"], rng=rng) == ["x"]
    assert rng.calls == []


def test_scoring_policy_points() -> None:
    assert points_for(Difficulty.EASY) == 10
    assert points_for(Difficulty.MEDIUM) == 20
    assert points_for(Difficulty.HARD) == 30
    assert points_for("hard") == 30  # type: ignore[arg-type]
    assert set(DIFFICULTY_POINTS) == set(Difficulty)


def test_question_rejects_out_of_range_answer() -> None:
    with pytest.raises(ValueError):
        Question(
            id="bad",
            category=Category.PREP,
            difficulty=Difficulty.EASY,
            text="?",
            options=("A", "B"),
            answer_index=2,
        )


def test_question_rejects_single_option_and_blank_id() -> None:
    with pytest.raises(ValueError):
        Question(id="one", category=Category.PREP, difficulty=Difficulty.EASY, text="?", options=("A",), answer_index=0)
    with pytest.raises(ValueError):
        Question(id="  ", category=Category.PREP, difficulty=Difficulty.EASY, text="?", options=("A", "B"), answer_index=0)


def test_question_normalises_plain_values() -> None:
    q = Question(
        id="plain",
        category="PrEP",  # type: ignore[arg-type]
        difficulty="medium",  # type: ignore[arg-type]
        text="?",
        options=["A", "B"],  # type: ignore[arg-type]
        answer_index=1,
    )
    assert q.category is Category.PREP
    assert q.difficulty is Difficulty.MEDIUM
    assert q.options == ("A", "B")
    assert q.answer == "B"


def test_answer_outcome_messages_fall_back_without_explanation() -> None:
    good = AnswerOutcome(0, "q", 1, 1, True, 10)
    bad = AnswerOutcome(0, "q", 0, 1, False, 0, explanation="Because.")
    assert (good.title, good.message) == ("Correct!", "Great job!")
    assert (bad.title, bad.message) == ("Not quite", "Because.")


@pytest.mark.parametrize("answer_index", [True, 1.0, "1"])
def test_question_rejects_non_int_answer_index(answer_index: object) -> None:
    with pytest.raises(TypeError):
        Question(
            id="typed",
            category=Category.PREP,
            difficulty=Difficulty.EASY,
            text="?",
            options=("A", "B"),
            answer_index=answer_index,  # type: ignore[arg-type]
        )
