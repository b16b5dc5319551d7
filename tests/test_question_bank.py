from __future__ import annotations

import json
from collections import Counter
from pathlib import Path

import pytest

from trivia_game.question_bank import (
    DEFAULT_QUESTION_BANK,
    QuestionBankError,
    load_question_bank,
    question_to_dict,
    validate_bank,
)
from trivia_game.quiz_core import Category, Difficulty


def test_default_bank_is_valid_and_covers_every_combination() -> None:
    assert validate_bank(DEFAULT_QUESTION_BANK) == DEFAULT_QUESTION_BANK
    combos = Counter((q.category, q.difficulty) for q in DEFAULT_QUESTION_BANK)
    for category in Category:
        for difficulty in Difficulty:
            assert combos[(category, difficulty)] >= 1
    for q in DEFAULT_QUESTION_BANK:
        assert 0 <= q.answer_index < len(q.options)


def test_validate_bank_rejects_duplicate_ids() -> None:
    q = DEFAULT_QUESTION_BANK[0]
    with pytest.raises(QuestionBankError):
        validate_bank([q, q])


def test_load_question_bank_round_trips_the_default_bank(tmp_path: Path) -> None:
    path = tmp_path / "bank.json"
    path.write_text(
        json.dumps({"questions": [question_to_dict(q) for q in DEFAULT_QUESTION_BANK]}),
        encoding="utf-8",
    )
    assert load_question_bank(path) == DEFAULT_QUESTION_BANK


def test_load_question_bank_accepts_missing_explanation(tmp_path: Path) -> None:
    path = tmp_path / "bank.json"
    path.write_text(
        json.dumps(
            {
                "questions": [
                    {
                        "id": "x-1",
                        "category": "PrEP",
                        "difficulty": "hard",
                        "text": "Pick B",
                        "options": ["A", "B"],
                        "answerIndex": 1,
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    (q,) = load_question_bank(path)
    assert q.explanation is None
    assert q.difficulty is Difficulty.HARD
    assert q.answer == "B"


def _single_question(**overrides: object) -> str:
    question = {
        "id": "a",
        "category": "PrEP",
        "difficulty": "easy",
        "text": "?",
        "options": ["A", "B", "C", "D"],
        "answerIndex": 0,
    }
    question.update(overrides)
    return json.dumps({"questions": [question]})


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        _single_question(options="abcd"),
        _single_question(options=["A", 2]),
        _single_question(answerIndex=2.9),
        _single_question(answerIndex=True),
        _single_question(answerIndex="1"),
        json.dumps([]),
        json.dumps({"questions": "nope"}),
        json.dumps({"questions": [42]}),
        json.dumps({"questions": [{"id": "a"}]}),
        json.dumps(
            {
                "questions": [
                    {
                        "id": "a",
                        "category": "PrEP",
                        "difficulty": "impossible",
                        "text": "?",
                        "options": ["A", "B"],
                        "answerIndex": 0,
                    }
                ]
            }
        ),
        json.dumps(
            {
                "questions": [
                    {
                        "id": "a",
                        "category": "PrEP",
                        "difficulty": "easy",
                        "text": "?",
                        "options": ["A", "B"],
                        "answerIndex": 5,
                    }
                ]
            }
        ),
    ],
)
def test_load_question_bank_rejects_malformed_files(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "bank.json"
    path.write_text(payload, encoding="utf-8")
    with pytest.raises(QuestionBankError):
        load_question_bank(path)


def test_load_question_bank_rejects_non_utf8_bytes(tmp_path: Path) -> None:
    path = tmp_path / "bank.json"
    path.write_bytes(b'{"questions": ["\xff\xfe"]}')
    with pytest.raises(QuestionBankError):
        load_question_bank(path)


def test_load_question_bank_missing_file(tmp_path: Path) -> None:
    with pytest.raises(QuestionBankError):
        load_question_bank(tmp_path / "missing.json")
