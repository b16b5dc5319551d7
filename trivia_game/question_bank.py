from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from .quiz_core import Category, Difficulty, Question

logger = logging.getLogger(__name__)


class QuestionBankError(ValueError):
    """Raised when a question bank file cannot be turned into questions."""


DEFAULT_QUESTION_BANK: tuple[Question, ...] = (
    # HIV Self-Testing
    Question(
        id="hivst-e-1",
        category=Category.HIV_SELF_TESTING,
        difficulty=Difficulty.EASY,
        text="What does HIV self-testing allow you to do?",
        options=(
            "Test yourself for HIV in private",
            "Cure HIV at home",
            "Donate blood at home",
            "Vaccinate against HIV",
        ),
        answer_index=0,
        explanation="HIV self-testing lets you test yourself discreetly and privately.",
    ),
    Question(
        id="hivst-m-1",
        category=Category.HIV_SELF_TESTING,
        difficulty=Difficulty.MEDIUM,
        text="After a reactive (positive) self-test, what should you do next?",
        options=(
            "Start medication immediately without consultation",
            "Confirm with a facility-based test and seek care",
            "Ignore it if you feel healthy",
            "Repeat the self-test every hour",
        ),
        answer_index=1,
        explanation="A reactive self-test should be confirmed at a clinic or lab before starting care.",
    ),
    Question(
        id="hivst-h-1",
        category=Category.HIV_SELF_TESTING,
        difficulty=Difficulty.HARD,
        text="Which window period best describes oral-fluid HIV self-tests?",
        options=("1-2 days", "About 3 months", "1 year", "There is no window period"),
        answer_index=1,
        explanation="Oral tests can take up to 3 months to detect antibodies after exposure.",
    ),
    # PrEP
    Question(
        id="prep-e-1",
        category=Category.PREP,
        difficulty=Difficulty.EASY,
        text="What is PrEP primarily used for?",
        options=("Preventing HIV", "Treating flu", "Lowering blood pressure", "Curing HIV"),
        answer_index=0,
        explanation="Pre-Exposure Prophylaxis (PrEP) greatly reduces the risk of getting HIV.",
    ),
    Question(
        id="prep-m-1",
        category=Category.PREP,
        difficulty=Difficulty.MEDIUM,
        text="To be most effective, PrEP should be taken...",
        options=("Only when you remember", "As prescribed, consistently", "Once per month", "Only after sex"),
        answer_index=1,
        explanation="Consistency matters. Daily oral PrEP or per-event per provider guidance.",
    ),
    Question(
        id="prep-h-1",
        category=Category.PREP,
        difficulty=Difficulty.HARD,
        text="Which option is a long-acting form of PrEP available in some settings?",
        options=("Cabotegravir injection", "Vitamin C infusion", "Herbal syrup", "Penicillin injection"),
        answer_index=0,
        explanation="Long-acting cabotegravir injections are an approved PrEP option in some countries.",
    ),
    # Reproductive Health
    Question(
        id="rh-e-1",
        category=Category.REPRODUCTIVE_HEALTH,
        difficulty=Difficulty.EASY,
        text="Which is a modern contraceptive method?",
        options=("Condoms", "Garlic", "Cold showers", "Skipping meals"),
        answer_index=0,
        explanation="Condoms are a modern method and also help prevent STIs including HIV.",
    ),
    Question(
        id="rh-m-1",
        category=Category.REPRODUCTIVE_HEALTH,
        difficulty=Difficulty.MEDIUM,
        text="Which symptom warrants STI testing?",
        options=("Unusual discharge", "Hiccups", "Dry skin", "Sneezing"),
        answer_index=0,
        explanation="Unusual discharge can signal an STI. Testing and treatment are important.",
    ),
    Question(
        id="rh-h-1",
        category=Category.REPRODUCTIVE_HEALTH,
        difficulty=Difficulty.HARD,
        text="Emergency contraception is most effective when taken within...",
        options=("120 hours", "2 weeks", "1 month", "It has no time limit"),
        answer_index=0,
        explanation="Most effective within 120 hours (5 days), earlier is better.",
    ),
)


def validate_bank(questions: Iterable[Question]) -> tuple[Question, ...]:
    """Return the questions as a tuple, rejecting duplicate ids."""

    bank = tuple(questions)
    seen: set[str] = set()
    for q in bank:
        if q.id in seen:
            raise QuestionBankError(f"duplicate question id {q.id!r}")
        seen.add(q.id)
    return bank


def question_from_dict(data: object) -> Question:
    if not isinstance(data, dict):
        raise QuestionBankError("question entries must be JSON objects")
    options = data.get("options")
    if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
        raise QuestionBankError(f"question {data.get('id')!r}: options must be a list of strings")
    answer_index = data.get("answerIndex")
    if isinstance(answer_index, bool) or not isinstance(answer_index, int):
        raise QuestionBankError(f"question {data.get('id')!r}: answerIndex must be an integer")
    try:
        explanation = data.get("explanation")
        return Question(
            id=str(data["id"]),
            category=Category(data["category"]),
            difficulty=Difficulty(data["difficulty"]),
            text=str(data["text"]),
            options=tuple(options),
            answer_index=answer_index,
            explanation=None if explanation is None else str(explanation),
        )
    except KeyError as exc:
        raise QuestionBankError(f"question is missing field {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise QuestionBankError(f"invalid question {data.get('id')!r}: {exc}") from exc


def question_to_dict(question: Question) -> dict[str, object]:
    out: dict[str, object] = {
        "id": question.id,
        "category": question.category.value,
        "difficulty": question.difficulty.value,
        "text": question.text,
        "options": list(question.options),
        "answerIndex": question.answer_index,
    }
    if question.explanation is not None:
        out["explanation"] = question.explanation
    return out


def load_question_bank(path: Path) -> tuple[Question, ...]:
    """Load ``{"questions": [...]}`` from a JSON file.

    Raises QuestionBankError for unreadable files, bad JSON or bad entries.
    """

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise QuestionBankError(f"cannot read question bank {path}: {exc}") from exc
    except ValueError as exc:
        raise QuestionBankError(f"cannot decode question bank {path}: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
        raise QuestionBankError(f"question bank {path} must be an object with a 'questions' array")

    bank = validate_bank(question_from_dict(item) for item in payload["questions"])
    logger.info("Loaded %d questions from %s", len(bank), path)
    return bank
