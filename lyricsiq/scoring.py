"""Grade a filled-in quiz against its answer key."""
from __future__ import annotations

import math

from lyricsiq.models import BlankResult, Quiz, Score
from lyricsiq.normalize import compare_answers

# (minimum percentage, message), checked top-down
SCORE_MESSAGES = [
    (100, "Perfect Score!"),
    (80, "Excellent!"),
    (60, "Good Job!"),
    (40, "Not Bad!"),
    (0, "Keep Practicing!"),
]


def _coerce_answers(answers: dict | None) -> dict[int, str]:
    """Key answers by int blank id. Browser forms send ids as strings."""
    coerced: dict[int, str] = {}
    for k, v in (answers or {}).items():
        try:
            blank_id = int(k)
        except (TypeError, ValueError):
            continue
        coerced[blank_id] = v if isinstance(v, str) else ""
    return coerced


def percentage_of(correct: int, total: int) -> int:
    """Whole-number percentage, rounding halves up. 0 for an empty quiz."""
    if total <= 0:
        return 0
    return math.floor(correct / total * 100 + 0.5)


def score_answers(quiz: Quiz, answers: dict | None) -> Score:
    """Count blanks whose answer matches after normalization.

    Blanks with no entry in *answers* are graded as empty strings.
    """
    given = _coerce_answers(answers)
    results = []
    for b in quiz.blanks:
        user_answer = given.get(b.id, "")
        results.append(BlankResult(
            id=b.id,
            answer=b.answer,
            given=user_answer,
            correct=compare_answers(user_answer, b.answer),
        ))

    correct = sum(1 for r in results if r.correct)
    total = len(quiz.blanks)
    return Score(
        correct=correct,
        total=total,
        percentage=percentage_of(correct, total),
        answers=given,
        results=results,
    )


def score_message(percentage: int) -> str:
    for threshold, message in SCORE_MESSAGES:
        if percentage >= threshold:
            return message
    return SCORE_MESSAGES[-1][1]


def beats_challenge(score: Score, challenge: dict | None) -> bool:
    """True when *score* strictly beats a shared challenge score."""
    if not challenge:
        return False
    return score.percentage > challenge.get("percentage", 0)
