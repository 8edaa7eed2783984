"""Encode quiz results into a shareable URL parameter and back."""
from __future__ import annotations

import base64
import binascii
import json

from lyricsiq.models import Quiz, Score


class InvalidShareState(ValueError):
    pass


def encode_quiz_state(quiz: Quiz, score: Score | None = None) -> str:
    state = {
        "quizId": quiz.id,
        "title": quiz.title,
        "artist": quiz.artist,
        "difficulty": quiz.difficulty,
        "score": {
            "correct": score.correct,
            "total": score.total,
            "percentage": score.percentage,
        } if score else None,
    }
    raw = json.dumps(state, ensure_ascii=False).encode()
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_quiz_state(encoded: str) -> dict:
    try:
        padded = encoded + "=" * (-len(encoded) % 4)
        state = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise InvalidShareState(f"Invalid quiz state: {e}") from e
    if not isinstance(state, dict) or "quizId" not in state:
        raise InvalidShareState("Invalid quiz state: missing quizId")
    return state


def share_url(base_url: str, quiz: Quiz, score: Score | None = None) -> str:
    return f"{base_url}?quiz={encode_quiz_state(quiz, score)}"
