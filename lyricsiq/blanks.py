"""Blank selection, placeholder encoding/decoding, and quiz assembly.

A quiz is the original lyrics with selected words replaced by placeholders
of the form ``_____N_____``, where N is the blank id. Ids are assigned in
(line, position) order, 0-based and contiguous, and the answer key stored
next to the text is the only way to map a placeholder back to its word.
"""
from __future__ import annotations

import logging
import math
import random
import re
import uuid
from collections import Counter
from datetime import datetime, timezone
from enum import Enum

from lyricsiq.models import Blank, BlankAnswer, Quiz, Song, Token
from lyricsiq.tokenizer import extract_words

_log = logging.getLogger("lyricsiq.blanks")

PLACEHOLDER_RE = re.compile(r"_____(\d+)_____")

MIN_BLANKS = 5
DEFAULT_RATIO = 0.20
DIFFICULTY_RATIOS = {
    "easy": 0.10,
    "medium": 0.20,
    "hard": 0.35,
}


class Strategy(str, Enum):
    RANDOM = "random"
    IMPORTANT = "important"
    FREQUENT = "frequent"

    @classmethod
    def parse(cls, value: str | Strategy | None) -> Strategy:
        """Map a strategy name to a Strategy, falling back to RANDOM."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            _log.debug("Unknown strategy %r, using random", value)
            return cls.RANDOM


class PlaceholderCollisionError(ValueError):
    """Source text already contains something that reads as a blank marker."""


class QuizIntegrityError(ValueError):
    """Quiz text and answer key do not belong together."""


def placeholder(blank_id: int) -> str:
    return f"_____{blank_id}_____"


# ── Selection ─────────────────────────────────────────────────────────────

def _check_count(count) -> None:
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValueError(f"count must be an int (got {type(count).__name__})")
    if count < 0:
        raise ValueError(f"count must be non-negative (got {count})")


def _shuffled(tokens: list[Token], rng: random.Random) -> list[Token]:
    """Fisher-Yates shuffle of a copy of *tokens*."""
    pool = list(tokens)
    for i in range(len(pool) - 1, 0, -1):
        j = rng.randint(0, i)
        pool[i], pool[j] = pool[j], pool[i]
    return pool


def select_blanks(
    tokens: list[Token],
    count: int,
    strategy: Strategy | str = Strategy.RANDOM,
    rng: random.Random | None = None,
) -> list[Blank]:
    """Pick ``min(count, len(tokens))`` tokens and return them as blanks.

    The strategy decides *which* tokens are picked; the result is always in
    (line_index, position) order with ``blank_id`` equal to the index.

    random:    uniform shuffle from *rng* (a fresh ``random.Random`` if omitted)
    important: longest words first, ties in text order
    frequent:  most repeated words (case-insensitive) first, ties in text order
    """
    _check_count(count)
    if not tokens:
        return []

    strategy = Strategy.parse(strategy)
    if strategy is Strategy.IMPORTANT:
        ranked = sorted(tokens, key=lambda t: t.length, reverse=True)
    elif strategy is Strategy.FREQUENT:
        frequency = Counter(t.word.lower() for t in tokens)
        ranked = sorted(tokens, key=lambda t: frequency[t.word.lower()], reverse=True)
    else:
        ranked = _shuffled(tokens, rng if rng is not None else random.Random())

    chosen = sorted(ranked[:count], key=lambda t: (t.line_index, t.position))
    return [Blank(token, i) for i, token in enumerate(chosen)]


def blank_count_for(
    candidate_count: int,
    difficulty: str,
    override: int | None = None,
) -> int:
    """Number of blanks for a difficulty level, capped at *candidate_count*.

    Uses ``max(5, floor(candidates * ratio))`` unless *override* is given.
    Unknown difficulties use the medium ratio.
    """
    if override is None:
        ratio = DIFFICULTY_RATIOS.get(difficulty, DEFAULT_RATIO)
        count = max(MIN_BLANKS, math.floor(candidate_count * ratio))
    else:
        _check_count(override)
        count = override
    return min(count, candidate_count)


# ── Encoding ──────────────────────────────────────────────────────────────

def generate_quiz_text(text: str, blanks: list[Blank]) -> str:
    """Replace each blank's span in *text* with its placeholder.

    Blanks on the same line are substituted right to left so positions of
    the ones still pending stay valid.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a str (got {type(text).__name__})")
    literal = PLACEHOLDER_RE.search(text)
    if literal:
        raise PlaceholderCollisionError(
            f"text already contains a blank marker: {literal.group(0)!r}"
        )

    by_line: dict[int, list[Blank]] = {}
    for b in blanks:
        by_line.setdefault(b.line_index, []).append(b)

    lines = text.split("\n")
    for line_index, line_blanks in by_line.items():
        if not 0 <= line_index < len(lines):
            raise ValueError(f"blank {line_blanks[0].blank_id} points past the last line")
        line = lines[line_index]
        for b in sorted(line_blanks, key=lambda b: b.position, reverse=True):
            end = b.position + len(b.word)
            if line[b.position:end] != b.word:
                raise ValueError(
                    f"blank {b.blank_id} ({b.word!r}) does not match line {line_index} "
                    f"at position {b.position}"
                )
            line = line[:b.position] + placeholder(b.blank_id) + line[end:]
        lines[line_index] = line
    return "\n".join(lines)


def answer_key(blanks: list[Blank]) -> list[BlankAnswer]:
    return [BlankAnswer(b.blank_id, b.word, b.line_index, b.position) for b in blanks]


# ── Decoding ──────────────────────────────────────────────────────────────

def split_quiz_line(line: str) -> list[tuple[str, str | int]]:
    """Split a quiz line into ``("text", str)`` and ``("blank", id)`` segments."""
    segments: list[tuple[str, str | int]] = []
    last = 0
    for m in PLACEHOLDER_RE.finditer(line):
        if m.start() > last:
            segments.append(("text", line[last:m.start()]))
        segments.append(("blank", int(m.group(1))))
        last = m.end()
    if last < len(line):
        segments.append(("text", line[last:]))
    return segments


def render_quiz(quiz: Quiz) -> list[list[tuple[str, str | int]]]:
    return [split_quiz_line(line) for line in quiz.lyrics.split("\n")]


def restore_quiz_text(quiz_text: str, blanks: list[BlankAnswer]) -> str:
    """Put the answers back in place of their placeholders."""
    answers = {b.id: b.answer for b in blanks}

    def _sub(m: re.Match) -> str:
        blank_id = int(m.group(1))
        if blank_id not in answers:
            raise QuizIntegrityError(f"no answer for blank {blank_id}")
        return answers[blank_id]

    return PLACEHOLDER_RE.sub(_sub, quiz_text)


def validate_quiz(quiz: Quiz) -> None:
    """Check that the quiz text and its answer key were generated together.

    Every id 0..n-1 must appear exactly once in the text, on the line the
    key records for it, and nothing else may look like a placeholder.
    """
    key_ids = [b.id for b in quiz.blanks]
    if sorted(key_ids) != list(range(len(key_ids))):
        raise QuizIntegrityError(f"answer key ids are not 0..{len(key_ids) - 1}: {key_ids}")

    seen: dict[int, int] = {}
    for line_index, line in enumerate(quiz.lyrics.split("\n")):
        for m in PLACEHOLDER_RE.finditer(line):
            blank_id = int(m.group(1))
            if blank_id in seen:
                raise QuizIntegrityError(f"blank {blank_id} appears more than once")
            seen[blank_id] = line_index

    missing = set(key_ids) - seen.keys()
    if missing:
        raise QuizIntegrityError(f"blanks missing from text: {sorted(missing)}")
    extra = seen.keys() - set(key_ids)
    if extra:
        raise QuizIntegrityError(f"text has blanks with no answer: {sorted(extra)}")
    for b in quiz.blanks:
        if seen[b.id] != b.line_index:
            raise QuizIntegrityError(
                f"blank {b.id} is on line {seen[b.id]}, key says {b.line_index}"
            )


# ── Assembly ──────────────────────────────────────────────────────────────

def build_quiz(
    song: Song,
    difficulty: str = "medium",
    strategy: Strategy | str = Strategy.RANDOM,
    blank_count: int | None = None,
    rng: random.Random | None = None,
    original_file: str = "",
) -> Quiz:
    """Tokenize, select, and encode *song* into a self-contained Quiz."""
    strategy = Strategy.parse(strategy)
    words = extract_words(song.lyrics)
    count = blank_count_for(len(words), difficulty, blank_count)
    _log.info(
        "%s: %d candidate words, %d blanks (%s, %s)",
        song.title or "untitled", len(words), count, difficulty, strategy.value,
    )

    blanks = select_blanks(words, count, strategy, rng)
    return Quiz(
        id=song.id,
        title=song.title,
        artist=song.artist,
        difficulty=difficulty,
        lyrics=generate_quiz_text(song.lyrics, blanks),
        blanks=answer_key(blanks),
        strategy=strategy.value,
        generation_id=uuid.uuid4().hex,
        generated_at=datetime.now(timezone.utc).isoformat(),
        original_file=original_file,
        image_url=song.image_url,
        thumbnail_url=song.thumbnail_url,
        url=song.url,
        release_date=song.release_date,
    )
