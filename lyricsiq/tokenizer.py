"""Extract blankable candidate words from lyrics text."""
from __future__ import annotations

import re

from lyricsiq.models import Token

MIN_WORD_LENGTH = 3

# Too common to make a useful blank
STOPWORDS = frozenset({
    "the", "and", "but", "for", "with", "from",
    "that", "this", "have", "has", "was", "were",
})

_SECTION_MARKER = re.compile(r"^\[.*\]$")
_WORD = re.compile(r"\b[\w'-]+\b")


def is_section_marker(line: str) -> bool:
    """True for lines like ``[Chorus]`` or ``[Verse 1]``."""
    return _SECTION_MARKER.match(line) is not None


def extract_words(text: str) -> list[Token]:
    """Scan *text* line by line and return candidate tokens in text order.

    Empty lines and section markers produce no tokens but still advance the
    line index, so ``Token.line_index`` always points into ``text.split("\\n")``.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be a str (got {type(text).__name__})")

    tokens: list[Token] = []
    for line_index, line in enumerate(text.split("\n")):
        if not line.strip() or is_section_marker(line):
            continue
        for m in _WORD.finditer(line):
            word = m.group(0)
            if len(word) < MIN_WORD_LENGTH:
                continue
            if word.lower() in STOPWORDS:
                continue
            tokens.append(Token(word, line_index, m.start(), len(word)))
    return tokens
