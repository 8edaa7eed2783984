"""Answer normalization and comparison for grading."""
from __future__ import annotations

import re

# right single quotation mark, modifier letter apostrophe, acute accent
_APOSTROPHES = re.compile("[\u2019\u02bc\u00b4]")
# en dash, em dash, minus sign
_DASHES = re.compile("[\u2013\u2014\u2212]")


def normalize_text(text: str | None) -> str:
    """Trim, lower-case, and fold apostrophe/dash variants to ASCII."""
    if not text:
        return ""
    text = text.strip().lower()
    text = _APOSTROPHES.sub("'", text)
    return _DASHES.sub("-", text)


def compare_answers(user_answer: str | None, correct_answer: str | None) -> bool:
    return normalize_text(user_answer) == normalize_text(correct_answer)
