"""Tests for candidate word extraction."""
from __future__ import annotations

import pytest

from lyricsiq.models import Token
from lyricsiq.tokenizer import STOPWORDS, extract_words, is_section_marker


class TestExtractWords:
    def test_stoplist_and_short_words_excluded(self):
        words = [t.word for t in extract_words("The cat sat on a mat.\n")]
        assert words == ["cat", "sat", "mat"]

    def test_section_marker_line_skipped(self):
        tokens = extract_words("[Chorus]\nLove is love\n")
        assert [t.word for t in tokens] == ["Love", "love"]
        assert all(t.line_index == 1 for t in tokens)

    def test_positions_and_lengths(self):
        tokens = extract_words("Amazing grace how sweet the sound")
        assert tokens[0] == Token("Amazing", 0, 0, 7)
        assert tokens[1] == Token("grace", 0, 8, 5)
        sound = tokens[-1]
        assert sound.word == "sound"
        assert sound.position == len("Amazing grace how sweet the ")

    def test_empty_lines_keep_line_numbering(self):
        tokens = extract_words("first line\n\n   \nsecond line")
        assert [(t.word, t.line_index) for t in tokens] == [
            ("first", 0), ("line", 0), ("second", 3), ("line", 3),
        ]

    def test_apostrophes_and_hyphens_kept(self):
        words = [t.word for t in extract_words("Don't stop the say-so")]
        assert words == ["Don't", "stop", "say-so"]

    def test_leading_apostrophe_not_part_of_word(self):
        tokens = extract_words("'Twas grace")
        assert tokens[0].word == "Twas"
        assert tokens[0].position == 1

    def test_stoplist_is_case_insensitive(self):
        assert extract_words("THE AND With FROM") == []

    def test_bracket_inside_line_is_not_marker(self):
        words = [t.word for t in extract_words("Sing [softly] now")]
        assert "softly" in words

    def test_ordered_by_line_then_position(self):
        tokens = extract_words("alpha beta\ngamma delta\nepsilon")
        keys = [(t.line_index, t.position) for t in tokens]
        assert keys == sorted(keys)

    def test_spans_match_source_lines(self, amazing_grace_text):
        lines = amazing_grace_text.split("\n")
        for t in extract_words(amazing_grace_text):
            assert t.position + t.length <= len(lines[t.line_index])
            assert lines[t.line_index][t.position:t.position + t.length] == t.word

    def test_empty_text(self):
        assert extract_words("") == []

    def test_non_string_rejected(self):
        with pytest.raises(TypeError):
            extract_words(None)

    def test_deterministic(self, amazing_grace_text):
        assert extract_words(amazing_grace_text) == extract_words(amazing_grace_text)


class TestSectionMarker:
    @pytest.mark.parametrize("line", ["[Chorus]", "[Verse 1]", "[Bridge: Both]"])
    def test_markers(self, line):
        assert is_section_marker(line)

    @pytest.mark.parametrize("line", ["Chorus", "[Chorus] again", " [Chorus]"])
    def test_not_markers(self, line):
        assert not is_section_marker(line)


def test_stopwords_are_lowercase():
    assert all(w == w.lower() for w in STOPWORDS)
