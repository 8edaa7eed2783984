"""Shared test fixtures."""
from __future__ import annotations

import json

import httpx
import pytest

from lyricsiq.blanks import build_quiz
from lyricsiq.models import Song

GENIUS_SEARCH = {
    "meta": {"status": 200},
    "response": {
        "hits": [
            {
                "type": "song",
                "result": {
                    "id": 1234,
                    "title": "Amazing Grace",
                    "url": "https://genius.com/John-newton-amazing-grace-lyrics",
                    "song_art_image_url": "https://images.genius.com/grace.jpg",
                    "song_art_image_thumbnail_url": "https://images.genius.com/grace.300x300.jpg",
                    "release_date_for_display": "1779",
                    "primary_artist": {"name": "John Newton"},
                },
            },
            {"type": "album", "result": {}},
        ]
    },
}

GENIUS_PAGE = """
<html><body>
<div data-lyrics-container="true">
  <div data-exclude-from-selection="true">12 Contributors Amazing Grace Lyrics</div>
  [Verse 1]<br>Amazing grace, how sweet the sound<br>That saved a wretch like me &amp; you
</div>
<div data-lyrics-container="true"><a href="#"><span>I once was lost</span></a><br>But now am found</div>
</body></html>
"""


@pytest.fixture
def lyrics_html():
    return GENIUS_PAGE


@pytest.fixture
def genius_transport():
    """Factory for an httpx.MockTransport standing in for api.genius.com and genius.com."""
    def make(search_status=200, page_status=200, search_json=GENIUS_SEARCH, seen=None):
        def handler(request: httpx.Request) -> httpx.Response:
            if seen is not None:
                seen.append(request)
            if request.url.host == "api.genius.com":
                return httpx.Response(search_status, json=search_json)
            return httpx.Response(page_status, text=GENIUS_PAGE)
        return httpx.MockTransport(handler)
    return make


@pytest.fixture
def amazing_grace_text():
    return (
        "[Verse 1]\n"
        "Amazing grace how sweet the sound\n"
        "That saved a wretch like me\n"
        "I once was lost but now am found\n"
        "Was blind but now I see\n"
        "\n"
        "[Verse 2]\n"
        "'Twas grace that taught my heart to fear\n"
        "And grace my fears relieved\n"
    )


@pytest.fixture
def sample_song(amazing_grace_text):
    return Song(
        id=1234,
        title="Amazing Grace",
        artist="John Newton",
        lyrics=amazing_grace_text,
        url="https://genius.com/John-newton-amazing-grace-lyrics",
        image_url="https://images.genius.com/grace.jpg",
        thumbnail_url="https://images.genius.com/grace.300x300.jpg",
        release_date="1779",
        fetched_at="2024-01-01T00:00:00+00:00",
    )


@pytest.fixture
def sample_quiz(sample_song):
    """A deterministic quiz built with the 'important' strategy."""
    return build_quiz(sample_song, difficulty="medium", strategy="important", blank_count=4)


@pytest.fixture
def quizzes_dir(tmp_path, sample_quiz):
    """A quizzes directory containing one quiz file."""
    d = tmp_path / "quizzes"
    d.mkdir()
    (d / "amazing-grace-quiz.json").write_text(json.dumps(sample_quiz.to_dict(), indent=2))
    return d
