"""Read and write lyrics/quiz JSON files and the quiz index."""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from lyricsiq.models import Quiz, Song

log = logging.getLogger("lyricsiq.library")

INDEX_NAME = "index.json"


def slugify(title: str) -> str:
    return re.sub(r"\s+", "-", title.strip().lower())


def _write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def _read_json(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")
    return data


def save_song(song: Song, path: Path) -> Path:
    return _write_json(path, song.to_dict())


def load_song(path: Path) -> Song:
    data = _read_json(path)
    if not data.get("lyrics"):
        raise ValueError('Input file must contain a "lyrics" field')
    return Song.from_dict(data)


def save_quiz(quiz: Quiz, path: Path) -> Path:
    return _write_json(path, quiz.to_dict())


def load_quiz(path: Path) -> Quiz:
    return Quiz.from_dict(_read_json(path))


def default_quiz_path(lyrics_path: Path) -> Path:
    """``data/lyrics/foo.json`` -> ``data/quizzes/foo-quiz.json``.

    Files outside a ``lyrics`` directory get the quiz written beside them.
    """
    parent = lyrics_path.parent
    if parent.name == "lyrics":
        parent = parent.parent / "quizzes"
    return parent / f"{lyrics_path.stem}-quiz.json"


def quiz_path_for_slug(quizzes_dir: Path, slug: str) -> Path | None:
    """Resolve a quiz slug (file stem) to a file inside *quizzes_dir*."""
    if not re.fullmatch(r"[\w'.-]+", slug) or slug.startswith("."):
        return None
    path = quizzes_dir / f"{slug}.json"
    if path.name == INDEX_NAME or not path.is_file():
        return None
    return path


def build_index(quizzes_dir: Path) -> dict:
    """Summarize every quiz file in *quizzes_dir*, sorted by artist then title."""
    quizzes = []
    for f in sorted(quizzes_dir.glob("*.json")):
        if f.name == INDEX_NAME:
            continue
        try:
            quiz = load_quiz(f)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            log.warning("Failed to parse %s: %s", f.name, e)
            continue
        quizzes.append({
            "id": quiz.id,
            "slug": f.stem,
            "title": quiz.title,
            "artist": quiz.artist,
            "difficulty": quiz.difficulty,
            "blankCount": len(quiz.blanks),
            "thumbnailUrl": quiz.thumbnail_url,
            "imageUrl": quiz.image_url,
            "releaseDate": quiz.release_date,
            "path": f"{quizzes_dir.name}/{f.name}",
        })

    quizzes.sort(key=lambda q: ((q["artist"] or "").lower(), (q["title"] or "").lower()))
    return {
        "generated": datetime.now(timezone.utc).isoformat(),
        "count": len(quizzes),
        "quizzes": quizzes,
    }


def write_index(quizzes_dir: Path) -> dict:
    if not quizzes_dir.is_dir():
        raise FileNotFoundError(f"Quizzes directory not found: {quizzes_dir}")
    index = build_index(quizzes_dir)
    _write_json(quizzes_dir / INDEX_NAME, index)
    return index
