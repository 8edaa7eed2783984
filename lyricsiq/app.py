"""FastAPI application with all routes."""
from __future__ import annotations

import logging
import random
from pathlib import Path

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse

from lyricsiq.blanks import QuizIntegrityError, build_quiz, render_quiz, validate_quiz
from lyricsiq.config import Settings, load_settings
from lyricsiq.library import build_index, load_quiz, quiz_path_for_slug
from lyricsiq.models import Quiz, Song
from lyricsiq.scoring import beats_challenge, score_answers, score_message
from lyricsiq.share import InvalidShareState, decode_quiz_state, encode_quiz_state

app = FastAPI(title="LyricsIQ")

log = logging.getLogger("lyricsiq.app")

# Global state (initialized in startup)
_settings: Settings | None = None


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


@app.on_event("startup")
async def startup():
    global _settings
    if _settings is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()


def _quiz_payload(quiz: Quiz) -> dict:
    """Quiz record plus the text split into text/blank segments per line."""
    data = quiz.to_dict()
    data["lines"] = [
        [{"type": kind, "value": value} for kind, value in line]
        for line in render_quiz(quiz)
    ]
    return data


def _load_library_quiz(slug) -> Quiz:
    path = None
    if isinstance(slug, str):
        path = quiz_path_for_slug(get_settings().quizzes_full_path, slug)
    if path is None:
        raise HTTPException(404, "Quiz not found")
    try:
        quiz = load_quiz(path)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        # build_index skips the same file, so it is not part of the library
        log.warning("Quiz %s could not be read: %s", slug, e)
        raise HTTPException(404, "Quiz not found")
    try:
        validate_quiz(quiz)
    except QuizIntegrityError as e:
        log.warning("Quiz %s failed validation: %s", slug, e)
        raise HTTPException(500, f"Quiz file is inconsistent: {e}")
    return quiz


async def _json_body(request: Request) -> dict:
    """Request body as a JSON object. An empty body counts as ``{}``."""
    if not await request.body():
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise HTTPException(400, "Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(400, "Request body must be a JSON object")
    return body


def _answers(body: dict) -> dict:
    answers = body.get("answers") or {}
    if not isinstance(answers, dict):
        raise HTTPException(400, "answers must be an object keyed by blank id")
    return answers


def _grade(quiz: Quiz, body: dict) -> dict:
    score = score_answers(quiz, _answers(body))
    result = score.to_dict()
    result["message"] = score_message(score.percentage)
    result["generationId"] = quiz.generation_id
    challenge = body.get("challenge")
    if challenge:
        if not isinstance(challenge, dict) or not isinstance(
            challenge.get("percentage", 0), (int, float)
        ):
            raise HTTPException(400, "challenge must be an object with a numeric percentage")
        result["beatChallenge"] = beats_challenge(score, challenge)
    return result


# ── Static files ──────────────────────────────────────────────────────────

static_dir = Path(__file__).parent / "static"


@app.get("/")
async def index():
    return FileResponse(static_dir / "index.html")


@app.get("/style.css")
async def style():
    return FileResponse(static_dir / "style.css", media_type="text/css")


@app.get("/app.js")
async def script():
    return FileResponse(static_dir / "app.js", media_type="application/javascript")


# ── API: Quiz library ─────────────────────────────────────────────────────

@app.get("/api/quizzes")
async def api_quizzes():
    return build_index(get_settings().quizzes_full_path)


@app.get("/api/quizzes/{slug}")
async def api_quiz(slug: str):
    return _quiz_payload(_load_library_quiz(slug))


@app.post("/api/quizzes/{slug}/grade")
async def api_quiz_grade(slug: str, request: Request):
    body = await _json_body(request)
    quiz = _load_library_quiz(slug)

    # Answers were typed against a specific generation of this quiz
    generation_id = body.get("generationId")
    if generation_id and quiz.generation_id and generation_id != quiz.generation_id:
        raise HTTPException(409, "Quiz was regenerated; reload it before submitting")

    return _grade(quiz, body)


# ── API: Ad-hoc generation ────────────────────────────────────────────────

@app.post("/api/generate")
async def api_generate(request: Request):
    body = await _json_body(request)
    s = get_settings()

    lyrics = body.get("lyrics")
    if not isinstance(lyrics, str) or not lyrics.strip():
        raise HTTPException(400, "No lyrics provided")

    seed = body.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, str))):
        raise HTTPException(400, "seed must be an integer or a string")
    rng = random.Random(seed) if seed is not None else None
    song = Song(
        id=body.get("id"),
        title=body.get("title") or "",
        artist=body.get("artist") or "",
        lyrics=lyrics,
    )
    try:
        quiz = build_quiz(
            song,
            difficulty=body.get("difficulty") or s.default_difficulty,
            strategy=body.get("strategy") or s.default_strategy,
            blank_count=body.get("blankCount"),
            rng=rng,
        )
    except (TypeError, ValueError) as e:
        raise HTTPException(400, str(e))
    return _quiz_payload(quiz)


@app.post("/api/grade")
async def api_grade(request: Request):
    body = await _json_body(request)
    raw = body.get("quiz")
    if not isinstance(raw, dict):
        raise HTTPException(400, "No quiz provided")
    try:
        quiz = Quiz.from_dict(raw)
        validate_quiz(quiz)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise HTTPException(400, f"Invalid quiz: {e}")
    return _grade(quiz, body)


# ── API: Sharing ──────────────────────────────────────────────────────────

@app.post("/api/share")
async def api_share(request: Request):
    body = await _json_body(request)
    quiz = _load_library_quiz(body.get("slug", ""))
    score = score_answers(quiz, _answers(body)) if "answers" in body else None
    return {"state": encode_quiz_state(quiz, score)}


@app.get("/api/share/{state}")
async def api_share_decode(state: str):
    try:
        return decode_quiz_state(state)
    except InvalidShareState as e:
        raise HTTPException(400, str(e))


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()
