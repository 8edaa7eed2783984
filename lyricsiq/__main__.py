"""CLI entry point for lyricsiq.

Usage:
  python -m lyricsiq serve [--port PORT] [--host HOST]
  python -m lyricsiq fetch "Artist" "Song Title" [output.json]
  python -m lyricsiq generate <lyrics.json> [output.json] [--difficulty D]
                              [--strategy S] [--blank-count N] [--seed N]
  python -m lyricsiq create "Artist" "Song Title" [--difficulty D]
                            [--strategy S] [--blank-count N] [--seed N]
  python -m lyricsiq index

fetch and create need the GENIUS_ACCESS_TOKEN environment variable.
"""
from __future__ import annotations

import asyncio
import random
import sys
from pathlib import Path

RIGHTS_REMINDER = (
    "Remember: Only use this content if you have proper rights "
    "or it's in the public domain."
)


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "fetch":
        _run(_fetch, args[1:])
    elif command == "generate":
        _run(_generate, args[1:])
    elif command == "create":
        _run(_create, args[1:])
    elif command == "index":
        _run(_index, args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, fetch, generate, create, index")
        sys.exit(1)


def _run(command, args: list[str]) -> None:
    """Run a content command, turning expected failures into exit code 1."""
    from lyricsiq.providers.base import LyricsProviderError

    try:
        command(args)
    except (LyricsProviderError, FileNotFoundError, ValueError) as e:
        print(f"\nError: {e}")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str | None) -> str | None:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _positional(args: list[str]) -> list[str]:
    """Arguments that are neither flags nor flag values."""
    out = []
    skip = False
    for a in args:
        if skip:
            skip = False
            continue
        if a.startswith("--"):
            skip = True
            continue
        out.append(a)
    return out


def _quiz_options(args: list[str], settings) -> dict:
    blank_count = _parse_flag(args, "--blank-count", None)
    seed = _parse_flag(args, "--seed", None)
    return {
        "difficulty": _parse_flag(args, "--difficulty", settings.default_difficulty),
        "strategy": _parse_flag(args, "--strategy", settings.default_strategy),
        "blank_count": int(blank_count) if blank_count is not None else None,
        "rng": random.Random(int(seed)) if seed is not None else None,
    }


def _serve(args: list[str]):
    import uvicorn

    from lyricsiq.config import load_settings

    settings = load_settings()
    port = int(_parse_flag(args, "--port", str(settings.port)))
    host = _parse_flag(args, "--host", "127.0.0.1")
    if not settings.quizzes_full_path.is_dir():
        print(f"Note: no quizzes yet in {settings.quizzes_full_path}; "
              "the library will be empty until you run 'create' or 'generate'.")

    print(f"Starting LyricsIQ on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run("lyricsiq.app:app", host=host, port=port)


def _provider(settings):
    from lyricsiq.config import TOKEN_ENV
    from lyricsiq.providers.genius import GeniusProvider

    token = settings.genius_token
    if not token:
        print(f"Error: {TOKEN_ENV} environment variable is required")
        print("Get your token from: https://genius.com/api-clients")
        sys.exit(1)
    return GeniusProvider(
        token, base_url=settings.genius_api_url, timeout=settings.request_timeout
    )


def _fetch(args: list[str]):
    from lyricsiq.config import load_settings
    from lyricsiq.library import save_song, slugify
    from lyricsiq.providers.base import fetch_song

    pos = _positional(args)
    if len(pos) < 2:
        print('Usage: python -m lyricsiq fetch "Artist Name" "Song Title" [output.json]')
        sys.exit(1)
    artist, title = pos[0], pos[1]

    settings = load_settings()
    provider = _provider(settings)
    print(f'\nFetching lyrics for "{title}" by {artist}...')
    song = asyncio.run(fetch_song(provider, artist, title))

    out = Path(pos[2]) if len(pos) > 2 else settings.lyrics_full_path / f"{slugify(title)}.json"
    path = save_song(song, out)
    print(f"\nSong:          {song.title}")
    print(f"Artist:        {song.artist}")
    print(f"Lyrics length: {len(song.lyrics)} characters")
    print(f"Saved to:      {path.resolve()}")
    print(f"\n{RIGHTS_REMINDER}")


def _generate(args: list[str]):
    from lyricsiq.blanks import build_quiz
    from lyricsiq.config import load_settings
    from lyricsiq.library import default_quiz_path, load_song, save_quiz

    pos = _positional(args)
    if not pos:
        print("Usage: python -m lyricsiq generate <input.json> [output.json] [options]")
        print("  --difficulty easy|medium|hard   (default: medium)")
        print("  --blank-count N                 (override difficulty)")
        print("  --strategy random|important|frequent (default: random)")
        sys.exit(1)

    settings = load_settings()
    opts = _quiz_options(args, settings)
    input_path = Path(pos[0])
    output_path = Path(pos[1]) if len(pos) > 1 else default_quiz_path(input_path)

    print(f"\nGenerating quiz from: {input_path}")
    print(f"Difficulty: {opts['difficulty']}")
    print(f"Strategy:   {opts['strategy']}\n")

    song = load_song(input_path)
    quiz = build_quiz(song, original_file=str(input_path), **opts)
    path = save_quiz(quiz, output_path)

    print("Quiz generated successfully!")
    print(f"  Song:       {quiz.title} by {quiz.artist}")
    print(f"  Blanks:     {len(quiz.blanks)}")
    print(f"  Strategy:   {quiz.strategy}")
    print(f"  Difficulty: {quiz.difficulty}")
    print(f"  Saved to:   {path.resolve()}\n")


def _create(args: list[str]):
    from lyricsiq.blanks import build_quiz
    from lyricsiq.config import load_settings
    from lyricsiq.library import save_quiz, save_song, slugify, write_index
    from lyricsiq.providers.base import SongNotFoundError, fetch_song

    pos = _positional(args)
    if len(pos) < 2:
        print('Usage: python -m lyricsiq create "Artist Name" "Song Title" [options]')
        sys.exit(1)
    artist, title = pos[0], pos[1]

    settings = load_settings()
    opts = _quiz_options(args, settings)
    provider = _provider(settings)

    print("\n=== LyricsIQ Quiz Creator ===\n")
    print(f'Searching for "{title}" by {artist}...')
    hits = asyncio.run(provider.search(artist, title))
    if not hits:
        raise SongNotFoundError(f'No results found for "{title}" by {artist}')

    top = hits[:5]
    print(f"\nFound {len(hits)} results:\n")
    for i, hit in enumerate(top, 1):
        print(f'{i}. "{hit.title}" by {hit.artist}')
        print(f"   URL: {hit.url}")
        if hit.release_date:
            print(f"   Released: {hit.release_date}")
        print()

    answer = input(f"Select a song (1-{len(top)}) or press Enter for #1: ").strip()
    choice = int(answer) if answer else 1
    if not 1 <= choice <= len(top):
        raise ValueError("Invalid selection")
    hit = top[choice - 1]
    print(f'\nSelected: "{hit.title}" by {hit.artist}\n')

    print("Fetching lyrics...")
    song = asyncio.run(fetch_song(provider, artist, title, hit=hit))
    print(f"Lyrics fetched ({len(song.lyrics)} characters)")

    slug = slugify(title)
    lyrics_path = save_song(song, settings.lyrics_full_path / f"{slug}.json")
    print(f"Lyrics saved to: {lyrics_path}")

    print(f"\nGenerating quiz ({opts['difficulty']}, {opts['strategy']} strategy)...")
    quiz = build_quiz(song, original_file=str(lyrics_path), **opts)
    quiz_path = save_quiz(quiz, settings.quizzes_full_path / f"{slug}-quiz.json")
    print(f"Quiz saved to:   {quiz_path} ({len(quiz.blanks)} blanks)")

    index = write_index(settings.quizzes_full_path)
    print(f"Quiz index updated ({index['count']} quizzes)")
    print(f"\n{RIGHTS_REMINDER}")


def _index(args: list[str]):
    from lyricsiq.config import load_settings
    from lyricsiq.library import write_index

    quizzes_dir = Path(args[0]) if args else load_settings().quizzes_full_path
    print("\nGenerating quiz index...\n")
    index = write_index(quizzes_dir)
    for q in index["quizzes"]:
        print(f"  {q['title']} by {q['artist']} ({q['difficulty']})")
    print(f"\nTotal quizzes: {index['count']}")
    print(f"Saved to: {quizzes_dir / 'index.json'}\n")


if __name__ == "__main__":
    main()
