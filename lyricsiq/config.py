from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

TOKEN_ENV = "GENIUS_ACCESS_TOKEN"

DEFAULTS = {
    "lyrics_dir": "data/lyrics",
    "quizzes_dir": "data/quizzes",
    "default_difficulty": "medium",
    "default_strategy": "random",
    "genius_api_url": "https://api.genius.com",
    "request_timeout": 30.0,
    "port": 8765,
}


@dataclass
class Settings:
    lyrics_dir: str = DEFAULTS["lyrics_dir"]
    quizzes_dir: str = DEFAULTS["quizzes_dir"]
    default_difficulty: str = DEFAULTS["default_difficulty"]
    default_strategy: str = DEFAULTS["default_strategy"]
    genius_api_url: str = DEFAULTS["genius_api_url"]
    request_timeout: float = DEFAULTS["request_timeout"]
    port: int = DEFAULTS["port"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def lyrics_full_path(self) -> Path:
        return self.project_root / self.lyrics_dir

    @property
    def quizzes_full_path(self) -> Path:
        return self.project_root / self.quizzes_dir

    @property
    def genius_token(self) -> str:
        return os.environ.get(TOKEN_ENV, "")

    def to_dict(self) -> dict:
        return {
            "lyrics_dir": self.lyrics_dir,
            "quizzes_dir": self.quizzes_dir,
            "default_difficulty": self.default_difficulty,
            "default_strategy": self.default_strategy,
            "genius_api_url": self.genius_api_url,
            "request_timeout": self.request_timeout,
            "port": self.port,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
