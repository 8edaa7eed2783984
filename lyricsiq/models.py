from __future__ import annotations

from dataclasses import dataclass, field

LYRICS_NOTE = (
    "For educational/personal use only. "
    "Ensure you have proper rights to use this content."
)


@dataclass(frozen=True)
class Token:
    word: str
    line_index: int
    position: int  # offset of word's first character within its line
    length: int


@dataclass(frozen=True)
class Blank:
    token: Token
    blank_id: int

    @property
    def word(self) -> str:
        return self.token.word

    @property
    def line_index(self) -> int:
        return self.token.line_index

    @property
    def position(self) -> int:
        return self.token.position

    @property
    def length(self) -> int:
        return self.token.length


@dataclass(frozen=True)
class BlankAnswer:
    id: int
    answer: str
    line_index: int
    position: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "answer": self.answer,
            "lineIndex": self.line_index,
            "position": self.position,
        }

    @classmethod
    def from_dict(cls, data: dict) -> BlankAnswer:
        return cls(
            id=int(data["id"]),
            answer=data.get("answer") or "",
            line_index=int(data.get("lineIndex", 0)),
            position=int(data.get("position", 0)),
        )


@dataclass
class Song:
    id: int | str | None
    title: str
    artist: str
    lyrics: str
    url: str = ""
    image_url: str = ""
    thumbnail_url: str = ""
    release_date: str | None = None
    fetched_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "lyrics": self.lyrics,
            "url": self.url,
            "imageUrl": self.image_url,
            "thumbnailUrl": self.thumbnail_url,
            "releaseDate": self.release_date,
            "fetchedAt": self.fetched_at,
            "note": LYRICS_NOTE,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Song:
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            artist=data.get("artist") or "",
            lyrics=data["lyrics"],
            url=data.get("url") or "",
            image_url=data.get("imageUrl") or "",
            thumbnail_url=data.get("thumbnailUrl") or "",
            release_date=data.get("releaseDate"),
            fetched_at=data.get("fetchedAt") or "",
        )


@dataclass
class Quiz:
    id: int | str | None
    title: str
    artist: str
    difficulty: str
    lyrics: str  # text with _____N_____ placeholders
    blanks: list[BlankAnswer]
    strategy: str
    generation_id: str
    generated_at: str
    original_file: str = ""
    image_url: str = ""
    thumbnail_url: str = ""
    url: str = ""
    release_date: str | None = None

    def answer_for(self, blank_id: int) -> BlankAnswer | None:
        return next((b for b in self.blanks if b.id == blank_id), None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "difficulty": self.difficulty,
            "lyrics": self.lyrics,
            "blanks": [b.to_dict() for b in self.blanks],
            "metadata": {
                "originalFile": self.original_file,
                "generatedAt": self.generated_at,
                "generationId": self.generation_id,
                "strategy": self.strategy,
                "totalBlanks": len(self.blanks),
                "imageUrl": self.image_url,
                "thumbnailUrl": self.thumbnail_url,
                "url": self.url,
                "releaseDate": self.release_date,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> Quiz:
        meta = data.get("metadata") or {}
        return cls(
            id=data.get("id"),
            title=data.get("title") or "",
            artist=data.get("artist") or "",
            difficulty=data.get("difficulty") or "",
            lyrics=data["lyrics"],
            blanks=[BlankAnswer.from_dict(b) for b in data.get("blanks", [])],
            strategy=meta.get("strategy", ""),
            # Older quiz files predate generation ids
            generation_id=meta.get("generationId") or "",
            generated_at=meta.get("generatedAt") or "",
            original_file=meta.get("originalFile") or "",
            image_url=meta.get("imageUrl") or "",
            thumbnail_url=meta.get("thumbnailUrl") or "",
            url=meta.get("url") or "",
            release_date=meta.get("releaseDate"),
        )


@dataclass
class BlankResult:
    id: int
    answer: str
    given: str
    correct: bool


@dataclass
class Score:
    correct: int
    total: int
    percentage: int
    answers: dict[int, str] = field(default_factory=dict)
    results: list[BlankResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "total": self.total,
            "percentage": self.percentage,
            "answers": {str(k): v for k, v in self.answers.items()},
            "results": [
                {"id": r.id, "answer": r.answer, "given": r.given, "correct": r.correct}
                for r in self.results
            ],
        }
