from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone

from lyricsiq.models import Song


class LyricsProviderError(Exception):
    pass


class SongNotFoundError(LyricsProviderError):
    pass


@dataclass
class SongHit:
    id: int | str
    title: str
    artist: str
    url: str
    image_url: str = ""
    thumbnail_url: str = ""
    release_date: str | None = None


class LyricsProvider(ABC):
    @abstractmethod
    async def search(self, artist: str, title: str, album: str = "") -> list[SongHit]:
        ...

    @abstractmethod
    async def fetch_lyrics(self, hit: SongHit) -> str:
        ...

    @abstractmethod
    def name(self) -> str:
        ...


async def fetch_song(
    provider: LyricsProvider,
    artist: str,
    title: str,
    album: str = "",
    hit: SongHit | None = None,
) -> Song:
    """Search for a song (unless *hit* is already chosen) and fetch its lyrics."""
    if not artist or not title:
        raise LyricsProviderError("Artist and song title are required")

    if hit is None:
        hits = await provider.search(artist, title, album)
        if not hits:
            raise SongNotFoundError(f'Song "{title}" by {artist} not found on {provider.name()}')
        hit = hits[0]

    lyrics = await provider.fetch_lyrics(hit)
    return Song(
        id=hit.id,
        title=hit.title,
        artist=hit.artist,
        lyrics=lyrics,
        url=hit.url,
        image_url=hit.image_url,
        thumbnail_url=hit.thumbnail_url,
        release_date=hit.release_date,
        fetched_at=datetime.now(timezone.utc).isoformat(),
    )
