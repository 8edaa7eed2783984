from __future__ import annotations

import logging
import re
import time

import httpx
from bs4 import BeautifulSoup

from lyricsiq.providers.base import LyricsProvider, LyricsProviderError, SongHit

log = logging.getLogger("lyricsiq.genius")

USER_AGENT = "Mozilla/5.0 (compatible; lyricsiq)"


def _hit_from_result(result: dict) -> SongHit:
    song = result["result"]
    return SongHit(
        id=song["id"],
        title=song["title"],
        artist=(song.get("primary_artist") or {}).get("name", ""),
        url=song["url"],
        image_url=song.get("song_art_image_url") or "",
        thumbnail_url=song.get("song_art_image_thumbnail_url") or "",
        release_date=song.get("release_date_for_display"),
    )


def extract_lyrics(html: str) -> str:
    """Pull plain-text lyrics out of a Genius song page.

    Lyrics live in one or more ``div[data-lyrics-container="true"]`` blocks
    with ``<br>`` line breaks. Nested blocks marked
    ``data-exclude-from-selection`` are page furniture (headers, ads).
    """
    soup = BeautifulSoup(html, "html.parser")
    containers = soup.select('div[data-lyrics-container="true"]')
    if not containers:
        raise LyricsProviderError("No lyrics found on page")

    parts = []
    for container in containers:
        for junk in container.select('[data-exclude-from-selection="true"]'):
            junk.decompose()
        for br in container.find_all("br"):
            br.replace_with("\n")
        parts.append(container.get_text())

    text = "\n".join(parts)
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


class GeniusProvider(LyricsProvider):
    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.genius.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not access_token:
            raise LyricsProviderError("Genius API access token is required")
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        )

    async def search(self, artist: str, title: str, album: str = "") -> list[SongHit]:
        query = " ".join(p for p in (title, artist, album) if p)
        log.info("Searching Genius: %s", query)
        t0 = time.monotonic()
        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{self.base_url}/search",
                    params={"q": query},
                    headers={"Authorization": f"Bearer {self.access_token}"},
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            raise LyricsProviderError(f"Genius search failed: {e}") from e

        hits = [
            _hit_from_result(r)
            for r in data.get("response", {}).get("hits", [])
            if r.get("type", "song") == "song"
        ]
        log.info("Search returned %d hits in %.1fs", len(hits), time.monotonic() - t0)
        return hits

    async def fetch_lyrics(self, hit: SongHit) -> str:
        log.info("Fetching lyrics page: %s", hit.url)
        try:
            async with self._client() as client:
                resp = await client.get(hit.url)
                resp.raise_for_status()
                html = resp.text
        except httpx.HTTPError as e:
            raise LyricsProviderError(f"Failed to fetch lyrics: {e}") from e
        return extract_lyrics(html)

    def name(self) -> str:
        return "Genius"
