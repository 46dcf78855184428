"""
An in-memory cache of album cover art, keyed by cover ID.
"""

import logging
from collections.abc import Callable, Iterable

from spotrip.exceptions import NoCoverError
from spotrip.models.catalog import CoverImage, TrackDescriptor
from spotrip.models.config import DEFAULT_IMAGE_URL

from .downloader import Downloader

log = logging.getLogger(__name__)

IMAGE_ACCEPT = "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8"
FALLBACK_MIME = "image/jpeg"


def guess_image_mime(data: bytes) -> str | None:
    """Detects an image MIME type from its leading magic bytes."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"RIFF") and data[8:12] == b"WEBP":
        return "image/webp"
    if data.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if data.startswith(b"BM"):
        return "image/bmp"
    if data[4:12] in (b"ftypavif", b"ftypavis"):
        return "image/avif"
    return None


def select_cover(covers: Iterable[CoverImage]) -> CoverImage:
    """
    Picks the largest cover. Among equally sized covers the last one wins.

    Raises:
        NoCoverError: If there are no covers at all.
    """
    best: CoverImage | None = None
    for cover in covers:
        if best is None or cover.size >= best.size:
            best = cover
    if best is None:
        raise NoCoverError("Album has no cover art.")
    return best


class CoverArtCache:
    """
    Fetches each distinct cover once and serves later requests from memory.

    Entries are never evicted; a single run only touches a handful of covers.
    A failed fetch is remembered too, and later requests for the same cover
    re-raise the original error without going back to the network.
    The check-then-fetch-then-insert sequence in get() is not guarded by a
    lock and relies on tracks being processed one at a time.
    """

    def __init__(
        self,
        downloader: Downloader,
        base_url: str = DEFAULT_IMAGE_URL,
        stats_callback: Callable[[bool], None] | None = None,
    ):
        self.downloader = downloader
        self.base_url = base_url
        self._stats_callback = stats_callback
        self._covers: dict[str, tuple[bytes, str]] = {}
        self._failures: dict[str, Exception] = {}

    def __len__(self) -> int:
        return len(self._covers)

    def __contains__(self, cover_id: str) -> bool:
        return cover_id in self._covers

    async def get(self, track: TrackDescriptor) -> tuple[bytes, str]:
        """
        Returns (image bytes, MIME type) of the best cover for a track.

        Raises:
            NoCoverError: If the track's album has no covers.
            Exception: Whatever the downloader raised the first time this
            cover was fetched.
        """
        cover_id = select_cover(track.album.covers).id
        if cover_id in self._covers:
            if self._stats_callback:
                self._stats_callback(True)
            return self._covers[cover_id]

        if cover_id in self._failures:
            log.debug(f"Cover {cover_id} failed earlier, not fetching again")
            raise self._failures[cover_id]

        try:
            entry = await self._download_cover(cover_id)
        except Exception as e:
            self._failures[cover_id] = e
            raise
        if self._stats_callback:
            self._stats_callback(False)
        self._covers[cover_id] = entry
        return entry

    async def _download_cover(self, cover_id: str) -> tuple[bytes, str]:
        url = f"{self.base_url}{cover_id}"
        log.debug(f"Downloading cover {cover_id}")
        data = await self.downloader.fetch_bytes(url, headers={"Accept": IMAGE_ACCEPT})
        mime = guess_image_mime(data) or FALLBACK_MIME
        log.debug(f"Cover {cover_id}: {len(data)} bytes, {mime}")
        return data, mime
