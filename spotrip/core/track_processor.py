"""
Handles the processing of a single track, from format selection to tagging.
"""

import asyncio
import logging
import os
from pathlib import Path

import aiofiles

from spotrip.api.session import CatalogSession
from spotrip.exceptions import UnsupportedFormatError
from spotrip.media import CoverArtCache, SubRangeStream, TagBundle, Tagger
from spotrip.models.catalog import TrackDescriptor
from spotrip.models.formats import (
    get_bytes_per_second,
    get_extension,
    get_stream_offset,
    select_format,
)
from spotrip.models.result import TrackOutcome, TrackResult
from spotrip.utils.path import build_track_filename

log = logging.getLogger(__name__)


def _close_stream(stream) -> None:
    close = getattr(stream, "close", None)
    if close is not None:
        close()


def _remove_partial(file_path: Path) -> None:
    if file_path.exists():
        try:
            os.remove(file_path)
        except OSError as e:
            log.debug(f"Could not remove partial file '{file_path}': {e}")


class TrackProcessor:
    """
    Turns one catalog track into a tagged local file.

    The steps run strictly in order: select format, open the remote file,
    request the key, wrap the decrypted stream in a window, write the bytes,
    then fetch the cover and write the tags. Only a failed local write is
    reported as fatal; every other failure either skips the track or leaves a
    degraded file behind.
    """

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(
        self,
        session: CatalogSession,
        tagger: Tagger,
        cover_cache: CoverArtCache,
    ):
        self.session = session
        self.tagger = tagger
        self.cover_cache = cover_cache

    async def process_track(
        self, track: TrackDescriptor, directory: Path
    ) -> TrackResult:
        """Downloads and tags a single track into the given directory."""
        log.info(f"Downloading Track #{track.number}: {track.name} ({track.id})")
        for audio_format in track.files:
            log.debug(f"<{track.id}> has format {audio_format.value}")

        selection = select_format(track.files)
        if selection is None:
            log.warning(
                f"[yellow]<{track.id}> is not available in any supported format[/yellow]"
            )
            return TrackResult(
                track.id,
                TrackOutcome.SKIPPED_UNSUPPORTED,
                error=UnsupportedFormatError(
                    f"Track {track.id} has no supported format."
                ),
            )
        audio_format, file_id = selection
        log.debug(f"<{track.id}> selected format {audio_format.value}")

        try:
            encrypted_file = await self.session.open_audio_file(
                file_id, get_bytes_per_second(audio_format)
            )
        except Exception as e:
            log.error(f"[red]Unable to load encrypted file for <{track.id}>: {e}[/red]")
            return TrackResult(
                track.id,
                TrackOutcome.SKIPPED_OPEN_FAILURE,
                audio_format=audio_format,
                error=e,
            )

        reasons: list[str] = []
        key: bytes | None
        try:
            key = await self.session.request_audio_key(track.id, file_id)
        except Exception as e:
            log.warning(
                f"[yellow]Unable to load key, continuing without decryption: {e}[/yellow]"
            )
            key = None
            reasons.append("not decrypted")

        offset = get_stream_offset(audio_format)
        decrypted_file = None
        try:
            decrypted_file = self.session.decrypt(key, encrypted_file)
            audio_file = SubRangeStream(
                decrypted_file, offset, max(encrypted_file.size - offset, 0)
            )
        except Exception as e:
            log.error(f"[red]Error opening audio stream for <{track.id}>: {e}[/red]")
            _close_stream(decrypted_file)
            _close_stream(encrypted_file)
            return TrackResult(
                track.id,
                TrackOutcome.SKIPPED_STREAM_ERROR,
                audio_format=audio_format,
                error=e,
            )

        file_extension = get_extension(audio_format)
        file_path = directory / build_track_filename(track, file_extension)
        try:
            with audio_file:
                await self._save_stream(audio_file, file_path)
        except OSError as e:
            log.error(f"[red]✗ Failed to write '{file_path}': {e}[/red]")
            _remove_partial(file_path)
            return TrackResult(
                track.id,
                TrackOutcome.FATAL,
                path=file_path,
                audio_format=audio_format,
                error=e,
            )
        except Exception as e:
            log.error(f"[red]Audio stream for <{track.id}> broke off: {e}[/red]")
            _remove_partial(file_path)
            return TrackResult(
                track.id,
                TrackOutcome.SKIPPED_STREAM_ERROR,
                path=file_path,
                audio_format=audio_format,
                error=e,
            )
        log.info(f"Decrypted content saved to [dim]{file_path}[/dim]")

        if untagged_reason := await self._apply_tags(track, file_path, file_extension):
            reasons.append(untagged_reason)

        return TrackResult(
            track.id,
            TrackOutcome.DEGRADED if reasons else TrackOutcome.DOWNLOADED,
            path=file_path,
            audio_format=audio_format,
            reasons=reasons,
        )

    async def _save_stream(self, audio_file: SubRangeStream, file_path: Path) -> None:
        """Copies the whole stream into a new local file."""
        async with aiofiles.open(file_path, "wb") as f:
            while chunk := await asyncio.to_thread(audio_file.read, self.CHUNK_SIZE):
                await f.write(chunk)

    async def _apply_tags(
        self, track: TrackDescriptor, file_path: Path, file_extension: str
    ) -> str | None:
        """
        Fetches the cover and writes the tags.

        Returns:
            None on success, otherwise the reason the file was left untagged.
        """
        cover = None
        if self.tagger.embed_art:
            try:
                cover = await self.cover_cache.get(track)
            except Exception as e:
                log.warning(
                    f"[yellow]Unable to get cover art for <{track.id}>, "
                    f"leaving file untagged: {e}[/yellow]"
                )
                return "untagged (no cover)"

        tags = TagBundle.from_track(track, cover)
        try:
            await asyncio.to_thread(
                self.tagger.tag_file, str(file_path), file_extension, tags
            )
        except Exception as e:
            log.warning(
                f"[yellow]Unable to write metadata to '{file_path.name}': {e}[/yellow]",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return "untagged"
        return None
