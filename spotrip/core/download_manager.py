"""
The main orchestrator for resolving catalog references and downloading albums.
"""

import logging
from pathlib import Path

from rich.markup import escape

from spotrip.api.session import CatalogSession
from spotrip.exceptions import InvalidReferenceError, LocalWriteError
from spotrip.media import CoverArtCache, Downloader, Tagger
from spotrip.models.catalog import AlbumDescriptor, TrackDescriptor
from spotrip.models.config import DownloadConfig
from spotrip.models.result import TrackResult, should_abort
from spotrip.models.stats import DownloadStats
from spotrip.utils.path import album_directory, create_dir, parse_catalog_reference

from .track_processor import TrackProcessor

log = logging.getLogger(__name__)


class DownloadManager:
    """
    Orchestrates the entire download process.

    Albums are downloaded one track at a time, in catalog order. The cover
    art cache lives on this instance and is shared by every track of the run.
    """

    def __init__(
        self,
        config: DownloadConfig,
        session: CatalogSession,
        downloader: Downloader | None = None,
    ):
        self.config = config
        self.session = session
        self.stats = DownloadStats()
        self.cover_cache = CoverArtCache(
            downloader or Downloader(max_attempts=config.max_attempts),
            base_url=config.image_base_url,
            stats_callback=self.stats.record_cover,
        )
        self.track_processor = TrackProcessor(
            session, Tagger(config.embed_art), self.cover_cache
        )
        self._processed_album_ids: set[str] = set()

    async def execute_downloads(self) -> None:
        """Processes every source reference from the config."""
        if not self.config.sources:
            log.info("No sources provided. Nothing to do.")
            return

        unique_sources = list(dict.fromkeys(self.config.sources))
        if len(unique_sources) < len(self.config.sources):
            log.info(
                f"Removed {len(self.config.sources) - len(unique_sources)} "
                "duplicate references."
            )

        for source in unique_sources:
            try:
                await self.download(source)
            except InvalidReferenceError as e:
                log.error(f"[red]{escape(str(e))}[/red]")

    async def download(
        self, reference: str, directory: Path | None = None
    ) -> list[TrackResult]:
        """Routes a catalog URL, URI or ID to the album or track handler."""
        item_type, item_id = parse_catalog_reference(reference)
        if item_type == "track":
            return [await self.download_track_by_id(item_id, directory)]
        return await self.download_album_by_id(item_id, directory)

    async def download_album_by_id(
        self, album_id: str, directory: Path | None = None
    ) -> list[TrackResult]:
        if album_id in self._processed_album_ids:
            log.info(f"Album '{album_id}' has already been processed. Skipping.")
            return []
        album = await self.session.resolve_album(album_id)
        return await self.download_album(album, directory)

    async def download_album(
        self, album: AlbumDescriptor, directory: Path | None = None
    ) -> list[TrackResult]:
        """
        Downloads every track of an album into '<directory>/<album name>'.

        Raises:
            LocalWriteError: If a track could not be written; the remaining
            tracks are not processed.
        """
        self._processed_album_ids.add(album.id)
        self.stats.albums_processed.add(album.id)

        log.info(f"\n[bold cyan]▶ Album:[/] {escape(album.name)}")
        dirpath = album_directory(Path(directory or self.config.output_dir), album.name)
        log.info(f"<{album.id}> saved at [dim]{escape(str(dirpath))}[/dim]")
        create_dir(dirpath)

        results = []
        for track_ref in album.tracks:
            results.append(await self._download_track_ref(track_ref, dirpath))
        return results

    async def download_track_by_id(
        self, track_id: str, directory: Path | None = None
    ) -> TrackResult:
        """Downloads a single track into the directory of its album."""
        track = await self.session.resolve_track(f"spotify:track:{track_id}")
        dirpath = album_directory(
            Path(directory or self.config.output_dir), track.album.name
        )
        create_dir(dirpath)
        log.info(f"\n[bold cyan]▶ From Album:[/] {escape(track.album.name)}")
        return await self._process(track, dirpath)

    async def _download_track_ref(self, track_ref: str, dirpath: Path) -> TrackResult:
        track = await self.session.resolve_track(track_ref)
        return await self._process(track, dirpath)

    async def _process(self, track: TrackDescriptor, dirpath: Path) -> TrackResult:
        result = await self.track_processor.process_track(track, dirpath)
        self.stats.record(result)
        if result.reasons:
            log.warning(
                f"[yellow]<{track.id}> saved with problems: "
                f"{', '.join(result.reasons)}[/yellow]"
            )
        if should_abort(result):
            raise LocalWriteError(
                f"Could not write '{result.path}': {result.error}"
            ) from result.error
        return result
