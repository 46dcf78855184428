"""
Dataclass for tracking download session statistics.
"""

import time
from dataclasses import dataclass, field

from .result import TrackOutcome, TrackResult


@dataclass
class DownloadStats:
    """Tracks statistics for a download session."""

    tracks_downloaded: int = 0
    tracks_degraded: int = 0
    tracks_skipped_unsupported: int = 0
    tracks_skipped_unavailable: int = 0
    tracks_failed: int = 0
    total_size_downloaded: int = 0
    covers_fetched: int = 0
    cover_cache_hits: int = 0
    albums_processed: set[str] = field(default_factory=set)
    start_time: float = field(default_factory=time.monotonic, repr=False)

    @property
    def tracks_skipped(self) -> int:
        return self.tracks_skipped_unsupported + self.tracks_skipped_unavailable

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def record(self, result: TrackResult) -> None:
        """Updates the counters from the outcome of a single track."""
        if result.is_downloaded:
            self.tracks_downloaded += 1
            if result.outcome is TrackOutcome.DEGRADED:
                self.tracks_degraded += 1
            if result.path is not None and result.path.is_file():
                self.total_size_downloaded += result.path.stat().st_size
        elif result.outcome is TrackOutcome.SKIPPED_UNSUPPORTED:
            self.tracks_skipped_unsupported += 1
        elif result.is_skipped:
            self.tracks_skipped_unavailable += 1
        else:
            self.tracks_failed += 1

    def record_cover(self, is_hit: bool) -> None:
        if is_hit:
            self.cover_cache_hits += 1
        else:
            self.covers_fetched += 1
