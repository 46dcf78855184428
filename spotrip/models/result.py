"""
The outcome of materializing a single track.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .formats import AudioFormat


class TrackOutcome(str, Enum):
    DOWNLOADED = "downloaded"
    DEGRADED = "degraded"
    SKIPPED_UNSUPPORTED = "skipped_unsupported"
    SKIPPED_OPEN_FAILURE = "skipped_open_failure"
    SKIPPED_STREAM_ERROR = "skipped_stream_error"
    FATAL = "fatal"


SKIPPED_OUTCOMES = frozenset(
    {
        TrackOutcome.SKIPPED_UNSUPPORTED,
        TrackOutcome.SKIPPED_OPEN_FAILURE,
        TrackOutcome.SKIPPED_STREAM_ERROR,
    }
)


@dataclass
class TrackResult:
    """
    Result of one pass through the track pipeline.

    Degraded tracks have a file on disk but are missing decryption or tags;
    the reasons are collected in `reasons`.
    """

    track_id: str
    outcome: TrackOutcome
    path: Path | None = None
    audio_format: AudioFormat | None = None
    reasons: list[str] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def is_downloaded(self) -> bool:
        return self.outcome in (TrackOutcome.DOWNLOADED, TrackOutcome.DEGRADED)

    @property
    def is_skipped(self) -> bool:
        return self.outcome in SKIPPED_OUTCOMES


def should_abort(result: TrackResult) -> bool:
    """Whether the enclosing album download must stop after this track."""
    return result.outcome is TrackOutcome.FATAL
