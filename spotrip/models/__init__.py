"""
Data Models Layer.

This package contains the data structures used throughout the application:
catalog descriptions, audio formats, per-track results, configuration and
session statistics.
"""

from .catalog import AlbumDescriptor, AlbumRef, CoverImage, ImageSize, TrackDescriptor
from .config import DownloadConfig
from .formats import FORMAT_PREFERENCE, AudioFormat, select_format
from .result import TrackOutcome, TrackResult, should_abort
from .stats import DownloadStats

__all__ = [
    "FORMAT_PREFERENCE",
    "AlbumDescriptor",
    "AlbumRef",
    "AudioFormat",
    "CoverImage",
    "DownloadConfig",
    "DownloadStats",
    "ImageSize",
    "TrackDescriptor",
    "TrackOutcome",
    "TrackResult",
    "select_format",
    "should_abort",
]
