"""
Media Processing Layer.

This package is responsible for all media file operations: windowing the
decrypted audio stream, fetching and caching cover art, and writing tags.
"""

from .cover_cache import CoverArtCache
from .downloader import Downloader
from .subfile import SubRangeStream
from .tagger import TagBundle, Tagger

__all__ = ["CoverArtCache", "Downloader", "SubRangeStream", "TagBundle", "Tagger"]
