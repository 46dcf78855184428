"""
Immutable descriptions of catalog items as returned by the metadata service.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from .formats import AudioFormat


class ImageSize(IntEnum):
    """Discrete cover size classes, ordered from smallest to largest."""

    DEFAULT = 0
    SMALL = 1
    LARGE = 2
    XLARGE = 3


@dataclass(frozen=True)
class CoverImage:
    id: str
    size: ImageSize = ImageSize.DEFAULT


@dataclass(frozen=True)
class AlbumRef:
    """The owning album of a track, as embedded in track metadata."""

    id: str
    name: str
    covers: tuple[CoverImage, ...] = ()


@dataclass(frozen=True)
class TrackDescriptor:
    """
    Everything needed to download and tag one track.

    `id` is the base62 external ID used in filenames, `uri` is the full
    catalog URI written into the tags.
    """

    id: str
    uri: str
    name: str
    number: int
    album: AlbumRef
    artists: tuple[str, ...] = ()
    files: dict[AudioFormat, str] = field(default_factory=dict)

    @property
    def artist_string(self) -> str:
        """Artists joined for display, preserving catalog order."""
        return " & ".join(self.artists)


@dataclass(frozen=True)
class AlbumDescriptor:
    id: str
    name: str
    tracks: tuple[str, ...] = ()
