"""
Utilities for handling file paths, output filenames and catalog references.
"""

import re
from pathlib import Path

from pathvalidate import sanitize_filename

from spotrip.exceptions import InvalidReferenceError
from spotrip.models.catalog import TrackDescriptor

_BASE62_ID = r"[0-9A-Za-z]{22}"
_URL_PATTERN = re.compile(
    rf"open\.spotify\.com/(?:intl-[\w-]+/)?(?P<type>album|track)/(?P<id>{_BASE62_ID})"
)
_URI_PATTERN = re.compile(rf"^spotify:(?P<type>album|track):(?P<id>{_BASE62_ID})$")
_ID_PATTERN = re.compile(rf"^{_BASE62_ID}$")


def parse_catalog_reference(reference: str) -> tuple[str, str]:
    """
    Parses a catalog URL, URI or bare ID into a (type, id) tuple.
    A bare ID is taken to be an album.

    Raises:
        InvalidReferenceError: If the reference is not recognised.
    """
    reference = reference.strip()
    if match := _URL_PATTERN.search(reference):
        return match.group("type"), match.group("id")
    if match := _URI_PATTERN.match(reference):
        return match.group("type"), match.group("id")
    if _ID_PATTERN.match(reference):
        return "album", reference
    raise InvalidReferenceError(f"Invalid or unsupported reference: {reference}")


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def album_directory(base_dir: Path, album_name: str) -> Path:
    return base_dir / sanitize_filename(album_name, platform="auto")


def build_track_filename(track: TrackDescriptor, file_extension: str) -> str:
    """
    Builds '{artists} - {name} ({id}).{ext}' for a track.
    Characters that are not allowed in filenames are removed.
    """
    filename = f"{track.artist_string} - {track.name} ({track.id}).{file_extension}"
    return sanitize_filename(filename, platform="auto")
