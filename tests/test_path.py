"""Tests for catalog reference parsing and output filenames."""

import pytest
from fakes import make_track

from spotrip.exceptions import InvalidReferenceError
from spotrip.utils.path import album_directory, build_track_filename, parse_catalog_reference

ALBUM_ID = "2FRgTjahtyzUQG8A3ZaaDT"


@pytest.mark.parametrize(
    "reference, expected",
    [
        (ALBUM_ID, ("album", ALBUM_ID)),
        (f"spotify:album:{ALBUM_ID}", ("album", ALBUM_ID)),
        (f"spotify:track:{ALBUM_ID}", ("track", ALBUM_ID)),
        (f"https://open.spotify.com/album/{ALBUM_ID}?si=123", ("album", ALBUM_ID)),
        (f"https://open.spotify.com/intl-de/track/{ALBUM_ID}", ("track", ALBUM_ID)),
    ],
)
def test_parse_catalog_reference(reference, expected):
    assert parse_catalog_reference(reference) == expected


@pytest.mark.parametrize(
    "reference",
    ["", "too-short", f"spotify:artist:{ALBUM_ID}", "https://example.com/album/x"],
)
def test_parse_catalog_reference_rejects(reference):
    with pytest.raises(InvalidReferenceError):
        parse_catalog_reference(reference)


def test_track_filename_format():
    track = make_track(5)
    assert (
        build_track_filename(track, "ogg")
        == "Artist A & Artist B - Song 5 (0000000000000000000005).ogg"
    )


def test_single_artist_filename():
    track = make_track(1, artists=["Solo"])
    assert build_track_filename(track, "mp3") == "Solo - Song 1 (0000000000000000000001).mp3"


def test_filename_strips_path_separators():
    track = make_track(1, artists=["AC/DC"])
    filename = build_track_filename(track, "flac")
    assert "/" not in filename
    assert filename.endswith("(0000000000000000000001).flac")


def test_album_directory(tmp_path):
    assert album_directory(tmp_path, "X") == tmp_path / "X"
    assert album_directory(tmp_path, "A/B").parent == tmp_path
