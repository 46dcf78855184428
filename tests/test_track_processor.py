"""Tests for the per-track download pipeline."""

import asyncio
import logging

import mutagen.id3 as id3
import pytest
from fakes import (
    JPEG_BYTES,
    FakeDownloader,
    FakeSession,
    make_ogg_vorbis,
    make_track,
    vorbis_payload,
    xor,
)
from mutagen.oggvorbis import OggVorbis

from spotrip.core.track_processor import TrackProcessor
from spotrip.media import CoverArtCache, Tagger
from spotrip.models.catalog import AlbumRef
from spotrip.models.formats import AudioFormat
from spotrip.models.result import TrackOutcome

MP3_PAYLOAD = b"\xff\xfb\x90\x00" + bytes(range(200))


def make_processor(session, downloader=None, embed_art=True):
    cache = CoverArtCache(downloader or FakeDownloader())
    return TrackProcessor(session, Tagger(embed_art), cache)


def run_track(processor, track, directory):
    return asyncio.run(processor.process_track(track, directory))


@pytest.fixture
def vorbis_session():
    session = FakeSession()
    session.payloads["file-1"] = vorbis_payload()
    return session


def test_vorbis_track_is_windowed_and_tagged(tmp_path, vorbis_session):
    track = make_track(1)
    result = run_track(make_processor(vorbis_session), track, tmp_path)

    assert result.outcome is TrackOutcome.DOWNLOADED
    assert result.audio_format is AudioFormat.OGG_VORBIS_160
    assert result.reasons == []
    assert result.path == tmp_path / "Artist A & Artist B - Song 1 (0000000000000000000001).ogg"
    assert vorbis_session.opened == [("file-1", 20 * 1024)]

    audio = OggVorbis(str(result.path))
    assert audio["title"] == ["Song 1"]
    assert audio["isrc"] == [track.uri]
    assert result.path.read_bytes().startswith(b"OggS")


def test_non_vorbis_track_is_copied_whole(tmp_path):
    session = FakeSession(payloads={"mp3-file": MP3_PAYLOAD})
    track = make_track(2, files={AudioFormat.MP3_320: "mp3-file", AudioFormat.MP3_96: "low"})

    result = run_track(make_processor(session), track, tmp_path)

    assert result.outcome is TrackOutcome.DOWNLOADED
    assert result.path.suffix == ".mp3"
    assert result.path.read_bytes().endswith(MP3_PAYLOAD)
    assert id3.ID3(str(result.path))["TIT2"].text == ["Song 2"]
    assert session.opened == [("mp3-file", 40 * 1024)]


def test_unsupported_track_is_skipped(tmp_path, caplog):
    session = FakeSession()
    track = make_track(3, files={})

    with caplog.at_level(logging.WARNING):
        result = run_track(make_processor(session), track, tmp_path)

    assert result.outcome is TrackOutcome.SKIPPED_UNSUPPORTED
    assert result.is_skipped
    assert list(tmp_path.iterdir()) == []
    assert session.opened == []
    assert "not available in any supported format" in caplog.text


def test_open_failure_skips_track(tmp_path, vorbis_session):
    vorbis_session.fail_open.add("file-1")

    result = run_track(make_processor(vorbis_session), make_track(1), tmp_path)

    assert result.outcome is TrackOutcome.SKIPPED_OPEN_FAILURE
    assert isinstance(result.error, ConnectionError)
    assert list(tmp_path.iterdir()) == []


def test_missing_key_writes_undecrypted_bytes(tmp_path):
    session = FakeSession(payloads={"mp3-file": MP3_PAYLOAD})
    session.fail_key = True
    track = make_track(4, files={AudioFormat.MP3_160: "mp3-file"})

    result = run_track(make_processor(session), track, tmp_path)

    assert result.outcome is TrackOutcome.DEGRADED
    assert result.is_downloaded
    assert result.reasons == ["not decrypted"]
    assert result.path.read_bytes().endswith(xor(MP3_PAYLOAD))


def test_stream_failure_skips_track(tmp_path, vorbis_session):
    vorbis_session.fail_decrypt = True

    result = run_track(make_processor(vorbis_session), make_track(1), tmp_path)

    assert result.outcome is TrackOutcome.SKIPPED_STREAM_ERROR
    assert list(tmp_path.iterdir()) == []
    assert vorbis_session.files and all(f.closed for f in vorbis_session.files)


def test_remote_read_error_removes_partial_file(tmp_path):
    chunk = TrackProcessor.CHUNK_SIZE
    session = FakeSession(payloads={"file-1": b"\x00" * 0xA7 + b"a" * (2 * chunk)})
    session.fail_read_after = 0xA7 + chunk

    result = run_track(make_processor(session), make_track(1), tmp_path)

    assert result.outcome is TrackOutcome.SKIPPED_STREAM_ERROR
    assert isinstance(result.error, RuntimeError)
    assert list(tmp_path.iterdir()) == []
    assert all(f.closed for f in session.files[1:])


def test_write_failure_is_fatal(tmp_path, vorbis_session):
    missing_dir = tmp_path / "does-not-exist"

    result = run_track(make_processor(vorbis_session), make_track(1), missing_dir)

    assert result.outcome is TrackOutcome.FATAL
    assert isinstance(result.error, OSError)
    assert not missing_dir.exists()


def test_missing_cover_leaves_file_untagged(tmp_path, vorbis_session):
    track = make_track(1, album=AlbumRef(id="album-1", name="X", covers=()))

    result = run_track(make_processor(vorbis_session), track, tmp_path)

    assert result.outcome is TrackOutcome.DEGRADED
    assert result.reasons == ["untagged (no cover)"]
    assert result.path.read_bytes() == make_ogg_vorbis()


def test_cover_fetch_failure_leaves_file_untagged(tmp_path, vorbis_session):
    downloader = FakeDownloader(error=ConnectionError("cdn down"))

    result = run_track(make_processor(vorbis_session, downloader), make_track(1), tmp_path)

    assert result.outcome is TrackOutcome.DEGRADED
    assert "title" not in OggVorbis(str(result.path))


def test_tag_failure_keeps_audio_file(tmp_path):
    session = FakeSession(payloads={"file-1": b"\x00" * 0xA7 + b"garbage audio"})

    result = run_track(make_processor(session), make_track(1), tmp_path)

    assert result.outcome is TrackOutcome.DEGRADED
    assert result.reasons == ["untagged"]
    assert result.path.read_bytes() == b"garbage audio"


def test_embed_art_disabled_skips_cover_fetch(tmp_path, vorbis_session):
    downloader = FakeDownloader(JPEG_BYTES)
    track = make_track(1, album=AlbumRef(id="album-1", name="X", covers=()))

    result = run_track(make_processor(vorbis_session, downloader, embed_art=False), track, tmp_path)

    assert result.outcome is TrackOutcome.DOWNLOADED
    assert downloader.calls == []
    audio = OggVorbis(str(result.path))
    assert audio["title"] == ["Song 1"]
    assert "metadata_block_picture" not in audio
