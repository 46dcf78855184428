"""Tests for format ranking and the constants derived from each format."""

import pytest

from spotrip.models.formats import (
    FORMAT_PREFERENCE,
    OGG_HEADER_END,
    AudioFormat,
    get_bytes_per_second,
    get_extension,
    get_stream_offset,
    is_ogg_vorbis,
    select_format,
)


def test_preference_covers_every_format_once():
    assert len(FORMAT_PREFERENCE) == len(set(FORMAT_PREFERENCE)) == len(AudioFormat)
    assert FORMAT_PREFERENCE[0] is AudioFormat.FLAC_FLAC_24BIT
    assert FORMAT_PREFERENCE[-1] is AudioFormat.OTHER5


def test_select_format_returns_highest_priority_match():
    files = {
        AudioFormat.OGG_VORBIS_96: "low",
        AudioFormat.MP3_320: "mp3",
        AudioFormat.OGG_VORBIS_320: "high",
    }
    assert select_format(files) == (AudioFormat.MP3_320, "mp3")


def test_select_format_ignores_mapping_order():
    forward = {
        AudioFormat.AAC_24: "a",
        AudioFormat.OGG_VORBIS_160: "b",
        AudioFormat.FLAC_FLAC: "c",
    }
    backward = dict(reversed(list(forward.items())))
    assert select_format(forward) == select_format(backward) == (AudioFormat.FLAC_FLAC, "c")


def test_select_format_none_when_nothing_supported():
    assert select_format({}) is None


@pytest.mark.parametrize(
    "audio_format, ext",
    [
        (AudioFormat.OGG_VORBIS_320, "ogg"),
        (AudioFormat.MP3_160_ENC, "mp3"),
        (AudioFormat.MP4_128, "aac"),
        (AudioFormat.XHE_AAC_12, "aac"),
        (AudioFormat.FLAC_FLAC_24BIT, "flac"),
        (AudioFormat.OTHER5, "bin"),
    ],
)
def test_get_extension(audio_format, ext):
    assert get_extension(audio_format) == ext


def test_bytes_per_second():
    assert get_bytes_per_second(AudioFormat.OGG_VORBIS_160) == 20 * 1024
    assert get_bytes_per_second(AudioFormat.FLAC_FLAC) == 112 * 1024
    assert get_bytes_per_second(AudioFormat.XHE_AAC_12) == 1536


def test_only_vorbis_streams_are_offset():
    assert is_ogg_vorbis(AudioFormat.OGG_VORBIS_96)
    assert get_stream_offset(AudioFormat.OGG_VORBIS_96) == OGG_HEADER_END == 0xA7
    assert not is_ogg_vorbis(AudioFormat.MP3_320)
    assert get_stream_offset(AudioFormat.FLAC_FLAC) == 0
