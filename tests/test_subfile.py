"""Tests for the byte-range stream window."""

import io

import pytest

from spotrip.media.subfile import SubRangeStream

DATA = bytes(range(256)) * 4  # 1024 bytes


def make_window(offset=100, length=500):
    return SubRangeStream(io.BytesIO(DATA), offset, length)


def test_construction_seeks_to_offset():
    underlying = io.BytesIO(DATA)
    SubRangeStream(underlying, 100, 500)
    assert underlying.tell() == 100


def test_read_returns_exactly_the_window():
    window = make_window()
    assert window.tell() == 0
    assert window.read() == DATA[100:600]
    assert window.read(10) == b""


def test_chunked_reads_stop_at_window_end():
    window = make_window(offset=1000, length=24)
    assert window.read(16) == DATA[1000:1016]
    assert window.read(16) == DATA[1016:1024]
    assert window.read(16) == b""


def test_seek_set_is_relative_to_offset():
    underlying = io.BytesIO(DATA)
    window = SubRangeStream(underlying, 100, 500)
    assert window.seek(50) == 50
    assert underlying.tell() == 150
    assert window.read(4) == DATA[150:154]


def test_seek_cur_and_end():
    window = make_window()
    window.seek(10)
    assert window.seek(5, io.SEEK_CUR) == 15
    assert window.seek(-20, io.SEEK_END) == 480
    assert window.read() == DATA[580:600]
    assert window.seek(0, io.SEEK_END) == 500


def test_seek_before_start_is_rejected_and_position_kept():
    window = make_window()
    window.seek(42)
    with pytest.raises(ValueError):
        window.seek(-501, io.SEEK_END)
    with pytest.raises(ValueError):
        window.seek(-43, io.SEEK_CUR)
    with pytest.raises(ValueError):
        window.seek(-1)
    assert window.tell() == 42


def test_seek_past_end_is_rejected():
    window = make_window()
    with pytest.raises(ValueError):
        window.seek(501)
    with pytest.raises(ValueError):
        window.seek(1, io.SEEK_END)
    assert window.tell() == 0


def test_invalid_arguments():
    with pytest.raises(ValueError):
        SubRangeStream(io.BytesIO(DATA), -1, 10)
    with pytest.raises(ValueError):
        SubRangeStream(io.BytesIO(DATA), 0, -10)
    with pytest.raises(ValueError):
        make_window().seek(0, 7)


def test_close_closes_underlying_stream():
    underlying = io.BytesIO(DATA)
    with SubRangeStream(underlying, 0, 10) as window:
        assert window.readable() and window.seekable()
    assert window.closed
    assert underlying.closed


def test_readinto():
    window = make_window(offset=10, length=4)
    buffer = bytearray(8)
    assert window.readinto(buffer) == 4
    assert bytes(buffer[:4]) == DATA[10:14]


def test_chunked_copy_matches_window():
    window = make_window(offset=3, length=1000)
    out = io.BytesIO()
    while chunk := window.read(64):
        out.write(chunk)
    assert out.getvalue() == DATA[3:1003]
