"""
A read-only view over a byte range of another seekable stream.
"""

import io
from typing import BinaryIO


class SubRangeStream(io.RawIOBase):
    """
    Exposes the window [offset, offset + length) of an underlying stream as a
    standalone stream whose positions start at zero.

    The wrapper takes ownership of the underlying stream and closes it on
    close(). Reads never return bytes beyond the window, and seeks that would
    land before its start or past its end raise ValueError without moving.
    """

    def __init__(self, stream: BinaryIO, offset: int, length: int):
        super().__init__()
        if offset < 0:
            raise ValueError(f"offset must be non-negative, got {offset}")
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        self._stream = stream
        self._offset = offset
        self._length = length
        self._stream.seek(offset, io.SEEK_SET)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def length(self) -> int:
        return self._length

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        self._checkClosed()
        return self._stream.tell() - self._offset

    def seek(self, pos: int, whence: int = io.SEEK_SET) -> int:
        self._checkClosed()
        if whence == io.SEEK_SET:
            target = pos
        elif whence == io.SEEK_CUR:
            target = self.tell() + pos
        elif whence == io.SEEK_END:
            target = self._length + pos
        else:
            raise ValueError(f"invalid whence ({whence})")

        if target < 0:
            raise ValueError(f"position {target} would be before the window start")
        if target > self._length:
            raise ValueError(
                f"position {target} would be past the window end ({self._length})"
            )

        newpos = self._stream.seek(target + self._offset, io.SEEK_SET)
        return newpos - self._offset

    def read(self, size: int | None = -1) -> bytes:
        self._checkClosed()
        remaining = self._length - self.tell()
        if remaining <= 0:
            return b""
        if size is None or size < 0 or size > remaining:
            size = remaining
        return self._stream.read(size)

    def readinto(self, buffer) -> int:
        data = self.read(len(buffer))
        n = len(data)
        buffer[:n] = data
        return n

    def close(self) -> None:
        if not self.closed:
            try:
                close = getattr(self._stream, "close", None)
                if close is not None:
                    close()
            finally:
                super().close()
