"""Bounds-checked cursor over a read-only byte buffer.

Every read checks the remaining length first and raises FormatError on
overrun, so malformed input can never be read past its end.
"""

import struct

from mdview.exceptions import FormatError


class ByteCursor:
    """Sequential little-endian reader tracking a base buffer plus offset.

    Works on any object supporting the buffer protocol and slicing (bytes,
    bytearray, memoryview, mmap). Offsets are relative to the buffer start.
    """

    __slots__ = ("_buffer", "_offset", "_length")

    def __init__(self, buffer: bytes, offset: int = 0) -> None:
        self._buffer = buffer
        self._offset = offset
        self._length = len(buffer)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return self._length - self._offset

    def require(self, size: int, what: str) -> None:
        """Raise FormatError unless ``size`` more bytes are available."""
        if size > self.remaining:
            raise FormatError(
                f"Input data is less than expected, {what} is incomplete. "
                f"Offset={self._offset} Need={size} Remaining={self.remaining}"
            )

    def read(self, layout: struct.Struct, what: str = "record") -> tuple:
        """Unpack one ``layout`` record at the current offset."""
        self.require(layout.size, what)
        values = layout.unpack_from(self._buffer, self._offset)
        self._offset += layout.size
        return values

    def read_bytes(self, size: int, what: str = "field") -> bytes:
        self.require(size, what)
        data = bytes(self._buffer[self._offset:self._offset + size])
        self._offset += size
        return data

    def iter_records(self, layout: struct.Struct, count: int, what: str = "records") -> list[tuple]:
        """Unpack ``count`` consecutive ``layout`` records."""
        size = layout.size * count
        self.require(size, what)
        records = list(layout.iter_unpack(self._buffer[self._offset:self._offset + size]))
        self._offset += size
        return records

    def skip(self, size: int, what: str = "padding") -> None:
        self.require(size, what)
        self._offset += size

    def align(self, alignment: int, what: str = "padding") -> None:
        """Advance to the next multiple of ``alignment``."""
        padding = -self._offset % alignment
        if padding:
            self.skip(padding, what)
