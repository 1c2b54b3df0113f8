"""Cursor state for reading a bytecode buffer.

A :class:`ByteReader` owns one buffer and one monotonic cursor.  Each decode
call creates its own reader so sub-readers can be exercised in isolation and
no position is shared between unrelated decodes.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import TruncatedDataError

__all__ = ["ByteReader"]


@dataclass
class ByteReader:
    """Forward-only reader over ``data`` starting at ``offset``."""

    data: bytes
    offset: int = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def at_end(self) -> bool:
        return self.offset >= len(self.data)

    def read_byte(self) -> int:
        """Return one unsigned byte and advance the cursor by one."""

        if self.offset >= len(self.data):
            raise TruncatedDataError("Unexpected end of data reading 1 byte", offset=self.offset)
        value = self.data[self.offset]
        self.offset += 1
        return value

    def read_bytes(self, length: int) -> bytes:
        """Return the next ``length`` raw bytes and advance past them."""

        if length < 0:
            raise ValueError("length must be non-negative")
        end = self.offset + length
        if end > len(self.data):
            raise TruncatedDataError(
                f"Unexpected end of data reading {length} bytes ({self.remaining} available)",
                offset=self.offset,
            )
        chunk = bytes(self.data[self.offset : end])
        self.offset = end
        return chunk
