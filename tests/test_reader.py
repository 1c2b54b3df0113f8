from __future__ import annotations

import pytest

from luadistil.exceptions import TruncatedDataError
from luadistil.reader import ByteReader


def test_read_byte_and_run_advance_cursor() -> None:
    reader = ByteReader(b"\x01\x02\x03\x04")
    assert reader.read_byte() == 1
    assert reader.offset == 1
    assert reader.read_bytes(2) == b"\x02\x03"
    assert reader.offset == 3
    assert reader.remaining == 1
    assert not reader.at_end()
    assert reader.read_bytes(0) == b""
    assert reader.offset == 3


def test_short_reads_raise_with_offset() -> None:
    reader = ByteReader(b"\xff")
    reader.read_byte()
    assert reader.at_end()
    with pytest.raises(TruncatedDataError) as info:
        reader.read_byte()
    assert info.value.offset == 1

    with pytest.raises(TruncatedDataError, match="reading 4 bytes"):
        ByteReader(b"ab").read_bytes(4)


def test_readers_are_independent() -> None:
    data = b"\x10\x20"
    first = ByteReader(data)
    second = ByteReader(data)
    first.read_bytes(2)
    assert second.read_byte() == 0x10
