from __future__ import annotations

import math
import struct

import pytest

from luadistil.header import read_header
from luadistil.primitives import (
    decode_double_bits,
    read_integer,
    read_name,
    read_number,
    read_size,
    read_string,
)
from luadistil.reader import ByteReader
from tests.fixtures.luac_builder import LuacBuilder


def _reader(builder: LuacBuilder, payload: bytes):
    reader = ByteReader(builder.header() + payload)
    header = read_header(reader)
    return reader, header


def test_read_integer_is_little_endian() -> None:
    reader, header = _reader(LuacBuilder(), b"\x01\x02\x00\x00")
    assert read_integer(reader, header) == 0x0201
    assert reader.at_end()


def test_read_integer_big_endian() -> None:
    reader, header = _reader(LuacBuilder(endianness=0), b"\x00\x00\x02\x01")
    assert read_integer(reader, header) == 0x0201


def test_read_integer_eight_bytes_is_exact() -> None:
    value = (1 << 60) + 1
    builder = LuacBuilder(int_size=8)
    reader, header = _reader(builder, builder.integer(value))
    assert read_integer(reader, header) == value


def test_read_integer_max_unsigned_width() -> None:
    builder = LuacBuilder(int_size=8)
    reader, header = _reader(builder, b"\xff" * 8)
    assert read_integer(reader, header) == 2**64 - 1


def test_read_size_uses_size_t_width() -> None:
    builder = LuacBuilder(int_size=4, size_t=8)
    reader, header = _reader(builder, builder.size(7))
    assert read_size(reader, header) == 7
    assert reader.offset == 12 + 8


@pytest.mark.parametrize(
    "bits, expected",
    [
        (0x3FF0000000000000, 1.0),
        (0xC000000000000000, -2.0),
        (0x3FE0000000000000, 0.5),
        (0x0000000000000000, 0.0),
        (0x0000000000000001, 0.0),
        (0x8000000000000000, 0.0),
        (0x7FF0000000000000, math.inf),
        (0x7FF8000000000000, math.inf),
        (0xFFF0000000000000, math.inf),
    ],
)
def test_decode_double_bits(bits: int, expected: float) -> None:
    assert decode_double_bits(bits) == expected


def test_decode_double_bits_matches_native_for_normals() -> None:
    for value in (3.141592653589793, -1e300, 1e-300, 123456.789):
        bits = struct.unpack("<Q", struct.pack("<d", value))[0]
        assert decode_double_bits(bits) == value


def test_read_number_double() -> None:
    builder = LuacBuilder()
    reader, header = _reader(builder, builder.number_bytes(1.0) + builder.number_bytes(-0.25))
    assert read_number(reader, header) == 1.0
    assert read_number(reader, header) == -0.25
    assert reader.at_end()


def test_read_number_simplifications() -> None:
    builder = LuacBuilder()
    payload = struct.pack("<Q", 0x7FF8000000000001) + struct.pack("<Q", 0x000FFFFFFFFFFFFF)
    reader, header = _reader(builder, payload)
    assert read_number(reader, header) == math.inf
    assert read_number(reader, header) == 0.0


def test_read_number_single_precision() -> None:
    builder = LuacBuilder(number=4)
    payload = builder.number_bytes(1.5) + struct.pack("<I", 0x7F800001)
    reader, header = _reader(builder, payload)
    assert read_number(reader, header) == 1.5
    assert read_number(reader, header) == math.inf


def test_read_number_integral() -> None:
    builder = LuacBuilder(number=4, integral=1)
    reader, header = _reader(builder, builder.number_bytes(-42))
    value = read_number(reader, header)
    assert value == -42
    assert isinstance(value, int)


def test_read_number_wide_fallback_uses_low_64_bits() -> None:
    builder = LuacBuilder(number=16)
    payload = struct.pack("<d", 2.5) + b"\x00" * 8
    reader, header = _reader(builder, payload)
    assert read_number(reader, header) == 2.5
    assert reader.at_end()


def test_read_string_truncates_at_nul() -> None:
    builder = LuacBuilder()
    reader, header = _reader(builder, builder.string(b"hello"))
    assert read_string(reader, header) == b"hello"
    assert reader.at_end()


def test_read_string_single_nul_is_empty() -> None:
    builder = LuacBuilder()
    reader, header = _reader(builder, builder.size(1) + b"\x00")
    assert read_string(reader, header) == b""
    assert reader.at_end()


def test_read_string_zero_length_reads_nothing_more() -> None:
    builder = LuacBuilder()
    reader, header = _reader(builder, builder.size(0) + b"\xaa")
    assert read_string(reader, header) == b""
    assert reader.remaining == 1


def test_read_string_embedded_nul_consumes_declared_length() -> None:
    builder = LuacBuilder()
    reader, header = _reader(builder, builder.size(5) + b"ab\x00cd" + b"\x01")
    assert read_string(reader, header) == b"ab"
    assert reader.read_byte() == 1


def test_read_name_decodes_latin1() -> None:
    builder = LuacBuilder()
    reader, header = _reader(builder, builder.string(b"caf\xe9"))
    assert read_name(reader, header) == "café"
