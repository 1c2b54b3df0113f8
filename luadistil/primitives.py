"""Variable-width primitive readers.

Every reader takes the :class:`~luadistil.reader.ByteReader` and the decoded
:class:`~luadistil.header.Header` explicitly; the header's size table decides
how many bytes each read consumes.

Integers are composed with :meth:`int.from_bytes`, which is exact for any
declared width, so an 8-byte ``int`` or ``size_t`` never loses precision.
Numbers use native IEEE-754 reinterpretation for 4 and 8 byte widths and a
bit-level decode over the low 64 bits for any other width.  In all floating
cases a zero exponent field decodes to ``0.0`` and an all-ones exponent field
to ``math.inf``; subnormals, NaN and signed zero/infinity are not preserved.
"""

from __future__ import annotations

import math
import struct
from typing import Union

from .header import Header
from .reader import ByteReader

Number = Union[int, float]

_MASK_64 = (1 << 64) - 1
_FRACTION_BITS = 52
_EXPONENT_BIAS = 1023

# width -> (struct code, fraction bits, all-ones exponent)
_NATIVE_FLOATS = {
    8: ("d", 52, 0x7FF),
    4: ("f", 23, 0xFF),
}

__all__ = [
    "read_unsigned",
    "read_integer",
    "read_size",
    "read_number",
    "decode_double_bits",
    "read_string",
    "read_name",
]


def read_unsigned(reader: ByteReader, width: int, byteorder: str = "little") -> int:
    """Return an unsigned integer spanning ``width`` bytes."""

    return int.from_bytes(reader.read_bytes(width), byteorder, signed=False)


def read_integer(reader: ByteReader, header: Header) -> int:
    """Read an ``int`` field (list counts, line numbers, pc bounds)."""

    return read_unsigned(reader, header.sizes.int, header.byteorder)


def read_size(reader: ByteReader, header: Header) -> int:
    """Read a ``size_t`` field (string lengths)."""

    return read_unsigned(reader, header.sizes.size_t, header.byteorder)


def decode_double_bits(bits: int) -> float:
    """Decode a 64-bit IEEE-754 double pattern with the simplified rules.

    >>> decode_double_bits(0x3FF0000000000000)
    1.0
    """

    sign = (bits >> 63) & 0x1
    exponent = (bits >> _FRACTION_BITS) & 0x7FF
    fraction = bits & ((1 << _FRACTION_BITS) - 1)

    if exponent == 0:
        return 0.0
    if exponent == 0x7FF:
        return math.inf

    mantissa = fraction / (1 << _FRACTION_BITS)
    value = math.ldexp(1.0 + mantissa, exponent - _EXPONENT_BIAS)
    return -value if sign else value


def read_number(reader: ByteReader, header: Header) -> Number:
    """Read a Lua number of ``sizes.number`` bytes."""

    width = header.sizes.number
    raw = reader.read_bytes(width)
    if header.integral_numbers:
        return int.from_bytes(raw, header.byteorder, signed=True)

    native = _NATIVE_FLOATS.get(width)
    if native is None:
        bits = int.from_bytes(raw, header.byteorder, signed=False) & _MASK_64
        return decode_double_bits(bits)

    code, fraction_bits, exponent_max = native
    bits = int.from_bytes(raw, header.byteorder, signed=False)
    exponent = (bits >> fraction_bits) & exponent_max
    if exponent == 0:
        return 0.0
    if exponent == exponent_max:
        return math.inf
    prefix = "<" if header.byteorder == "little" else ">"
    return struct.unpack(prefix + code, raw)[0]


def read_string(reader: ByteReader, header: Header) -> bytes:
    """Read a length-prefixed string and truncate it at the first NUL.

    The declared length counts the trailing NUL.  A zero length denotes an
    absent string and consumes nothing past the length prefix.
    """

    length = read_size(reader, header)
    if not length:
        return b""
    data = reader.read_bytes(length)
    nul = data.find(b"\x00")
    if nul >= 0:
        data = data[:nul]
    return data


def read_name(reader: ByteReader, header: Header) -> str:
    """Read a string field used as an identifier (source, local, upvalue)."""

    return read_string(reader, header).decode("latin-1")
