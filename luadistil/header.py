"""Global header of a Lua 5.1 bytecode file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from .exceptions import HeaderError
from .reader import ByteReader

LOGGER = logging.getLogger(__name__)

LUA_SIGNATURE = b"\x1bLua"
LUA_VERSION_51 = 0x51
HEADER_SIZE = 12

__all__ = [
    "LUA_SIGNATURE",
    "LUA_VERSION_51",
    "HEADER_SIZE",
    "SizeTable",
    "Header",
    "read_header",
]


@dataclass(frozen=True)
class SizeTable:
    """Byte widths declared by the header for the variable-width fields."""

    int: int
    size_t: int
    instruction: int
    number: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "int": self.int,
            "size_t": self.size_t,
            "instruction": self.instruction,
            "number": self.number,
        }


@dataclass(frozen=True)
class Header:
    """Decoded global header.

    The header is immutable once read and governs the width and byte order of
    every later primitive read in the same file.
    """

    signature: bytes
    version: int
    format_version: int
    endianness: int
    sizes: SizeTable
    integral: int

    @property
    def version_string(self) -> str:
        return ".".join(f"{self.version:x}"[:2])

    @property
    def byteorder(self) -> str:
        return "little" if self.endianness == 1 else "big"

    @property
    def integral_numbers(self) -> bool:
        return self.integral != 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "signature": self.signature.decode("latin-1"),
            "version": self.version_string,
            "formatVersion": self.format_version,
            "endianess": self.endianness,
            "sizes": self.sizes.as_dict(),
            "integral": self.integral,
        }


def read_header(reader: ByteReader) -> Header:
    """Read the 12 byte global header and leave ``reader`` at the root chunk.

    The endianness flag is honoured: 1 selects little-endian and 0 selects
    big-endian for every later multi-byte field.  Other values raise
    :class:`HeaderError`.  This goes beyond tools that assume little-endian
    input, which standard ``luac`` output always is.
    """

    start = reader.offset
    signature = reader.read_bytes(4)
    if signature != LUA_SIGNATURE:
        raise HeaderError(f"Not a Lua bytecode file: bad signature {signature!r}", offset=start)

    version = reader.read_byte()
    format_version = reader.read_byte()
    endianness = reader.read_byte()
    if endianness not in (0, 1):
        raise HeaderError(f"Invalid endianness flag {endianness}", offset=reader.offset - 1)

    sizes = SizeTable(
        int=reader.read_byte(),
        size_t=reader.read_byte(),
        instruction=reader.read_byte(),
        number=reader.read_byte(),
    )
    for name, width in sizes.as_dict().items():
        if width == 0:
            raise HeaderError(f"Declared width of {name} is zero", offset=start)
    integral = reader.read_byte()

    header = Header(
        signature=signature,
        version=version,
        format_version=format_version,
        endianness=endianness,
        sizes=sizes,
        integral=integral,
    )
    if version != LUA_VERSION_51:
        LOGGER.warning("Unexpected bytecode version %s, decoding as 5.1", header.version_string)
    LOGGER.debug("Header: %s", header.as_dict())
    return header
