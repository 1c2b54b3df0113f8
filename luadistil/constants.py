"""Constant pool entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from .exceptions import UnknownConstantError
from .header import Header
from .primitives import read_number, read_string
from .reader import ByteReader

ConstantValue = Union[None, bool, int, float, bytes]

__all__ = ["ConstantType", "Constant", "read_constant"]


class ConstantType(IntEnum):
    NIL = 0
    BOOLEAN = 1
    NUMBER = 3
    STRING = 4


@dataclass(frozen=True)
class Constant:
    """One tagged constant: nil, boolean, number or string."""

    type: ConstantType
    value: ConstantValue = None

    def __str__(self) -> str:
        if self.type is ConstantType.NIL:
            return "nil"
        if self.type is ConstantType.BOOLEAN:
            return "true" if self.value else "false"
        if self.type is ConstantType.STRING:
            return '"' + self.value.decode("latin-1") + '"'
        return f"{self.value:.14g}"


def read_constant(reader: ByteReader, header: Header) -> Constant:
    """Read a tag byte and the value it announces."""

    offset = reader.offset
    tag = reader.read_byte()
    if tag == ConstantType.NIL:
        return Constant(ConstantType.NIL)
    if tag == ConstantType.BOOLEAN:
        return Constant(ConstantType.BOOLEAN, reader.read_byte() != 0)
    if tag == ConstantType.NUMBER:
        return Constant(ConstantType.NUMBER, read_number(reader, header))
    if tag == ConstantType.STRING:
        return Constant(ConstantType.STRING, read_string(reader, header))
    raise UnknownConstantError(tag, offset=offset)
