"""Lua 5.1 instruction word decoding.

An instruction word packs a 6 bit opcode and an 8 bit ``A`` operand in its
low 14 bits.  The remaining 18 bits are split according to the opcode's
layout:

* ``iABC``  - ``C`` in bits 14..22 and ``B`` in bits 23..31.
* ``iABx``  - an unsigned 18 bit ``Bx`` in bits 14..31.
* ``iAsBx`` - the same 18 bits rebiased by ``MAXARG_sBx`` into a signed offset.

Every opcode is mapped to its layout once in :data:`OPCODE_LAYOUTS`.  Opcodes
outside the Lua 5.1 set are not rejected; they decode with the ``iABC``
layout and are reported as unknown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable, List, Mapping, Tuple

from .config import DecodeOptions

LOGGER = logging.getLogger(__name__)

MAXARG_sBx = (1 << 17) - 1

__all__ = [
    "Opcode",
    "InstructionLayout",
    "FieldConfig",
    "OPCODE_LAYOUTS",
    "MAXARG_sBx",
    "Instruction",
    "layout_for",
    "decode_word",
    "decode_instruction",
    "flatten_instructions",
]


class Opcode(IntEnum):
    MOVE = 0
    LOADK = 1
    LOADBOOL = 2
    LOADNIL = 3
    GETUPVAL = 4
    GETGLOBAL = 5
    GETTABLE = 6
    SETGLOBAL = 7
    SETUPVAL = 8
    SETTABLE = 9
    NEWTABLE = 10
    SELF = 11
    ADD = 12
    SUB = 13
    MUL = 14
    DIV = 15
    MOD = 16
    POW = 17
    UNM = 18
    NOT = 19
    LEN = 20
    CONCAT = 21
    JMP = 22
    EQ = 23
    LT = 24
    LE = 25
    TEST = 26
    TESTSET = 27
    CALL = 28
    TAILCALL = 29
    RETURN = 30
    FORLOOP = 31
    FORPREP = 32
    TFORLOOP = 33
    SETLIST = 34
    CLOSE = 35
    CLOSURE = 36
    VARARG = 37


class InstructionLayout(Enum):
    ABC = "iABC"
    ABX = "iABx"
    ASBX = "iAsBx"


@dataclass(frozen=True)
class FieldConfig:
    """Describe how a single operand field is encoded within a word."""

    shift: int
    width: int

    @property
    def mask(self) -> int:
        return ((1 << self.width) - 1) << self.shift

    def extract(self, word: int) -> int:
        return (word & self.mask) >> self.shift


OPCODE_FIELD = FieldConfig(shift=0, width=6)
A_FIELD = FieldConfig(shift=6, width=8)
C_FIELD = FieldConfig(shift=14, width=9)
B_FIELD = FieldConfig(shift=23, width=9)
BX_FIELD = FieldConfig(shift=14, width=18)


_ABX_OPCODES = (Opcode.LOADK, Opcode.GETGLOBAL, Opcode.SETGLOBAL, Opcode.CLOSURE)
_ASBX_OPCODES = (Opcode.JMP, Opcode.FORLOOP, Opcode.FORPREP)

OPCODE_LAYOUTS: Mapping[int, InstructionLayout] = {
    int(op): (
        InstructionLayout.ABX
        if op in _ABX_OPCODES
        else InstructionLayout.ASBX
        if op in _ASBX_OPCODES
        else InstructionLayout.ABC
    )
    for op in Opcode
}


def layout_for(opcode: int) -> Tuple[InstructionLayout, bool]:
    """Return ``(layout, known)`` for ``opcode``.

    Unknown opcodes use the ``iABC`` layout with ``known`` set to ``False``.
    """

    layout = OPCODE_LAYOUTS.get(opcode)
    if layout is None:
        return InstructionLayout.ABC, False
    return layout, True


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction in normalised ``(opcode, A, B, C)`` form.

    ``b`` carries ``B``, ``Bx`` or the signed ``sBx`` depending on
    ``layout``; ``c`` is zero for the two wide layouts.
    """

    opcode: int
    a: int
    b: int
    c: int
    layout: InstructionLayout
    raw: int = 0

    @property
    def known(self) -> bool:
        return self.opcode in OPCODE_LAYOUTS

    @property
    def name(self) -> str:
        if self.known:
            return Opcode(self.opcode).name
        return f"UNKNOWN_{self.opcode}"

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.opcode, self.a, self.b, self.c

    def as_list(self) -> List[int]:
        return list(self.as_tuple())

    def as_objects(self) -> List[Dict[str, int]]:
        """Return the legacy single-element object form."""

        return [{"op": self.opcode, "A": self.a, "B": self.b, "C": self.c}]


def decode_word(word: int) -> Instruction:
    """Split a 32 bit instruction ``word`` into its operands."""

    opcode = OPCODE_FIELD.extract(word)
    a = A_FIELD.extract(word)
    layout, known = layout_for(opcode)
    if not known:
        LOGGER.debug("Unknown opcode %d, decoding with iABC layout", opcode)

    if layout is InstructionLayout.ABX:
        b, c = BX_FIELD.extract(word), 0
    elif layout is InstructionLayout.ASBX:
        b, c = BX_FIELD.extract(word) - MAXARG_sBx, 0
    else:
        b, c = B_FIELD.extract(word), C_FIELD.extract(word)
    return Instruction(opcode=opcode, a=a, b=b, c=c, layout=layout, raw=word)


def decode_instruction(raw: bytes, byteorder: str = "little") -> Instruction:
    """Decode one raw instruction of the header's declared width."""

    return decode_word(int.from_bytes(raw, byteorder, signed=False))


def flatten_instructions(
    instructions: Iterable[Instruction], options: DecodeOptions
) -> List[Any]:
    """Concatenate instruction records into one output sequence."""

    result: List[Any] = []
    for instruction in instructions:
        if options.use_instruction_objects:
            result.extend(instruction.as_objects())
        else:
            result.extend(instruction.as_list())
    return result
