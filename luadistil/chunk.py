"""Function prototype (chunk) reader.

A chunk is read in a fixed field order: header fields, instructions,
constants, nested prototypes, then the three debug lists.  Nested prototypes
are read recursively, so the decoded chunks form a tree mirroring the
function nesting of the original source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TypeVar

from .config import DecodeOptions
from .constants import Constant, read_constant
from .exceptions import NestingError
from .header import Header
from .instructions import Instruction, decode_instruction
from .primitives import read_integer, read_name
from .reader import ByteReader

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

# Deepest prototype nesting accepted before the file is rejected.
MAX_NESTING = 200

__all__ = ["MAX_NESTING", "Local", "Chunk", "read_chunk", "read_list"]


@dataclass(frozen=True)
class Local:
    """Local variable name and its live program-counter range."""

    name: str
    startpc: int
    endpc: int


@dataclass
class Chunk:
    """One decoded function prototype.

    ``line_positions``, ``locals`` and ``upvalues`` are ``None`` when the
    chunk was read with debug information stripped.
    """

    source_name: str
    line_defined: int
    last_line_defined: int
    upvalue_count: int
    param_count: int
    is_vararg: int
    max_stack_size: int
    instructions: List[Instruction]
    constants: List[Constant]
    functions: List["Chunk"]
    line_positions: Optional[List[int]] = None
    locals: Optional[List[Local]] = None
    upvalues: Optional[List[str]] = None

    @property
    def stripped(self) -> bool:
        return self.line_positions is None

    def walk(self):
        """Yield this chunk and every nested chunk depth first."""

        yield self
        for child in self.functions:
            yield from child.walk()


def read_list(
    reader: ByteReader,
    header: Header,
    read_item: Callable[..., T],
    *args: Any,
) -> List[T]:
    """Read an ``int`` count followed by exactly that many items.

    Each item is read with ``read_item(reader, header, *args)``.
    """

    count = read_integer(reader, header)
    return [read_item(reader, header, *args) for _ in range(count)]


def _read_instruction(reader: ByteReader, header: Header) -> Instruction:
    return decode_instruction(reader.read_bytes(header.sizes.instruction), header.byteorder)


def _read_local(reader: ByteReader, header: Header) -> Local:
    return Local(
        name=read_name(reader, header),
        startpc=read_integer(reader, header),
        endpc=read_integer(reader, header),
    )


def read_chunk(
    reader: ByteReader,
    header: Header,
    options: DecodeOptions = DecodeOptions(),
    depth: int = 0,
) -> Chunk:
    """Read one function prototype and all of its nested prototypes.

    Nesting deeper than :data:`MAX_NESTING` raises :class:`NestingError`.
    """

    start = reader.offset
    if depth > MAX_NESTING:
        raise NestingError(f"Function nesting exceeds {MAX_NESTING} levels", offset=start)

    source_name = read_name(reader, header)
    line_defined = read_integer(reader, header)
    last_line_defined = read_integer(reader, header)
    upvalue_count = reader.read_byte()
    param_count = reader.read_byte()
    is_vararg = reader.read_byte()
    max_stack_size = reader.read_byte()

    instructions = read_list(reader, header, _read_instruction)
    constants = read_list(reader, header, read_constant)
    functions = read_list(reader, header, read_chunk, options, depth + 1)

    line_positions = read_list(reader, header, read_integer)
    locals_ = read_list(reader, header, _read_local)
    upvalues = read_list(reader, header, read_name)

    LOGGER.debug(
        "Chunk %r (depth %d) at %d..%d: %d instructions, %d constants, %d functions",
        source_name,
        depth,
        start,
        reader.offset,
        len(instructions),
        len(constants),
        len(functions),
    )

    chunk = Chunk(
        source_name=source_name,
        line_defined=line_defined,
        last_line_defined=last_line_defined,
        upvalue_count=upvalue_count,
        param_count=param_count,
        is_vararg=is_vararg,
        max_stack_size=max_stack_size,
        instructions=instructions,
        constants=constants,
        functions=functions,
    )
    if not options.strip_debugging:
        chunk.line_positions = line_positions
        chunk.locals = locals_
        chunk.upvalues = upvalues
    return chunk
