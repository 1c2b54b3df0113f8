"""Decode compiled Lua 5.1 bytecode into a structured tree and JSON."""

from __future__ import annotations

from .chunk import Chunk, Local
from .config import DecodeOptions
from .constants import Constant, ConstantType
from .distiller import Distillation, distil, distil_file
from .exceptions import (
    CompileError,
    DistilError,
    FormatError,
    HeaderError,
    TruncatedDataError,
    UnknownConstantError,
)
from .header import Header, SizeTable
from .instructions import Instruction, InstructionLayout, Opcode

__version__ = "1.0.0"

__all__ = [
    "Chunk",
    "Local",
    "DecodeOptions",
    "Constant",
    "ConstantType",
    "Distillation",
    "distil",
    "distil_file",
    "CompileError",
    "DistilError",
    "FormatError",
    "HeaderError",
    "TruncatedDataError",
    "UnknownConstantError",
    "Header",
    "SizeTable",
    "Instruction",
    "InstructionLayout",
    "Opcode",
]
