"""Render decoded chunk trees as JSON data or a textual listing."""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .chunk import Chunk
from .config import DecodeOptions
from .constants import Constant, ConstantType
from .instructions import Instruction, InstructionLayout, Opcode, flatten_instructions

if TYPE_CHECKING:
    from .distiller import Distillation

__all__ = [
    "constant_to_json",
    "chunk_to_dict",
    "dumps",
    "format_instruction",
    "format_chunk",
    "format_listing",
]

_CONSTANT_OPERAND_OPCODES = (Opcode.LOADK, Opcode.GETGLOBAL, Opcode.SETGLOBAL)


def _json_number(value: Any) -> Any:
    # JSON.stringify semantics: integral floats print as integers, non-finite
    # values become null. Integral floats of 1e21 and above stay floats, as
    # JavaScript prints those in exponent form.
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
    return value


def constant_to_json(constant: Constant) -> Any:
    if constant.type is ConstantType.NIL:
        return None
    if constant.type is ConstantType.STRING:
        return constant.value.decode("latin-1")
    if constant.type is ConstantType.NUMBER:
        return _json_number(constant.value)
    return constant.value


def chunk_to_dict(chunk: Chunk, options: DecodeOptions = DecodeOptions()) -> Dict[str, Any]:
    """Return the JSON-ready mapping for ``chunk`` and its nested functions."""

    data: Dict[str, Any] = {
        "sourceName": chunk.source_name,
        "lineDefined": chunk.line_defined,
        "lastLineDefined": chunk.last_line_defined,
        "upvalueCount": chunk.upvalue_count,
        "paramCount": chunk.param_count,
        "is_vararg": chunk.is_vararg,
        "maxStackSize": chunk.max_stack_size,
        "instructions": flatten_instructions(chunk.instructions, options),
        "constants": [constant_to_json(constant) for constant in chunk.constants],
        "functions": [chunk_to_dict(child, options) for child in chunk.functions],
    }
    if chunk.line_positions is not None:
        data["linePositions"] = list(chunk.line_positions)
    if chunk.locals is not None:
        data["locals"] = [
            {"varname": local.name, "startpc": local.startpc, "endpc": local.endpc}
            for local in chunk.locals
        ]
    if chunk.upvalues is not None:
        data["upvalues"] = list(chunk.upvalues)
    return data


def dumps(distillation: "Distillation", *, indent: Optional[int] = None) -> str:
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        distillation.as_dict(),
        indent=indent,
        separators=separators,
        ensure_ascii=True,
        allow_nan=False,
    )


def _operands(instruction: Instruction) -> str:
    if instruction.layout is InstructionLayout.ABC:
        return f"{instruction.a} {instruction.b} {instruction.c}"
    return f"{instruction.a} {instruction.b}"


def format_instruction(instruction: Instruction, pc: int, chunk: Chunk) -> str:
    """Format one instruction as ``pc [line] NAME operands ; comment``."""

    line = "-"
    if chunk.line_positions and pc < len(chunk.line_positions):
        line = str(chunk.line_positions[pc])

    comment = ""
    if instruction.layout is InstructionLayout.ASBX:
        comment = f"to {pc + instruction.b + 2}"
    elif instruction.opcode in _CONSTANT_OPERAND_OPCODES and instruction.b < len(chunk.constants):
        comment = str(chunk.constants[instruction.b])

    text = f"\t{pc + 1}\t[{line}]\t{instruction.name:<10}\t{_operands(instruction)}"
    if comment:
        text += f"\t; {comment}"
    return text


def format_chunk(chunk: Chunk, *, main: bool = False) -> List[str]:
    """Return listing lines for ``chunk`` followed by its nested functions."""

    kind = "main" if main else "function"
    source = chunk.source_name or "?"
    vararg = "+" if chunk.is_vararg else ""
    lines = [
        f"{kind} <{source}:{chunk.line_defined},{chunk.last_line_defined}> "
        f"({len(chunk.instructions)} instructions)",
        f"{chunk.param_count}{vararg} params, {chunk.max_stack_size} slots, "
        f"{chunk.upvalue_count} upvalues, {len(chunk.constants)} constants, "
        f"{len(chunk.functions)} functions",
    ]
    lines.extend(format_instruction(code, pc, chunk) for pc, code in enumerate(chunk.instructions))

    lines.append(f"constants ({len(chunk.constants)}):")
    lines.extend(f"\t{index + 1}\t{constant}" for index, constant in enumerate(chunk.constants))
    if chunk.locals is not None:
        lines.append(f"locals ({len(chunk.locals)}):")
        lines.extend(
            f"\t{index}\t{local.name}\t{local.startpc + 1}\t{local.endpc + 1}"
            for index, local in enumerate(chunk.locals)
        )
    if chunk.upvalues is not None:
        lines.append(f"upvalues ({len(chunk.upvalues)}):")
        lines.extend(f"\t{index}\t{name}" for index, name in enumerate(chunk.upvalues))

    for child in chunk.functions:
        lines.append("")
        lines.extend(format_chunk(child))
    return lines


def format_listing(distillation: "Distillation") -> str:
    header = distillation.header
    sizes = header.sizes
    lines = [
        f"; Lua {header.version_string} bytecode, {header.byteorder} endian, "
        f"int={sizes.int} size_t={sizes.size_t} instruction={sizes.instruction} "
        f"number={sizes.number}{' (integral)' if header.integral_numbers else ''}",
        "",
    ]
    lines.extend(format_chunk(distillation.tree, main=True))
    return "\n".join(lines) + "\n"
