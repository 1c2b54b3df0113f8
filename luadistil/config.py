"""Decode configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

__all__ = ["DecodeOptions"]

# Keys accepted by the original JSON tooling.
_LEGACY_KEYS = {
    "stripDebugging": "strip_debugging",
    "useInstructionObjects": "use_instruction_objects",
}


@dataclass(frozen=True)
class DecodeOptions:
    """Options controlling the shape of the decoded tree.

    ``strip_debugging`` drops line positions, locals and upvalue names from
    the output; they are still read from the stream.
    ``use_instruction_objects`` emits each instruction as a labelled
    ``{"op", "A", "B", "C"}`` record instead of four flat integers.
    """

    strip_debugging: bool = False
    use_instruction_objects: bool = False

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "DecodeOptions":
        if not mapping:
            return cls()
        known = {item.name for item in fields(cls)}
        values = {}
        for key, value in mapping.items():
            name = _LEGACY_KEYS.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown decode option: {key!r}")
            values[name] = bool(value)
        return cls(**values)
