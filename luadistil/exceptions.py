"""Exception hierarchy for the bytecode distiller."""

from __future__ import annotations

from typing import Optional


class DistilError(Exception):
    """Base class for all distiller related errors."""


class FormatError(DistilError):
    """Raised when the byte stream does not follow the Lua 5.1 chunk layout.

    ``offset`` is the absolute position of the cursor when the problem was
    detected, when known.
    """

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.offset = offset


class HeaderError(FormatError):
    """Raised when the global header is malformed."""


class TruncatedDataError(FormatError):
    """Raised when a read runs past the end of the buffer."""


class UnknownConstantError(FormatError):
    """Raised for a constant tag outside nil/boolean/number/string."""

    def __init__(self, tag: int, *, offset: Optional[int] = None) -> None:
        super().__init__(f"Unknown constant type: {tag}", offset=offset)
        self.tag = tag


class NestingError(FormatError):
    """Raised when function prototypes nest deeper than the reader allows."""


class CompileError(DistilError):
    """Raised when Lua source cannot be compiled to bytecode."""


__all__ = [
    "DistilError",
    "FormatError",
    "HeaderError",
    "TruncatedDataError",
    "UnknownConstantError",
    "NestingError",
    "CompileError",
]
