"""Top-level decode of a complete bytecode buffer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from .chunk import Chunk, read_chunk
from .config import DecodeOptions
from .header import Header, read_header
from .reader import ByteReader
from .serialize import chunk_to_dict

LOGGER = logging.getLogger(__name__)

OptionsLike = Union[DecodeOptions, Mapping[str, Any], None]

__all__ = ["Distillation", "distil", "distil_file"]


@dataclass
class Distillation:
    """Result of decoding one bytecode file."""

    header: Header
    tree: Chunk
    options: DecodeOptions = field(default_factory=DecodeOptions)
    consumed: int = 0
    trailing: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return chunk_to_dict(self.tree, self.options)

    def chunk_count(self) -> int:
        return sum(1 for _ in self.tree.walk())


def _coerce_options(options: OptionsLike) -> DecodeOptions:
    if isinstance(options, DecodeOptions):
        return options
    return DecodeOptions.from_mapping(options)


def distil(data: bytes, options: OptionsLike = None) -> Distillation:
    """Decode ``data`` into a :class:`Distillation`.

    Decoding is all-or-nothing: any :class:`~luadistil.exceptions.FormatError`
    propagates and no partial tree is returned.
    """

    opts = _coerce_options(options)
    reader = ByteReader(bytes(data))
    header = read_header(reader)
    tree = read_chunk(reader, header, opts)

    trailing = reader.remaining
    if trailing:
        LOGGER.warning("%d trailing bytes after the main chunk at offset %d", trailing, reader.offset)

    result = Distillation(
        header=header,
        tree=tree,
        options=opts,
        consumed=reader.offset,
        trailing=trailing,
    )
    LOGGER.debug("Decoded %d chunks from %d bytes", result.chunk_count(), reader.offset)
    return result


def distil_file(path: Union[str, Path], options: OptionsLike = None) -> Distillation:
    """Read ``path`` and decode it."""

    bytecode_path = Path(path)
    data = bytecode_path.read_bytes()
    LOGGER.debug("Read %d bytes from %s", len(data), bytecode_path)
    return distil(data, options)
