"""Filesystem helpers for emitting distilled output."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = ["write_text", "default_output_path"]

BYTECODE_SUFFIX = ".luac"


def _ensure_directory(path: str) -> str:
    directory = os.path.dirname(path)
    if not directory:
        directory = "."
    os.makedirs(directory, exist_ok=True)
    return directory


def write_text(
    path: str | os.PathLike[str],
    content: str,
    *,
    encoding: str = "utf-8",
) -> None:
    """Write ``content`` to ``path`` atomically.

    The text goes to a temporary file in the target directory which then
    replaces ``path``, so readers never observe a partial file.
    """

    target = os.fspath(path)
    directory = _ensure_directory(target)
    fd, temp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".partial", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, target)
    except Exception:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass
        raise


def default_output_path(source: Path, suffix: str = ".json") -> Path:
    """Derive the output path for ``source``.

    A trailing ``.luac`` is replaced by ``suffix``; any other name simply gets
    ``suffix`` appended (``chunk.out`` -> ``chunk.out.json``).
    """

    if source.suffix == BYTECODE_SUFFIX:
        return source.with_suffix(suffix)
    return source.with_name(source.name + suffix)
