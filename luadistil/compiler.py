"""Compile Lua 5.1 source to bytecode with the runtime bundled in lupa."""

from __future__ import annotations

import logging
from typing import Union

from .exceptions import CompileError

LOGGER = logging.getLogger(__name__)

__all__ = ["compile_source"]

_DUMP_FUNCTION = b"""
function(source, chunkname)
  local fn, err = loadstring(source, chunkname)
  if not fn then
    return nil, err
  end
  return string.dump(fn), nil
end
"""


def _new_runtime():
    try:
        from lupa import lua51
    except ImportError as exc:
        raise CompileError("Compiling Lua source requires lupa>=2.0 with the lua51 runtime") from exc
    return lua51, lua51.LuaRuntime(encoding=None, unpack_returned_tuples=True)


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def compile_source(source: Union[str, bytes], chunkname: Union[str, bytes] = "=stdin") -> bytes:
    """Return the ``string.dump`` bytecode for ``source``.

    ``chunkname`` follows Lua's conventions: ``@file.lua`` names a file,
    ``=name`` is used verbatim.
    """

    lua51, runtime = _new_runtime()
    try:
        dump = runtime.eval(_DUMP_FUNCTION)
        bytecode, error = dump(_as_bytes(source), _as_bytes(chunkname))
    except lua51.LuaError as exc:
        raise CompileError(str(exc)) from exc
    if bytecode is None:
        message = error.decode("utf-8", errors="replace") if isinstance(error, bytes) else str(error)
        raise CompileError(message)
    LOGGER.debug("Compiled %r to %d bytes of bytecode", chunkname, len(bytecode))
    return bytes(bytecode)
