"""Test configuration ensuring the project source tree is importable."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)
else:
    idx = sys.path.index(root_str)
    if idx != 0:
        sys.path.insert(0, sys.path.pop(idx))

from tests.fixtures.luac_builder import LuacBuilder, sample_program  # noqa: E402


@pytest.fixture
def builder() -> LuacBuilder:
    return LuacBuilder()


@pytest.fixture
def sample_bytecode(builder: LuacBuilder) -> bytes:
    return builder.build(sample_program())


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo handler changes made by the CLI's logging setup."""

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
