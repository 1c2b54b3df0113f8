from __future__ import annotations

import pytest

from luadistil.config import DecodeOptions


def test_defaults() -> None:
    options = DecodeOptions()
    assert not options.strip_debugging
    assert not options.use_instruction_objects
    assert DecodeOptions.from_mapping(None) == options
    assert DecodeOptions.from_mapping({}) == options


def test_from_mapping_accepts_legacy_keys() -> None:
    options = DecodeOptions.from_mapping({"stripDebugging": True, "useInstructionObjects": 1})
    assert options == DecodeOptions(strip_debugging=True, use_instruction_objects=True)


def test_from_mapping_accepts_field_names() -> None:
    options = DecodeOptions.from_mapping({"strip_debugging": True})
    assert options.strip_debugging
    assert not options.use_instruction_objects


def test_from_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="stripDebug"):
        DecodeOptions.from_mapping({"stripDebug": True})
