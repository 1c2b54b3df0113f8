from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

from luadistil.chunk import MAX_NESTING
from luadistil.logging_config import colorize_text
from luadistil.main import EXIT_FORMAT_ERROR, EXIT_IO_ERROR, EXIT_OK, main
from luadistil.utils import default_output_path, write_text
from tests.fixtures.luac_builder import LuacBuilder, ProtoSpec

ROOT = Path(__file__).resolve().parent.parent


def test_default_output_path() -> None:
    assert default_output_path(Path("dir/foo.luac")) == Path("dir/foo.json")
    assert default_output_path(Path("foo.out")) == Path("foo.out.json")
    assert default_output_path(Path("foo.luac"), ".txt") == Path("foo.txt")


def test_write_text_replaces_atomically(tmp_path) -> None:
    target = tmp_path / "nested" / "out.json"
    write_text(target, "first")
    write_text(target, "second")
    assert target.read_text(encoding="utf-8") == "second"
    assert [p.name for p in target.parent.iterdir()] == ["out.json"]


def test_cli_writes_json_next_to_input(tmp_path, sample_bytecode: bytes, capsys) -> None:
    source = tmp_path / "sample.luac"
    source.write_bytes(sample_bytecode)

    assert main([str(source)]) == EXIT_OK

    output = tmp_path / "sample.json"
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["sourceName"] == "@sample.lua"
    assert "File written: " + str(output) in capsys.readouterr().out


def test_cli_options(tmp_path, sample_bytecode: bytes) -> None:
    source = tmp_path / "sample.luac"
    source.write_bytes(sample_bytecode)
    output = tmp_path / "custom.json"

    code = main([str(source), "-o", str(output), "--strip-debugging", "--instruction-objects"])

    assert code == EXIT_OK
    data = json.loads(output.read_text(encoding="utf-8"))
    assert "locals" not in data
    assert data["instructions"][0] == {"op": 1, "A": 0, "B": 0, "C": 0}


def test_cli_stdout(tmp_path, sample_bytecode: bytes, capsys) -> None:
    source = tmp_path / "sample.luac"
    source.write_bytes(sample_bytecode)

    assert main([str(source), "--stdout", "--indent", "2"]) == EXIT_OK
    out = capsys.readouterr().out
    assert json.loads(out)["functions"][0]["paramCount"] == 1
    assert not (tmp_path / "sample.json").exists()


def test_cli_listing(tmp_path, sample_bytecode: bytes) -> None:
    source = tmp_path / "sample.luac"
    source.write_bytes(sample_bytecode)

    assert main([str(source), "--listing"]) == EXIT_OK
    assert "main <@sample.lua:0,0>" in (tmp_path / "sample.txt").read_text(encoding="utf-8")


def test_cli_format_error(tmp_path, capsys) -> None:
    source = tmp_path / "bad.luac"
    source.write_bytes(b"\x1bLua\x51\x00\x01\x04\x08\x04\x08\x00\x00")

    assert main([str(source)]) == EXIT_FORMAT_ERROR
    assert "Unable to decode" in capsys.readouterr().out
    assert not (tmp_path / "bad.json").exists()


def test_cli_rejects_runaway_nesting(tmp_path, capsys) -> None:
    spec = ProtoSpec(source=None)
    for _ in range(MAX_NESTING + 1):
        spec = ProtoSpec(source=None, protos=[spec])
    source = tmp_path / "deep.luac"
    source.write_bytes(LuacBuilder().build(spec))

    assert main([str(source)]) == EXIT_FORMAT_ERROR
    assert "Unable to decode" in capsys.readouterr().out
    assert not (tmp_path / "deep.json").exists()


def test_cli_missing_file(tmp_path) -> None:
    assert main([str(tmp_path / "missing.luac")]) == EXIT_IO_ERROR


def test_root_shim_runs(tmp_path, sample_bytecode: bytes) -> None:
    source = tmp_path / "shim.luac"
    source.write_bytes(sample_bytecode)
    proc = subprocess.run(
        [sys.executable, str(ROOT / "main.py"), str(source)],
        cwd=ROOT,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        timeout=60,
    )
    assert proc.returncode == 0, proc.stderr
    assert "File written:" in proc.stdout
    assert json.loads((tmp_path / "shim.json").read_text(encoding="utf-8"))["maxStackSize"] == 2


def test_colorize_text_wraps_in_ansi_codes() -> None:
    assert colorize_text("ok", "green") == "\033[32mok\033[0m"
    assert colorize_text("ok", "unknown") == "\033[0mok\033[0m"
