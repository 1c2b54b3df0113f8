"""Command line interface converting Lua 5.1 bytecode to JSON."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .compiler import compile_source
from .config import DecodeOptions
from .distiller import Distillation, distil
from .exceptions import DistilError
from .logging_config import configure_logging
from .serialize import dumps, format_listing
from .utils import default_output_path, write_text

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FORMAT_ERROR = 1
EXIT_IO_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="luadistil",
        description="Decode a compiled Lua 5.1 chunk into JSON.",
    )
    parser.add_argument("path", type=Path, help="Bytecode file (e.g. script.luac)")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file (default: input name with .luac replaced by .json)",
    )
    parser.add_argument(
        "--strip-debugging",
        action="store_true",
        help="Omit line positions, locals and upvalue names from the output",
    )
    parser.add_argument(
        "--instruction-objects",
        action="store_true",
        help="Emit each instruction as an {op, A, B, C} object",
    )
    parser.add_argument(
        "--listing",
        action="store_true",
        help="Write a textual listing instead of JSON",
    )
    parser.add_argument("--indent", type=int, default=None, help="Pretty-print JSON with this indent")
    parser.add_argument("--stdout", action="store_true", help="Print the result instead of writing a file")
    parser.add_argument(
        "--compile",
        action="store_true",
        help="Treat the input as Lua source and compile it with lupa first",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _render(result: Distillation, args: argparse.Namespace) -> str:
    if args.listing:
        return format_listing(result)
    return dumps(result, indent=args.indent)


def _load(args: argparse.Namespace) -> bytes:
    if args.compile:
        source = args.path.read_bytes()
        return compile_source(source, "@" + args.path.name)
    return args.path.read_bytes()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    options = DecodeOptions(
        strip_debugging=args.strip_debugging,
        use_instruction_objects=args.instruction_objects,
    )

    try:
        data = _load(args)
    except OSError as exc:
        LOGGER.error("Unable to read %s: %s", args.path, exc)
        return EXIT_IO_ERROR
    except DistilError as exc:
        LOGGER.error("Unable to compile %s: %s", args.path, exc)
        return EXIT_FORMAT_ERROR

    try:
        result = distil(data, options)
    except DistilError as exc:
        LOGGER.error("Unable to decode %s: %s", args.path, exc)
        return EXIT_FORMAT_ERROR

    text = _render(result, args)
    if args.stdout:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return EXIT_OK

    output = args.output
    if output is None:
        output = default_output_path(args.path, ".txt" if args.listing else ".json")
    try:
        write_text(output, text)
    except OSError as exc:
        LOGGER.error("Unable to write %s: %s", output, exc)
        return EXIT_IO_ERROR

    LOGGER.info("File written: %s", output)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - CLI wrapper
    raise SystemExit(main())
