"""Logging helpers for the command line."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

__all__ = ["configure_logging", "colorize_text"]

_COLOR_CODES = {
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "magenta": "35",
}


def colorize_text(text: str, color: str) -> str:
    """Return *text* wrapped in ANSI color codes."""
    code = _COLOR_CODES.get(color, "0")
    return f"\033[{code}m{text}\033[0m"


class _ColourFormatter(logging.Formatter):
    COLOURS = {
        logging.DEBUG: "blue",
        logging.INFO: "green",
        logging.WARNING: "yellow",
        logging.ERROR: "red",
        logging.CRITICAL: "magenta",
    }

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - trivial wrapper
        message = super().format(record)
        colour = self.COLOURS.get(record.levelno, "green")
        return colorize_text(message, colour)


def configure_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> None:
    """Configure root logging handlers.

    Messages go to ``stream`` (stdout by default).  Colour is only used when
    the stream is a terminal.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    level = logging.DEBUG if verbose else logging.INFO
    root.setLevel(level)

    target = stream if stream is not None else sys.stdout
    handler = logging.StreamHandler(target)
    fmt = "%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s"
    isatty = getattr(target, "isatty", None)
    if callable(isatty) and isatty():
        handler.setFormatter(_ColourFormatter(fmt))
    else:
        handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
