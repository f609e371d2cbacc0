"""Terminal styling by name.

Styles are addressed by the names the UI exposes ("red", "bg_red", ...),
so raw mode markers and real escape sequences share one vocabulary.
"""

import os
import re
import sys
from typing import TextIO

__all__ = [
    "STYLE_CODES",
    "escape",
    "paint",
    "strip_ansi",
    "supports_color",
]

RESET = "\x1b[0m"

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

STYLE_CODES: dict[str, str] = {
    "bold": "1",
    "dim": "2",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "cyan": "36",
    "white": "37",
    "bg_red": "41",
}


def supports_color(stream: TextIO | None = None) -> bool:
    """Tell whether escape sequences should be written to `stream` (stderr by default).

    NO_COLOR wins over FORCE_COLOR, which wins over TTY detection.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    stream = sys.stderr if stream is None else stream
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def escape(*styles: str) -> str:
    """Return the opening escape sequence for the given style names.

    Raises:
        KeyError: when a style name is unknown
    """
    if not styles:
        return ""
    return "\x1b[" + ";".join(STYLE_CODES[name] for name in styles) + "m"


def paint(text: str, *styles: str) -> str:
    """Wrap `text` with the given styles, then reset."""
    if not styles:
        return text
    return f"{escape(*styles)}{text}{RESET}"


def strip_ansi(text: str) -> str:
    """Remove escape sequences, leaving what the terminal shows."""
    return _ANSI_PATTERN.sub("", text)
