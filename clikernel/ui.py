"""UI primitives handed to commands: colors and an output logger.

The UI is presentation only. It supports three modes:

- "normal": writes to stdout / stderr, ANSI colors when the terminal supports them
- "raw": captures output instead of writing it and renders colors as `name(text)`
  markers, which makes output assertions straightforward in tests
- "silent": captures output without colors
"""

from __future__ import annotations

import sys
import traceback
from collections.abc import Sequence
from typing import Literal, TextIO, TypedDict

from .ansi import paint, strip_ansi, supports_color

__all__ = [
    "Colors",
    "LogEntry",
    "Logger",
    "UI",
    "UIMode",
    "pad_end",
    "render_error_with_suggestions",
    "visible_length",
]

UIMode = Literal["normal", "raw", "silent"]

MAX_SUGGESTIONS = 4


class LogEntry(TypedDict):
    """A captured log line."""

    message: str
    stream: Literal["stdout", "stderr"]


class Colors:
    """Color helpers following the UI mode."""

    def __init__(self, mode: UIMode = "normal", enabled: bool | None = None) -> None:
        self.mode = mode
        self.enabled = supports_color(sys.stdout) if enabled is None else enabled

    def paint(self, style: str, text: str) -> str:
        """Apply the named style to `text`."""
        if self.mode == "raw":
            return f"{style}({text})"
        if self.mode == "silent" or not self.enabled:
            return text
        return paint(text, style)

    def red(self, text: str) -> str:
        return self.paint("red", text)

    def green(self, text: str) -> str:
        return self.paint("green", text)

    def yellow(self, text: str) -> str:
        return self.paint("yellow", text)

    def blue(self, text: str) -> str:
        return self.paint("blue", text)

    def cyan(self, text: str) -> str:
        return self.paint("cyan", text)

    def white(self, text: str) -> str:
        return self.paint("white", text)

    def dim(self, text: str) -> str:
        return self.paint("dim", text)

    def bold(self, text: str) -> str:
        return self.paint("bold", text)

    def bg_red(self, text: str) -> str:
        return self.paint("bg_red", text)


class Logger:
    """Writes user facing messages, or captures them outside of "normal" mode."""

    def __init__(self, colors: Colors, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self.colors = colors
        self._stdout = stdout
        self._stderr = stderr
        self._logs: list[LogEntry] = []

    @property
    def capturing(self) -> bool:
        """True when messages are kept in memory instead of being written."""
        return self.colors.mode != "normal"

    def _write(self, message: str, stream: Literal["stdout", "stderr"]) -> None:
        if self.capturing:
            self._logs.append({"message": message, "stream": stream})
            return
        if stream == "stdout":
            print(message, file=self._stdout or sys.stdout)
        else:
            print(message, file=self._stderr or sys.stderr)

    def log(self, message: str) -> None:
        """Write a plain message to stdout."""
        self._write(message, "stdout")

    def log_error(self, message: str) -> None:
        """Write a plain message to stderr."""
        self._write(message, "stderr")

    def info(self, message: str) -> None:
        self.log(f"{self.colors.blue('[ info ]')} {message}")

    def success(self, message: str) -> None:
        self.log(f"{self.colors.green('[ success ]')} {message}")

    def warning(self, message: str) -> None:
        self.log(f"{self.colors.yellow('[ warn ]')} {message}")

    def error(self, message: str) -> None:
        self.log_error(f"{self.colors.red('[ error ]')} {message}")

    def fatal(self, error: BaseException | str) -> None:
        """Report an error which ended a command.

        The traceback is included in "normal" mode only.
        """
        if isinstance(error, BaseException):
            message = getattr(error, "message", None) or str(error) or type(error).__name__
        else:
            message = error
        self.error(message)
        if isinstance(error, BaseException) and not self.capturing:
            details = "".join(traceback.format_exception(error)).rstrip()
            self.log_error(self.colors.dim(details))

    def get_logs(self) -> list[LogEntry]:
        """Return the captured messages."""
        return list(self._logs)

    def flush_logs(self) -> None:
        """Forget the captured messages."""
        self._logs.clear()


class UI:
    """Bundle of the colors and logger collaborators."""

    def __init__(self, mode: UIMode = "normal") -> None:
        self.colors = Colors(mode)
        self.logger = Logger(self.colors)

    @property
    def mode(self) -> UIMode:
        return self.colors.mode

    def switch_mode(self, mode: UIMode) -> None:
        """Switch between "normal", "raw" and "silent" rendering."""
        self.colors.mode = mode


def visible_length(text: str) -> int:
    """Length of `text` once ANSI escapes are removed."""
    return len(strip_ansi(text))


def pad_end(text: str, width: int) -> str:
    """Pad `text` with spaces up to `width` visible characters."""
    return text + " " * max(width - visible_length(text), 0)


def render_error_with_suggestions(ui: UI, message: str, suggestions: Sequence[str] | str) -> None:
    """Print an error, followed by a "Did you mean?" line when there are suggestions."""
    suggestions = [suggestions] if isinstance(suggestions, str) else list(suggestions)
    ui.logger.log_error(ui.colors.red(message))
    if suggestions:
        ui.logger.log_error(f"{ui.colors.red('Did you mean?')} {', '.join(suggestions[:MAX_SUGGESTIONS])}")
