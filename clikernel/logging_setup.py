"""Diagnostic logging for the kernel internals.

This is distinct from :class:`clikernel.ui.Logger`, which prints what the
end user is meant to read: the loggers here trace the kernel lifecycle and
go to stderr (and an optional file) only.
"""

import logging
import os

from .ansi import escape, supports_color

__all__ = [
    "get_logger",
    "init_logger",
    "is_debug",
]

FILE_FORMAT = r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"

LEVEL_STYLES = {
    logging.WARNING: ("yellow", "dim"),
    logging.ERROR: ("red", "dim"),
    logging.CRITICAL: ("red", "bold"),
}

_handlers: list[logging.Handler] = []
_state = {"debug": bool(os.environ.get("CLIKERNEL_DEBUG"))}


def is_debug() -> bool:
    """Return True when verbose kernel tracing is on."""
    return _state["debug"]


class KernelLogFormatter(logging.Formatter):
    """Screen formatter: terse by default, colored by level when the terminal allows it."""

    def __init__(self, debug: bool, colors: bool) -> None:
        super().__init__()
        fmt = r"%(name)s - %(message)s // %(filename)s:%(lineno)d" if debug else r"%(message)s"
        self._default = logging.Formatter(fmt)
        self._by_level = {}
        if colors:
            for level, styles in LEVEL_STYLES.items():
                self._by_level[level] = logging.Formatter(escape(*styles) + fmt + "\x1b[0m")

    def format(self, record: logging.LogRecord) -> str:
        return self._by_level.get(record.levelno, self._default).format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Set up the handlers shared by every logger from :func:`get_logger`.

    Args:
        filename: also write the full trace to this file
        force_debug: turn debug tracing on
    """
    if force_debug:
        _state["debug"] = True

    _handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT))
        _handlers.append(file_handler)
    screen = logging.StreamHandler()
    screen.setFormatter(KernelLogFormatter(is_debug(), supports_color()))
    _handlers.append(screen)


def get_logger(name: str = "clikernel", level: int | None = None) -> logging.Logger:
    """Return a named logger wired to the shared handlers.

    The level defaults to DEBUG in debug mode, WARNING otherwise.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else (logging.DEBUG if is_debug() else logging.WARNING))
    logger.propagate = False
    for handler in _handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger
