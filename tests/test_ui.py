"""Tests for the UI primitives, the ANSI helpers and the logging setup."""

import io
import logging
import os
from unittest.mock import patch

import pytest

from clikernel.ansi import escape, paint, strip_ansi, supports_color
from clikernel.logging_setup import KernelLogFormatter, get_logger
from clikernel.ui import UI, Colors, Logger, pad_end, render_error_with_suggestions, visible_length


def test_paint():
    assert paint("hello", "red") == "\x1b[31mhello\x1b[0m"
    assert paint("hello", "red", "bold") == "\x1b[31;1mhello\x1b[0m"
    assert paint("hello") == "hello"


def test_escape():
    assert escape() == ""
    assert escape("bg_red", "white") == "\x1b[41;37m"
    with pytest.raises(KeyError):
        escape("purple")


def test_supports_color():
    with patch.dict(os.environ, {"NO_COLOR": "1"}, clear=False):
        assert supports_color() is False
    with patch.dict(os.environ, {"FORCE_COLOR": "1"}, clear=False):
        os.environ.pop("NO_COLOR", None)
        assert supports_color(io.StringIO()) is True


def test_strip_ansi():
    assert strip_ansi(paint("hello", "red")) == "hello"
    assert visible_length(paint("hello", "red")) == 5
    assert pad_end(paint("ab", "red"), 4).endswith("  ")


def test_log_formatter():
    record = logging.LogRecord("clikernel", logging.ERROR, __file__, 1, "boom", None, None)
    assert KernelLogFormatter(debug=False, colors=False).format(record) == "boom"
    assert KernelLogFormatter(debug=False, colors=True).format(record) == "\x1b[31;2mboom\x1b[0m"
    assert KernelLogFormatter(debug=True, colors=False).format(record).startswith("clikernel - boom // ")


def test_raw_colors():
    colors = Colors("raw")
    assert colors.red("x") == "red(x)"
    assert colors.bg_red(colors.white("x")) == "bg_red(white(x))"


def test_normal_colors():
    assert Colors("normal", enabled=True).green("x") == "\x1b[32mx\x1b[0m"
    assert Colors("normal", enabled=False).green("x") == "x"
    assert Colors("silent", enabled=True).green("x") == "x"


def test_logger_writes_in_normal_mode():
    stdout, stderr = io.StringIO(), io.StringIO()
    logger = Logger(Colors("normal", enabled=False), stdout=stdout, stderr=stderr)
    logger.log("hello")
    logger.error("failed")
    assert stdout.getvalue() == "hello\n"
    assert stderr.getvalue() == "[ error ] failed\n"
    assert logger.get_logs() == []


def test_logger_fatal_includes_traceback_in_normal_mode():
    stderr = io.StringIO()
    logger = Logger(Colors("normal", enabled=False), stderr=stderr)
    try:
        raise ValueError("bad value")
    except ValueError as e:
        logger.fatal(e)
    output = stderr.getvalue()
    assert output.startswith("[ error ] bad value\n")
    assert "Traceback" in output


def test_logger_captures_in_raw_mode():
    ui = UI("raw")
    ui.logger.info("a")
    ui.logger.success("b")
    ui.logger.warning("c")
    ui.logger.fatal("d")
    assert ui.logger.get_logs() == [
        {"message": "blue([ info ]) a", "stream": "stdout"},
        {"message": "green([ success ]) b", "stream": "stdout"},
        {"message": "yellow([ warn ]) c", "stream": "stdout"},
        {"message": "red([ error ]) d", "stream": "stderr"},
    ]
    ui.logger.flush_logs()
    assert ui.logger.get_logs() == []


def test_switch_mode():
    ui = UI("normal")
    ui.switch_mode("raw")
    assert ui.mode == "raw"
    assert ui.colors.yellow("x") == "yellow(x)"
    assert ui.logger.capturing is True


def test_render_error_with_suggestions():
    ui = UI("raw")
    render_error_with_suggestions(ui, "oops", ["a", "b", "c", "d", "e"])
    render_error_with_suggestions(ui, "no hint", [])
    assert ui.logger.get_logs() == [
        {"message": "red(oops)", "stream": "stderr"},
        {"message": "red(Did you mean?) a, b, c, d", "stream": "stderr"},
        {"message": "red(no hint)", "stream": "stderr"},
    ]


def test_get_logger():
    logger = get_logger("clikernel.tests.ui")
    assert logger.propagate is False
    assert logger.level == logging.DEBUG
    assert get_logger("clikernel.tests.ui", logging.ERROR).level == logging.ERROR
