"""Validation engine: checks parsed input against a command description.

Arguments are checked in declaration order, then unknown flags, then flags in
declaration order. The first problem found is raised. Validation never
mutates the description nor the parsed input.
"""

import math
from collections.abc import Sequence
from typing import Any, Protocol

from .errors import InvalidFlag, MissingArgument, MissingArgumentValue, MissingFlag, MissingFlagValue, UnknownFlag
from .logging_setup import get_logger
from .models import ArgumentSpec, CommandOptions, FlagSpec, ParsedInput

__all__ = ["Describable", "format_unknown_flag", "is_empty", "validate"]

_MISSING = object()


class Describable(Protocol):
    """Anything exposing arguments, flags and options (spec or metadata)."""

    @property
    def args(self) -> Sequence[ArgumentSpec]: ...

    @property
    def flags(self) -> Sequence[FlagSpec]: ...

    @property
    def options(self) -> CommandOptions: ...


def is_empty(value: Any) -> bool:  # noqa: ANN401
    """Return True for blank strings and empty collections."""
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple):
        return not value
    return False


def format_unknown_flag(name: str) -> str:
    """Render an unknown flag the way it was most likely typed."""
    return f"-{name}" if len(name) == 1 else f"--{name}"


def _validate_args(args: Sequence[ArgumentSpec], parsed: ParsedInput) -> None:
    for index, arg in enumerate(args):
        value = parsed.args[index] if index < len(parsed.args) else None
        if value is None:
            if arg.required:
                raise MissingArgument(arg.name)
            continue
        if not arg.allow_empty_value and is_empty(value):
            get_logger("clikernel.validation").debug('disallowing empty value "%s" for arg: "%s"', value, arg.name)
            raise MissingArgumentValue(arg.name)


def _validate_flag(flag: FlagSpec, parsed: ParsedInput) -> None:
    value = parsed.flags.get(flag.flag_name, _MISSING)
    mentioned = value is not _MISSING

    if flag.required and not mentioned:
        raise MissingFlag(flag.flag_name)
    if not mentioned:
        return

    match flag.type:
        case "number":
            if value is None:
                raise MissingFlagValue(flag.flag_name)
            if isinstance(value, float) and math.isnan(value):
                raise InvalidFlag(flag.flag_name, "numeric")
        case "string" | "array":
            if not flag.allow_empty_value and (value is None or is_empty(value)):
                get_logger("clikernel.validation").debug('disallowing empty value "%s" for flag: "%s"', value, flag.name)
                raise MissingFlagValue(flag.flag_name)


def validate(descriptor: Describable, parsed: ParsedInput) -> None:
    """Validate `parsed` against `descriptor`.

    Args:
        descriptor: A command spec or command metadata
        parsed: The parser output

    Raises:
        MissingArgument: a required argument was not supplied
        MissingArgumentValue: an argument was supplied with an empty value
        UnknownFlag: an undeclared flag was used and unknown flags are not allowed
        MissingFlag: a required flag was not mentioned
        MissingFlagValue: a flag was mentioned without a value
        InvalidFlag: a numeric flag received a non numeric value
    """
    _validate_args(descriptor.args, parsed)

    if not descriptor.options.allow_unknown_flags and parsed.unknown_flags:
        raise UnknownFlag(format_unknown_flag(parsed.unknown_flags[0]))

    for flag in descriptor.flags:
        _validate_flag(flag, parsed)
