"""Default argv parser.

Turns raw tokens into a `ParsedInput` following the parser options of a
command (and of the kernel global flags):

- `--name value`, `--name=value`, `-n value` (aliases), `--no-name` for booleans
- grouped short booleans: `-abc`
- `--` stops flag parsing, every remaining token is positional
- undeclared flags are reported in `unknown_flags`, never silently dropped
"""

import re
from collections.abc import Sequence
from typing import Any

from .config import coerce_to_bool
from .models import FlagsParserOptions, ParsedInput, ParserOptions

__all__ = ["Parser"]

_NEGATIVE_NUMBER = re.compile(r"^-\d+(\.\d+)?$")


def _to_number(raw: str) -> int | float:
    """Convert a token to a number, NaN when it isn't one."""
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        return float("nan")


def _is_flag_token(token: str) -> bool:
    return token.startswith("-") and len(token) > 1 and not _NEGATIVE_NUMBER.match(token)


class Parser:
    """Parse argv according to `ParserOptions`."""

    def __init__(self, options: ParserOptions) -> None:
        self.options = options
        flags = options.flags
        self._names: dict[str, str] = {name: name for name in flags.all}
        for flag_name, aliases in flags.alias.items():
            for alias in aliases:
                self._names[alias] = flag_name

    def _type_of(self, flag_name: str) -> str:
        flags: FlagsParserOptions = self.options.flags
        for flag_type in ("boolean", "number", "array", "string"):
            if flag_name in getattr(flags, flag_type):
                return flag_type
        return "string"

    def parse(self, argv: Sequence[str]) -> ParsedInput:
        """Parse the command line tokens (without the command name)."""
        parsed = ParsedInput()
        positionals: list[str] = []
        tokens = list(argv)
        index = 0

        while index < len(tokens):
            token = tokens[index]
            index += 1

            if token == "--":
                positionals.extend(tokens[index:])
                break

            if not _is_flag_token(token):
                positionals.append(token)
                continue

            name, eq, inline = token.lstrip("-").partition("=")
            if not name:
                positionals.append(token)
                continue

            if token.startswith("--"):
                index = self._consume(parsed, name, inline if eq else None, tokens, index)
                continue

            # -abc: every letter but the last one is a boolean switch
            for letter in name[:-1]:
                self._consume(parsed, letter, None, [], 0)
            index = self._consume(parsed, name[-1], inline if eq else None, tokens, index)

        self._apply_coercion(parsed)
        self._apply_defaults(parsed)
        parsed.args = self._parse_arguments(positionals)
        return parsed

    def _consume(self, parsed: ParsedInput, name: str, inline: str | None, tokens: list[str], index: int) -> int:
        """Store the flag `name`, reading its value from `tokens[index]` when needed.

        Returns:
            The index of the next token to read
        """
        flag_name = self._names.get(name)

        if flag_name is None and name.startswith("no-") and inline is None:
            negated = self._names.get(name[3:])
            if negated is not None and self._type_of(negated) == "boolean":
                parsed.flags[negated] = False
                return index

        if flag_name is None:
            if name not in parsed.unknown_flags:
                parsed.unknown_flags.append(name)
            parsed.flags[name] = True if inline is None else inline
            return index

        flag_type = self._type_of(flag_name)
        if flag_type == "boolean":
            parsed.flags[flag_name] = True if inline is None else coerce_to_bool(inline)
            return index

        raw = inline
        if raw is None and index < len(tokens) and not _is_flag_token(tokens[index]):
            raw = tokens[index]
            index += 1

        value: Any
        match flag_type:
            case "number":
                value = None if raw is None else _to_number(raw)
            case "array":
                value = parsed.flags.get(flag_name)
                if not isinstance(value, list):
                    value = []
                if raw is not None:
                    value.append(raw)
            case _:
                value = "" if raw is None else raw
        parsed.flags[flag_name] = value
        return index

    def _apply_coercion(self, parsed: ParsedInput) -> None:
        for flag_name, coerce in self.options.flags.coerce.items():
            if parsed.flags.get(flag_name) is not None:
                parsed.flags[flag_name] = coerce(parsed.flags[flag_name])

    def _apply_defaults(self, parsed: ParsedInput) -> None:
        for flag_name, default in self.options.flags.default.items():
            if flag_name not in parsed.flags:
                parsed.flags[flag_name] = list(default) if isinstance(default, list) else default

    def _parse_arguments(self, positionals: list[str]) -> list[Any]:
        values: list[Any] = []
        for index, option in enumerate(self.options.arguments):
            value: Any
            if option.type == "spread":
                value = positionals[index:]
                if not value:
                    if option.default is None:
                        value = None
                    else:
                        value = list(option.default) if isinstance(option.default, list | tuple) else [option.default]
            else:
                value = positionals[index] if index < len(positionals) else option.default

            if value is not None and option.parse:
                value = option.parse(value)
            values.append(value)
        return values
