"""Utilities."""

import re
from collections.abc import Iterable

__all__ = ["dash_case", "namespace_of", "unique"]

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def dash_case(name: str) -> str:
    """Convert an identifier to its command-line form.

    Eg:
        dash_case("dryRun") == dash_case("dry_run") == "dry-run"
    """
    return _WORD_BOUNDARY.sub("-", name).replace("_", "-").lower()


def namespace_of(command_name: str) -> str | None:
    """Return the part of `command_name` before its first colon.

    A name without colon, or with nothing after the colon, has no namespace.
    """
    namespace, _, name = command_name.partition(":")
    return namespace if name else None


def unique(items: Iterable[str]) -> tuple[str, ...]:
    """Remove duplicates, keeping the first occurrence order."""
    return tuple(dict.fromkeys(items))
