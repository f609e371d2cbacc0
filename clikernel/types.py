"""Contracts between the kernel and its collaborators."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

from .models import CommandMetaData, ParsedInput, ParserOptions

if TYPE_CHECKING:
    from .command import BaseCommand
    from .kernel import Kernel

__all__ = [
    "CommandClass",
    "ExecutorContract",
    "FlagListener",
    "LoaderContract",
    "ParserContract",
    "ParserFactory",
]

CommandClass: TypeAlias = "type[BaseCommand]"

FlagListener: TypeAlias = "Callable[[type[BaseCommand], Kernel, ParsedInput], bool | None | Awaitable[bool | None]]"
""" Called when its flag is present on the main command; return True to stop the kernel """


class LoaderContract(Protocol):
    """A source of command metadata and command classes.

    Both methods may be coroutines.
    """

    def get_metadata(self) -> Sequence[CommandMetaData] | Awaitable[Sequence[CommandMetaData]]:
        """Return the metadata of every command this loader provides."""

    def get_command(self, metadata: CommandMetaData) -> type[BaseCommand] | None | Awaitable[type[BaseCommand] | None]:
        """Return the command class for `metadata`, or None."""


class ExecutorContract(Protocol):
    """Creates command instances and runs them."""

    def create(self, command: type[BaseCommand], parsed: ParsedInput, kernel: Kernel) -> BaseCommand | Awaitable[BaseCommand]:
        """Return a ready-to-run instance of `command`."""

    def run(self, command: BaseCommand, kernel: Kernel) -> Any | Awaitable[Any]:  # noqa: ANN401
        """Run the lifecycle of `command`."""


class ParserContract(Protocol):
    """Turns argv tokens into parsed input."""

    def parse(self, argv: Sequence[str]) -> ParsedInput | Awaitable[ParsedInput]:
        """Parse `argv` (without the command name)."""


ParserFactory: TypeAlias = Callable[[ParserOptions], ParserContract]
