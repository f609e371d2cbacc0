"""Loader serving commands from an in-memory list."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..models import CommandMetaData

if TYPE_CHECKING:
    from ..types import CommandClass

__all__ = ["ListLoader"]


class ListLoader:
    """Serve the given command classes."""

    def __init__(self, commands: Iterable[CommandClass]) -> None:
        self.commands = list(commands)

    def __repr__(self) -> str:
        return f"<ListLoader {len(self.commands)} command(s)>"

    def get_metadata(self) -> list[CommandMetaData]:
        """Return the serialized spec of every command.

        Raises:
            MissingCommandName: a command spec has no name
        """
        return [command.serialize() for command in self.commands]

    def get_command(self, metadata: CommandMetaData) -> CommandClass | None:
        """Return the command class named like `metadata`, or None."""
        for command in self.commands:
            if command.spec.command_name == metadata.command_name:
                return command
        return None
