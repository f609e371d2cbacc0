"""Command registry - metadata store, alias table and resolution.

Provides a single source of truth for:
- Registered command metadata, keyed by command name
- Aliases (alias -> command name) and namespaces
- Resolving a name to a command class through its loader, with hooks
- "Did you mean" suggestions for unknown command names and namespaces
"""

from __future__ import annotations

import difflib
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .aioops import maybe_await
from .errors import CommandNotFound
from .logging_setup import get_logger
from .models import CommandMetaData, HookPhase

if TYPE_CHECKING:
    from .hooks import HookPipeline
    from .types import CommandClass, LoaderContract

__all__ = ["SIMILARITY_THRESHOLD", "CommandRegistry", "similar"]

SIMILARITY_THRESHOLD = 0.4


def similar(keyword: str, candidates: Iterable[str]) -> list[str]:
    """Return the candidates resembling `keyword`, best match first.

    Args:
        keyword: The string typed by the user
        candidates: Strings to compare with, in priority order for ties

    Returns:
        Candidates whose similarity ratio is above the threshold
    """
    scored = []
    for candidate in dict.fromkeys(candidates):
        ratio = difflib.SequenceMatcher(None, keyword, candidate).ratio()
        if ratio > SIMILARITY_THRESHOLD:
            scored.append((ratio, candidate))
    # sort is stable: ties keep the candidates order
    scored.sort(key=lambda item: item[0], reverse=True)
    return [candidate for _, candidate in scored]


class CommandRegistry:
    """Keeps the registered commands and resolves names to command classes."""

    def __init__(self, hooks: HookPipeline) -> None:
        self.hooks = hooks
        self.log = get_logger("clikernel.registry")
        self._commands: dict[str, tuple[CommandMetaData, LoaderContract]] = {}
        self._aliases: dict[str, str] = {}
        self._namespaces: set[str] = set()

    def __contains__(self, command_name: str) -> bool:
        return command_name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def register(self, metadata: CommandMetaData, loader: LoaderContract) -> None:
        """Store `metadata` along with the loader able to load it.

        A later registration of the same command name replaces the earlier one,
        including its aliases.
        """
        previous = self._commands.get(metadata.command_name)
        if previous is not None:
            self.log.debug("replacing command %s", metadata.command_name)
            for alias in previous[0].aliases:
                if self._aliases.get(alias) == metadata.command_name:
                    del self._aliases[alias]

        self._commands[metadata.command_name] = (metadata, loader)
        for alias in metadata.aliases:
            self._aliases[alias] = metadata.command_name
        if metadata.namespace:
            self._namespaces.add(metadata.namespace)
        self.log.debug("registered command %s", metadata.command_name)

    def add_alias(self, alias: str, command_name: str) -> None:
        """Point `alias` to `command_name`."""
        self._aliases[alias] = command_name

    def get(self, name: str) -> CommandMetaData | None:
        """Return the metadata for a command name or an alias."""
        entry = self._commands.get(self.get_alias_command_name(name) or name)
        return entry[0] if entry else None

    def get_alias_command_name(self, alias: str) -> str | None:
        """Return the command name an alias points to."""
        return self._aliases.get(alias)

    def get_alias_command(self, alias: str) -> CommandMetaData | None:
        """Return the metadata of the command an alias points to."""
        command_name = self._aliases.get(alias)
        if command_name is None:
            return None
        entry = self._commands.get(command_name)
        return entry[0] if entry else None

    def get_command_aliases(self, command_name: str) -> list[str]:
        """Return every alias pointing to `command_name`."""
        return [alias for alias, target in self._aliases.items() if target == command_name]

    @property
    def aliases(self) -> dict[str, str]:
        """Copy of the alias table."""
        return dict(self._aliases)

    @property
    def namespaces(self) -> list[str]:
        """Registered namespaces, sorted."""
        return sorted(self._namespaces)

    def list(self) -> list[CommandMetaData]:
        """Return every command metadata, sorted by command name."""
        return [self._commands[name][0] for name in sorted(self._commands)]

    def list_by_namespace(self, namespace: str | None = None) -> list[CommandMetaData]:
        """Return the commands of a namespace (None for root commands), sorted."""
        return [metadata for metadata in self.list() if metadata.namespace == namespace]

    def suggest(self, keyword: str) -> list[str]:
        """Suggest commands for a mistyped name.

        An exact namespace match suggests every command of that namespace.
        """
        if keyword in self._namespaces:
            return [metadata.command_name for metadata in self.list_by_namespace(keyword)]
        return similar(keyword, [*self._commands, *self._aliases])

    def suggest_namespace(self, keyword: str) -> list[str]:
        """Suggest namespaces for a mistyped namespace."""
        return similar(keyword, self.namespaces)

    async def resolve(self, name: str) -> CommandClass:
        """Resolve a command name (or alias) to its command class.

        Runs the finding, loading and loaded hooks on the way.

        Raises:
            CommandNotFound: unknown name, or the loader returned nothing
        """
        command_name = self._aliases.get(name, name)
        self.log.debug("resolving %s as %s", name, command_name)

        await self.hooks.run(HookPhase.FINDING, command_name)

        entry = self._commands.get(command_name)
        if entry is None:
            raise CommandNotFound(command_name, self.suggest(command_name))
        metadata, loader = entry

        await self.hooks.run(HookPhase.LOADING, metadata)
        command = await maybe_await(loader.get_command(metadata))
        if command is None:
            self.log.warning("loader %r returned no command for %s", loader, command_name)
            raise CommandNotFound(command_name, self.suggest(command_name))

        await self.hooks.run(HookPhase.LOADED, command)
        return command  # type: ignore[no-any-return]
