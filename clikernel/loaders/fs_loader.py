"""Loader discovering commands from Python modules below a directory.

Every `*.py` file (except `__init__.py`) found recursively below the root must
expose its command class as `Command`. Sub-directories only organize files,
they never change command names:

```
commands/
    serve.py              -> Command.spec.command_name == "serve"
    make/controller.py    -> Command.spec.command_name == "make:controller"
```
"""

from __future__ import annotations

import hashlib
import importlib.util
import os
import re
import sys
from collections.abc import Iterable
from pathlib import PurePath
from types import ModuleType
from typing import TYPE_CHECKING

from ..aioops import walk_files
from ..command import BaseCommand
from ..errors import InvalidCommandExport, MissingCommandExport
from ..logging_setup import get_logger
from ..models import CommandMetaData

if TYPE_CHECKING:
    from ..types import CommandClass

__all__ = ["COMMAND_EXPORT", "FsLoader"]

COMMAND_EXPORT = "Command"

_NON_IDENTIFIER = re.compile(r"\W")


class FsLoader:
    """Discover and import command modules below `root`.

    Args:
        root: Directory to scan
        ignore_paths: Files to skip, relative to `root` (eg: "make/helpers.py")
    """

    def __init__(self, root: str | os.PathLike[str], ignore_paths: Iterable[str] = ()) -> None:
        self.root = os.fspath(root)
        self.ignore_paths = {PurePath(path).as_posix() for path in ignore_paths}
        self.log = get_logger("clikernel.loaders.fs")
        self._commands: dict[str, CommandClass] = {}
        self._package = "clikernel_commands_" + hashlib.sha256(os.path.abspath(self.root).encode()).hexdigest()[:10]

    def __repr__(self) -> str:
        return f"<FsLoader {self.root}>"

    def _is_ignored(self, rel_path: str) -> bool:
        return rel_path in self.ignore_paths or rel_path.removesuffix(".py") in self.ignore_paths

    def _import(self, rel_path: str) -> ModuleType:
        module_name = f"{self._package}." + _NON_IDENTIFIER.sub("_", rel_path.removesuffix(".py"))
        spec = importlib.util.spec_from_file_location(module_name, os.path.join(self.root, rel_path))
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import {rel_path} from {self.root}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[module_name]
            raise
        return module

    async def get_metadata(self) -> list[CommandMetaData]:
        """Import every command module and return their metadata.

        Raises:
            FileNotFoundError: `root` does not exist
            MissingCommandExport: a module has no `Command` attribute
            InvalidCommandExport: `Command` is not a `BaseCommand` subclass
        """
        metadata = []
        async for entry in walk_files(self.root):
            rel_path = PurePath(entry).as_posix()
            if not rel_path.endswith(".py") or PurePath(rel_path).name == "__init__.py":
                continue
            if self._is_ignored(rel_path):
                self.log.debug("ignoring %s", rel_path)
                continue

            module = self._import(rel_path)
            command = getattr(module, COMMAND_EXPORT, None)
            if command is None:
                raise MissingCommandExport(rel_path, COMMAND_EXPORT)
            if not (isinstance(command, type) and issubclass(command, BaseCommand)):
                raise InvalidCommandExport(rel_path, COMMAND_EXPORT)

            self.log.debug("loaded %s from %s", command, rel_path)
            self._commands[rel_path] = command
            metadata.append(command.serialize().with_file_path(rel_path))
        return metadata

    async def get_command(self, metadata: CommandMetaData) -> CommandClass | None:
        """Return the command class discovered at `metadata.file_path`, or None."""
        if metadata.file_path is None:
            return None
        return self._commands.get(metadata.file_path)
