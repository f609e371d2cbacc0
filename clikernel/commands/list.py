"""The `list` command: shows global flags and registered commands, grouped by namespace.

It is the default command of the kernel, run when no command name is given.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from ..command import BaseCommand
from ..descriptor import CommandSpec
from ..models import CommandMetaData, CommandOptions, ExitCode, FlagSpec
from ..ui import pad_end, render_error_with_suggestions, visible_length

__all__ = ["ListCommand", "format_flag"]

# (heading, [(left column, description)])
Section = tuple[str, list[tuple[str, str]]]


def format_flag(flag: FlagSpec) -> str:
    """Return `--name`, prefixed by its aliases (eg: `-h, --help`)."""
    names = [f"-{alias}" if len(alias) == 1 else f"--{alias}" for alias in flag.alias]
    names.append(f"--{flag.flag_name}")
    return ", ".join(names)


class ListCommand(BaseCommand):
    """View list of available commands."""

    spec = (
        CommandSpec(
            "list",
            description="View list of available commands",
            help=[
                "The list command displays a list of all the commands:",
                "  {binary} list",
                "",
                "You can also display the commands for a specific namespace:",
                "  {binary} list <namespace...>",
            ],
            options=CommandOptions(allow_unknown_flags=True),
        )
        .define_argument(
            "namespaces",
            type="spread",
            required=False,
            description="Filter list by namespace",
        )
        .define_flag("json", type="boolean", description="Get list of commands as JSON")
    )

    namespaces: list[str] | None
    json: bool | None

    def _command_row(self, command: CommandMetaData) -> tuple[str, str]:
        name = self.colors.green(command.command_name)
        aliases = self.kernel.get_command_aliases(command.command_name)
        if aliases:
            name = f"{name} {self.colors.dim('(' + ', '.join(aliases) + ')')}"
        return name, self.colors.dim(command.description)

    def _sections(self, namespaces: Sequence[str]) -> list[Section]:
        sections: list[Section] = []

        if not namespaces:
            flags = self.kernel.flags
            if flags:
                rows = [(self.colors.green(format_flag(flag)), self.colors.dim(flag.description)) for flag in flags]
                sections.append((self.colors.yellow("Options:"), rows))

            root_commands = self.kernel.get_namespace_commands()
            if root_commands:
                sections.append((self.colors.yellow("Available commands:"), [self._command_row(cmd) for cmd in root_commands]))

            namespaces = self.kernel.get_namespaces()

        for namespace in namespaces:
            rows = [self._command_row(cmd) for cmd in self.kernel.get_namespace_commands(namespace)]
            sections.append((self.colors.yellow(namespace), rows))
        return sections

    def render_list(self, namespaces: Sequence[str]) -> None:
        """Print the sections, with the description column aligned across all of them."""
        sections = self._sections(namespaces)
        width = max((visible_length(left) for _, rows in sections for left, _ in rows), default=0) + 2

        for heading, rows in sections:
            self.logger.log("")
            self.logger.log(heading)
            self.logger.log("\n".join(f"  {pad_end(left, width)}{description}" for left, description in rows))

    def render_json(self, namespaces: Sequence[str]) -> None:
        """Print the commands metadata as JSON."""
        if namespaces:
            commands = [cmd for namespace in namespaces for cmd in self.kernel.get_namespace_commands(namespace)]
        else:
            commands = self.kernel.get_commands()
        self.logger.log(json.dumps([cmd.to_dict() for cmd in commands], indent=2))

    async def run(self) -> None:
        namespaces = list(self.namespaces or [])
        known = set(self.kernel.get_namespaces())
        for namespace in namespaces:
            if namespace not in known:
                render_error_with_suggestions(
                    self.ui,
                    f'Namespace "{namespace}" is not defined',
                    self.kernel.get_namespace_suggestions(namespace),
                )
                self.exit_code = ExitCode.FAILURE
                return

        if self.json:
            self.render_json(namespaces)
        else:
            self.render_list(namespaces)
