"""The `help` command: shows the description, usage, arguments and flags of a command."""

from __future__ import annotations

from ..command import BaseCommand
from ..descriptor import CommandSpec
from ..models import ArgumentSpec, CommandMetaData, ExitCode
from ..ui import pad_end, render_error_with_suggestions, visible_length
from .list import format_flag

__all__ = ["HelpCommand", "format_usage"]


def _format_argument(arg: ArgumentSpec) -> str:
    name = f"{arg.argument_name}..." if arg.type == "spread" else arg.argument_name
    return f"<{name}>" if arg.required else f"[{name}]"


def format_usage(command: CommandMetaData, binary: str = "") -> str:
    """Return the usage line of a command.

    Eg:
        acme make:controller [options] <name>
    """
    parts = [binary, command.command_name]
    if command.flags:
        parts.append("[options]")
    parts.extend(_format_argument(arg) for arg in command.args)
    return " ".join(part for part in parts if part)


class HelpCommand(BaseCommand):
    """View help for a given command."""

    spec = CommandSpec("help", description="View help for a given command").define_argument(
        "name",
        type="string",
        description="Command name",
    )

    name: str

    def _table(self, rows: list[tuple[str, str]]) -> str:
        width = max(visible_length(left) for left, _ in rows) + 2
        return "\n".join(f"  {pad_end(left, width)}{description}" for left, description in rows)

    def render(self, command: CommandMetaData) -> None:
        """Print every help section of `command`."""
        binary = str(self.kernel.info.get("binary", ""))

        if command.description:
            self.logger.log("")
            self.logger.log(self.colors.yellow("Description:"))
            self.logger.log(f"  {command.description}")

        self.logger.log("")
        self.logger.log(self.colors.yellow("Usage:"))
        self.logger.log(f"  {format_usage(command, binary)}")

        aliases = self.kernel.get_command_aliases(command.command_name)
        if aliases:
            self.logger.log("")
            self.logger.log(self.colors.yellow("Aliases:"))
            self.logger.log(f"  {', '.join(aliases)}")

        if command.args:
            rows = [(self.colors.green(arg.argument_name), self.colors.dim(arg.description)) for arg in command.args]
            self.logger.log("")
            self.logger.log(self.colors.yellow("Arguments:"))
            self.logger.log(self._table(rows))

        if command.flags:
            rows = [(self.colors.green(format_flag(flag)), self.colors.dim(flag.description)) for flag in command.flags]
            self.logger.log("")
            self.logger.log(self.colors.yellow("Options:"))
            self.logger.log(self._table(rows))

        if command.help:
            self.logger.log("")
            self.logger.log(self.colors.yellow("Help:"))
            for line in command.help.replace("{binary}", binary).splitlines():
                self.logger.log(f"  {line}" if line else "")

    async def run(self) -> None:
        command = self.kernel.get_command(self.name)
        if command is None:
            render_error_with_suggestions(
                self.ui,
                f'Command "{self.name}" is not defined',
                self.kernel.get_command_suggestions(self.name),
            )
            self.exit_code = ExitCode.FAILURE
            return
        self.render(command)
