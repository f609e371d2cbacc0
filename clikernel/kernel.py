"""The kernel - registration and execution of commands.

The kernel moves forward through four states:

- idle: configuration is open (global flags, loaders, executor, default command, flag listeners)
- booted: commands metadata was pulled from every loader, configuration is frozen
- running: `handle` took over the process and runs the main command
- terminated: final, create a new kernel to run more commands

Two entry points exist. `exec` runs a command programmatically and lets
errors propagate. `handle` runs the main command of the process, renders
failures and returns the exit code.
"""

from __future__ import annotations

import asyncio
import traceback
from collections.abc import Sequence
from typing import Any

from .aioops import maybe_await
from .command import BaseCommand
from .commands.list import ListCommand
from .descriptor import CommandSpec
from .errors import CommandNotFound, InvalidState, KernelError, KernelTerminated
from .hooks import HookHandler, HookPipeline
from .loaders.list_loader import ListLoader
from .logging_setup import get_logger
from .models import CommandMetaData, CommandOptions, ExitCode, FlagSpec, HookPhase, KernelState, ParsedInput, ParserOptions
from .parser import Parser
from .prompt import Prompt
from .registry import CommandRegistry
from .types import CommandClass, ExecutorContract, FlagListener, LoaderContract, ParserFactory
from .ui import UI, render_error_with_suggestions

__all__ = ["DefaultExecutor", "Kernel"]


class DefaultExecutor:
    """Instantiate commands with the kernel collaborators and run their lifecycle."""

    def create(self, command: CommandClass, parsed: ParsedInput, kernel: Kernel) -> BaseCommand:
        return command(kernel, parsed, kernel.ui, kernel.prompt)

    async def run(self, command: BaseCommand, kernel: Kernel) -> Any:  # noqa: ANN401, ARG002
        return await command.exec()


class Kernel:  # pylint: disable=too-many-instance-attributes,too-many-public-methods
    """Main app object."""

    exit_code: int | None
    " Exit code of the process, inferred from the main command when not set explicitly "

    def __init__(self, ui: UI | None = None, prompt: Prompt | None = None, parser: ParserFactory = Parser) -> None:
        self.log = get_logger("clikernel.kernel")
        self.ui = ui or UI()
        self.prompt = prompt or Prompt()
        self.parser = parser
        self.info: dict[str, Any] = {}
        self.exit_code = None
        self.hooks = HookPipeline()
        self.registry = CommandRegistry(self.hooks)

        self._state = KernelState.IDLE
        self._loaders: list[LoaderContract] = []
        self._option_listeners: dict[str, FlagListener] = {}
        self._global_spec = CommandSpec(options=CommandOptions(allow_unknown_flags=True))
        self._default_command: CommandClass = ListCommand
        self._executor: ExecutorContract = DefaultExecutor()
        self._main_command: BaseCommand | None = None
        self._terminated = asyncio.Event()

    def __repr__(self) -> str:
        return f"<Kernel {self._state}>"

    def _ensure_idle(self, action: str) -> None:
        if self._state != KernelState.IDLE:
            raise InvalidState(self._state, action)

    def _set_state(self, state: KernelState) -> None:
        self.log.debug("state %s -> %s", self._state, state)
        self._state = state

    # Configuration

    def define_flag(self, name: str, **options: Any) -> Kernel:  # noqa: ANN401
        """Define a global flag, accepted by every main command.

        Args:
            name: Flag name
            **options: Same options as `CommandSpec.define_flag`

        Raises:
            InvalidState: the kernel is not idle
        """
        self._ensure_idle("register global flag")
        self._global_spec.define_flag(name, **options)
        return self

    def on(self, option: str, listener: FlagListener) -> Kernel:  # pylint: disable=invalid-name
        """Call `listener` when the main command receives the flag `option`.

        Listeners run in registration order before the main command executes.
        A listener returning True stops the kernel without running the command,
        once the input passed validation.
        """
        self._ensure_idle("register flag listener")
        self.log.debug('registering listener for "%s" flag', option)
        self._option_listeners[option] = listener
        return self

    def add_loader(self, loader: LoaderContract) -> Kernel:
        """Add a source of commands. Later loaders win on command name collision."""
        self._ensure_idle("add loader")
        self._loaders.append(loader)
        return self

    def register_executor(self, executor: ExecutorContract) -> Kernel:
        """Replace how commands are instantiated and run."""
        self._ensure_idle("register commands executor")
        self._executor = executor
        return self

    def register_default_command(self, command: CommandClass) -> Kernel:
        """Replace the command run when no command name is given."""
        self._ensure_idle("register default command")
        self._default_command = command
        return self

    def add_alias(self, alias: str, command_name: str) -> Kernel:
        """Point `alias` to `command_name`."""
        self.registry.add_alias(alias, command_name)
        return self

    # Hooks

    def finding(self, handler: HookHandler) -> Kernel:
        """Run `handler(command_name)` before looking up a command."""
        self.hooks.add(HookPhase.FINDING, handler)
        return self

    def loading(self, handler: HookHandler) -> Kernel:
        """Run `handler(metadata)` before asking the loader for a command."""
        self.hooks.add(HookPhase.LOADING, handler)
        return self

    def loaded(self, handler: HookHandler) -> Kernel:
        """Run `handler(command_class)` once a command is loaded."""
        self.hooks.add(HookPhase.LOADED, handler)
        return self

    def executing(self, handler: HookHandler) -> Kernel:
        """Run `handler(command, is_main)` before a command runs."""
        self.hooks.add(HookPhase.EXECUTING, handler)
        return self

    def executed(self, handler: HookHandler) -> Kernel:
        """Run `handler(command, is_main)` after a command ran."""
        self.hooks.add(HookPhase.EXECUTED, handler)
        return self

    def terminating(self, handler: HookHandler) -> Kernel:
        """Run `handler(main_command)` when the kernel terminates."""
        self.hooks.add(HookPhase.TERMINATING, handler)
        return self

    # Accessors

    @property
    def flags(self) -> list[FlagSpec]:
        """Global flags."""
        return list(self._global_spec.flags)

    @property
    def main_command(self) -> BaseCommand | None:
        return self._main_command

    def get_state(self) -> KernelState:
        return self._state

    def get_commands(self) -> list[CommandMetaData]:
        """Every registered command, sorted by name."""
        return self.registry.list()

    def get_namespace_commands(self, namespace: str | None = None) -> list[CommandMetaData]:
        """Commands of `namespace`, or the commands without namespace."""
        return self.registry.list_by_namespace(namespace)

    def get_command(self, command_name: str) -> CommandMetaData | None:
        """Metadata of a command, looked up by name or alias."""
        return self.registry.get(command_name)

    def get_default_command(self) -> CommandClass:
        return self._default_command

    def get_aliases(self) -> list[str]:
        return list(self.registry.aliases)

    def get_alias_command(self, alias: str) -> CommandMetaData | None:
        return self.registry.get_alias_command(alias)

    def get_command_aliases(self, command_name: str) -> list[str]:
        return self.registry.get_command_aliases(command_name)

    def get_namespaces(self) -> list[str]:
        return self.registry.namespaces

    def get_command_suggestions(self, keyword: str) -> list[str]:
        return self.registry.suggest(keyword)

    def get_namespace_suggestions(self, keyword: str) -> list[str]:
        return self.registry.suggest_namespace(keyword)

    # Execution

    async def boot(self) -> None:
        """Pull the commands metadata from every loader (no-op unless idle).

        The default command is served by an extra loader, consulted last.
        """
        if self._state != KernelState.IDLE:
            return

        self._loaders.append(ListLoader([self._default_command]))
        self._set_state(KernelState.BOOTED)

        for loader in self._loaders:
            self.log.debug("loading commands from %r", loader)
            for metadata in await maybe_await(loader.get_metadata()):
                self.registry.register(metadata, loader)

    async def find(self, command_name: str) -> CommandClass:
        """Resolve a command name or alias to its command class.

        Raises:
            CommandNotFound: the command does not exist
        """
        return await self.registry.resolve(command_name)

    async def _parse(self, options: ParserOptions, argv: Sequence[str]) -> ParsedInput:
        return await maybe_await(self.parser(options).parse(list(argv)))  # type: ignore[no-any-return]

    async def _create(self, command: CommandClass, argv: Sequence[str]) -> BaseCommand:
        # global flags only apply to the main command
        parsed = await self._parse(command.get_parser_options(), argv)
        command.validate(parsed)
        return await maybe_await(self._executor.create(command, parsed, self))  # type: ignore[no-any-return]

    async def create(self, command: CommandClass, argv: Sequence[str]) -> BaseCommand:
        """Parse, validate and instantiate `command` without running it.

        Raises:
            KernelError: when validation fails
        """
        if self._state == KernelState.IDLE:
            await self.boot()
        return await self._create(command, argv)

    async def exec(self, command_name: str, argv: Sequence[str] = ()) -> BaseCommand:
        """Run a command programmatically.

        Errors are not rendered, they propagate to the caller.

        Args:
            command_name: Command name or alias
            argv: Command arguments and flags

        Returns:
            The command instance, once executed

        Raises:
            KernelTerminated: the kernel was terminated
            KernelError: unknown command or invalid input
        """
        if self._state == KernelState.IDLE:
            await self.boot()
        if self._state == KernelState.TERMINATED:
            raise KernelTerminated

        command = await self.find(command_name)
        instance = await self._create(command, argv)

        await self.hooks.run(HookPhase.EXECUTING, instance, False)
        await maybe_await(self._executor.run(instance, self))
        await self.hooks.run(HookPhase.EXECUTED, instance, False)
        return instance

    async def handle(self, argv: Sequence[str]) -> int | None:
        """Run the main command of the process.

        The first token is the command name, unless `argv` is empty or starts
        with a flag, in which case the default command runs.

        Returns:
            The exit code, or None when the main command stays alive

        Raises:
            InvalidState: a main command already ran on this kernel
            KernelTerminated: the kernel was terminated
        """
        if self._state == KernelState.RUNNING:
            raise InvalidState(self._state, "handle", "Cannot run multiple main commands from a single process")
        if self._state == KernelState.TERMINATED:
            raise KernelTerminated
        if self._state == KernelState.IDLE:
            await self.boot()

        self._set_state(KernelState.RUNNING)

        argv = list(argv)
        if not argv or argv[0].startswith("-"):
            command_name = self._default_command.spec.command_name
            self.log.debug('running default command "%s"', command_name)
        else:
            command_name, argv = argv[0], argv[1:]
            self.log.debug('running main command "%s"', command_name)

        await self._exec_main(command_name, argv)

        if self._state == KernelState.TERMINATED:
            return self.exit_code
        return None

    async def _exec_main(self, command_name: str, argv: list[str]) -> None:
        try:
            command = await self.find(command_name)
            parsed = await self._parse(command.get_parser_options(self._global_spec.get_parser_options().flags), argv)
            self._global_spec.validate(parsed)

            short_circuit = False
            for option, listener in list(self._option_listeners.items()):
                if option not in parsed.flags:
                    continue
                self.log.debug('running listener for "%s" flag', option)
                short_circuit = bool(await maybe_await(listener(command, self, parsed)))
                if short_circuit:
                    break

            command.validate(parsed)
            if short_circuit:
                self.log.debug("short circuiting from flag listener")
                await self.terminate()
                return

            self._main_command = await maybe_await(self._executor.create(command, parsed, self))

            await self.hooks.run(HookPhase.EXECUTING, self._main_command, True)
            await maybe_await(self._executor.run(self._main_command, self))
            await self.hooks.run(HookPhase.EXECUTED, self._main_command, True)

            if not command.spec.options.stays_alive:
                await self.terminate(self._main_command)
        except Exception as e:  # pylint: disable=broad-except
            await self._handle_error(e)

    async def _handle_error(self, error: Exception) -> None:
        self.exit_code = ExitCode.FAILURE
        colors = self.ui.colors

        if isinstance(error, CommandNotFound):
            render_error_with_suggestions(self.ui, error.message, error.suggestions)
        elif isinstance(error, KernelError):
            self.ui.logger.log_error(f"{colors.bg_red(colors.white('  ERROR  '))} {error.message}")
        else:
            self.log.debug("main command failed: %r", error)
            self.ui.logger.log_error("".join(traceback.format_exception(error)).rstrip())

        await self.terminate(self._main_command)

    async def terminate(self, command: BaseCommand | None = None) -> None:
        """Terminate the kernel.

        Only effective while running, and only for the main command once one exists.
        The kernel ends up terminated even when a terminating hook raises.
        """
        if self._state != KernelState.RUNNING:
            self.log.debug("denied terminating, since the kernel is not running")
            return
        if self._main_command is not None and command is not self._main_command:
            self.log.debug("denied terminating, since %r is not the main command", command)
            return

        self.log.debug("terminating")
        try:
            await self.hooks.run(HookPhase.TERMINATING, self._main_command)
        finally:
            self._set_state(KernelState.TERMINATED)
            if self.exit_code is None:
                main_exit_code = self._main_command.exit_code if self._main_command else None
                self.exit_code = ExitCode.SUCCESS if main_exit_code is None else main_exit_code
            self._terminated.set()

    async def wait_for_termination(self) -> int | None:
        """Wait until the kernel terminates, for main commands staying alive.

        Returns:
            The exit code
        """
        await self._terminated.wait()
        return self.exit_code
