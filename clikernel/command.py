"""Base class for every command.

A command couples a `CommandSpec` (what it accepts) with lifecycle methods
(what it does). The kernel creates one instance per execution:

```python
class MakeController(BaseCommand):
    spec = (
        CommandSpec("make:controller", description="Make a new HTTP controller", aliases=["mc"])
        .define_argument("name", type="string")
        .define_flag("resource", type="boolean", default=False)
    )

    async def run(self):
        self.logger.success(f"created {self.name}")
```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from .aioops import maybe_await
from .descriptor import CommandSpec
from .logging_setup import get_logger
from .models import CommandMetaData, ExitCode, FlagsParserOptions, ParsedInput, ParserOptions

if TYPE_CHECKING:
    import logging

    from .kernel import Kernel
    from .prompt import Prompt
    from .ui import UI, Colors, Logger

__all__ = ["BaseCommand"]


class BaseCommand:  # pylint: disable=too-many-instance-attributes
    """Base class for any command."""

    spec: ClassVar[CommandSpec] = CommandSpec()
    " The command description, shared by every instance "

    exit_code: int | None
    " Exit code set by the command, or by `exec` once the lifecycle is over "

    error: BaseException | None
    " Error raised by prepare, interact or run "

    result: Any
    " Value returned by run "

    def __init__(self, kernel: Kernel, parsed: ParsedInput, ui: UI, prompt: Prompt) -> None:
        self.kernel = kernel
        self.parsed = parsed
        self.ui = ui
        self.prompt = prompt
        self.exit_code = None
        self.error = None
        self.result = None
        self._log = get_logger(f"clikernel.commands.{type(self).__name__}")

        for index, arg in enumerate(self.spec.args):
            setattr(self, arg.name, parsed.args[index] if index < len(parsed.args) else arg.default)
        for flag in self.spec.flags:
            setattr(self, flag.name, parsed.flags.get(flag.flag_name, flag.default))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.spec.command_name}>"

    # Class level helpers

    @classmethod
    def serialize(cls) -> CommandMetaData:
        """Return the command metadata.

        Raises:
            MissingCommandName: when the spec has no command name
        """
        return cls.spec.serialize(cls.__name__)

    @classmethod
    def validate(cls, parsed: ParsedInput) -> None:
        """Validate parsed input against the command spec."""
        cls.spec.validate(parsed)

    @classmethod
    def get_parser_options(cls, flags_options: FlagsParserOptions | None = None) -> ParserOptions:
        """Return the parser options, merged with `flags_options` (eg: global flags)."""
        return cls.spec.get_parser_options(flags_options)

    @classmethod
    def create(cls, kernel: Kernel, parsed: ParsedInput, ui: UI, prompt: Prompt) -> BaseCommand:
        """Validate `parsed` and return a new instance.

        Raises:
            KernelError: when validation fails
        """
        cls.validate(parsed)
        return cls(kernel, parsed, ui, prompt)

    # Collaborators

    @property
    def logger(self) -> Logger:
        """User facing output."""
        return self.ui.logger

    @property
    def colors(self) -> Colors:
        return self.ui.colors

    @property
    def log(self) -> logging.Logger:
        """Diagnostics logger of this command."""
        return self._log

    # Functions to override

    async def prepare(self) -> Any:  # noqa: ANN401
        """Called first, to set up the command."""

    async def interact(self) -> Any:  # noqa: ANN401
        """Called after `prepare`, to prompt the user."""

    async def run(self) -> Any:  # noqa: ANN401
        """The command body; its return value is stored as `result`."""

    async def completed(self) -> Any:  # noqa: ANN401
        """Called last, even when a previous phase failed.

        Return True once `self.error` has been dealt with, to skip the default fatal report.
        """

    # Lifecycle

    async def exec(self) -> Any:  # noqa: ANN401
        """Run prepare, interact, run and completed in sequence.

        Errors raised by the first three phases are stored in `error` and
        the exit code becomes 1, unless the command set one. Errors raised by
        `completed` propagate.

        Returns:
            The value returned by `run`
        """
        try:
            await maybe_await(self.prepare())
            await maybe_await(self.interact())
            self.result = await maybe_await(self.run())
            if self.exit_code is None:
                self.exit_code = ExitCode.SUCCESS
        except Exception as e:  # pylint: disable=broad-except
            self._log.debug("%s failed: %r", self, e)
            self.error = e
            if self.exit_code is None:
                self.exit_code = ExitCode.FAILURE

        handled = await maybe_await(self.completed())
        if not handled and self.error is not None:
            self.logger.fatal(self.error)
        return self.result

    async def terminate(self) -> None:
        """Ask the kernel to terminate, with this command as candidate."""
        await self.kernel.terminate(self)
