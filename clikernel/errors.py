"""Error kinds raised by the kernel, the registry and the validation engine.

Every recognized error derives from `KernelError` and carries a stable
`code`. The kernel renders recognized errors as a single line when they
escape the main command; anything else is reported with its traceback.
"""

from collections.abc import Sequence

__all__ = [
    "CommandNotFound",
    "InvalidCommandExport",
    "InvalidDeclaration",
    "InvalidFlag",
    "InvalidState",
    "KernelError",
    "KernelTerminated",
    "MissingArgument",
    "MissingArgumentValue",
    "MissingCommandExport",
    "MissingCommandName",
    "MissingFlag",
    "MissingFlagValue",
    "PromptCancelled",
    "UnknownFlag",
]


class KernelError(Exception):
    """Base class for every recognized error."""

    code = "E_RUNTIME"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CommandNotFound(KernelError):
    """The command (or alias) is not registered, or its loader could not load it."""

    code = "E_COMMAND_NOT_FOUND"

    def __init__(self, command_name: str, suggestions: Sequence[str] = ()) -> None:
        super().__init__(f'Command "{command_name}" is not defined')
        self.command_name = command_name
        self.suggestions = list(suggestions)


class MissingCommandName(KernelError):
    """A command spec was serialized without a command name."""

    code = "E_MISSING_COMMAND_NAME"

    def __init__(self, class_name: str) -> None:
        super().__init__(f'Cannot serialize command "{class_name}". Missing "command_name" in its spec')
        self.class_name = class_name


class MissingArgument(KernelError):
    code = "E_MISSING_ARG"

    def __init__(self, name: str) -> None:
        super().__init__(f'Missing required argument "{name}"')
        self.name = name


class MissingArgumentValue(KernelError):
    code = "E_MISSING_ARG_VALUE"

    def __init__(self, name: str) -> None:
        super().__init__(f'Missing value for argument "{name}"')
        self.name = name


class MissingFlag(KernelError):
    code = "E_MISSING_FLAG"

    def __init__(self, flag_name: str) -> None:
        super().__init__(f'Missing required option "{flag_name}"')
        self.flag_name = flag_name


class MissingFlagValue(KernelError):
    code = "E_MISSING_FLAG_VALUE"

    def __init__(self, flag_name: str) -> None:
        super().__init__(f'Missing value for option "{flag_name}"')
        self.flag_name = flag_name


class UnknownFlag(KernelError):
    """An undeclared flag was used on a command that does not allow unknown flags."""

    code = "E_UNKNOWN_FLAG"

    def __init__(self, token: str) -> None:
        super().__init__(f'Unknown flag "{token}". The mentioned flag is not accepted by the command')
        self.token = token


class InvalidFlag(KernelError):
    code = "E_INVALID_FLAG"

    def __init__(self, flag_name: str, expected: str) -> None:
        super().__init__(f'Invalid value. The "{flag_name}" flag accepts a "{expected}" value')
        self.flag_name = flag_name
        self.expected = expected


class InvalidState(KernelError):
    """A kernel operation was attempted in a state that does not allow it."""

    code = "E_INVALID_STATE"

    def __init__(self, state: str, action: str, message: str | None = None) -> None:
        super().__init__(message or f'Cannot {action} in "{state}" state')
        self.state = state
        self.action = action


class KernelTerminated(KernelError):
    code = "E_KERNEL_TERMINATED"

    def __init__(self) -> None:
        super().__init__("The kernel has been terminated. Create a fresh instance to execute commands")


class InvalidDeclaration(KernelError):
    """An argument or flag declaration was rejected while building a command spec."""

    code = "E_INVALID_DECLARATION"


class MissingCommandExport(KernelError):
    """A module discovered by the filesystem loader does not expose a command."""

    code = "E_MISSING_COMMAND_EXPORT"

    def __init__(self, file_path: str, export_name: str = "Command") -> None:
        super().__init__(f'Missing "{export_name}" export in module "{file_path}"')
        self.file_path = file_path


class InvalidCommandExport(KernelError):
    """The `Command` export of a discovered module is not a command class."""

    code = "E_INVALID_COMMAND_EXPORT"

    def __init__(self, file_path: str, export_name: str = "Command") -> None:
        super().__init__(f'Invalid "{export_name}" export in module "{file_path}". Expected a subclass of BaseCommand')
        self.file_path = file_path


class PromptCancelled(KernelError):
    code = "E_PROMPT_CANCELLED"

    def __init__(self) -> None:
        super().__init__("Prompt cancelled")
