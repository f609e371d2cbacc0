"""Data model shared by the kernel, the registry and the commands."""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import IntEnum, StrEnum
from typing import Any, Literal

__all__ = [
    "ArgumentParserOptions",
    "ArgumentSpec",
    "ArgumentType",
    "CommandMetaData",
    "CommandOptions",
    "ExitCode",
    "FlagSpec",
    "FlagType",
    "FlagsParserOptions",
    "HookPhase",
    "KernelState",
    "ParsedInput",
    "ParserOptions",
]

ArgumentType = Literal["string", "spread"]
FlagType = Literal["string", "boolean", "number", "array"]

ARGUMENT_TYPES: frozenset[str] = frozenset({"string", "spread"})
FLAG_TYPES: frozenset[str] = frozenset({"string", "boolean", "number", "array"})


class KernelState(StrEnum):
    """Kernel lifecycle states, only ever moving forward."""

    IDLE = "idle"
    BOOTED = "booted"
    RUNNING = "running"
    TERMINATED = "terminated"


class HookPhase(StrEnum):
    """Extension points of the resolution and execution pipeline."""

    FINDING = "finding"
    LOADING = "loading"
    LOADED = "loaded"
    EXECUTING = "executing"
    EXECUTED = "executed"
    TERMINATING = "terminating"


class ExitCode(IntEnum):
    """Standard exit codes."""

    SUCCESS = 0
    FAILURE = 1


@dataclass(frozen=True)
class ArgumentSpec:  # pylint: disable=too-many-instance-attributes
    """A positional argument accepted by a command.

    Attributes:
        name: Attribute set on the command instance
        argument_name: Name displayed in help and errors
        type: "string" (one token) or "spread" (all remaining tokens)
        required: Whether the argument must be supplied
        default: Value used when the argument is not supplied
        allow_empty_value: Accept empty or blank values
        description: Human-readable description
        parse: Optional callable applied to the raw value
    """

    name: str
    argument_name: str
    type: ArgumentType
    required: bool = True
    default: Any = None
    allow_empty_value: bool = False
    description: str = ""
    parse: Callable[[Any], Any] | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON friendly representation (without `parse`)."""
        return {
            "name": self.name,
            "argument_name": self.argument_name,
            "type": self.type,
            "required": self.required,
            "default": self.default,
            "allow_empty_value": self.allow_empty_value,
            "description": self.description,
        }


@dataclass(frozen=True)
class FlagSpec:  # pylint: disable=too-many-instance-attributes
    """A flag accepted by a command.

    Attributes:
        name: Attribute set on the command instance
        flag_name: Key used on the command line and in `ParsedInput.flags`
        type: One of "string", "boolean", "number" or "array"
        required: Whether the flag must be mentioned
        alias: Short or alternate names
        default: Value used when the flag is not mentioned
        allow_empty_value: Accept empty values for string and array flags
        description: Human-readable description
        parse: Optional callable applied to the supplied value
    """

    name: str
    flag_name: str
    type: FlagType
    required: bool = False
    alias: tuple[str, ...] = ()
    default: Any = None
    allow_empty_value: bool = False
    description: str = ""
    parse: Callable[[Any], Any] | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON friendly representation (without `parse`)."""
        return {
            "name": self.name,
            "flag_name": self.flag_name,
            "type": self.type,
            "required": self.required,
            "alias": list(self.alias),
            "default": self.default,
            "allow_empty_value": self.allow_empty_value,
            "description": self.description,
        }


@dataclass(frozen=True)
class CommandOptions:
    """Behaviour switches of a command."""

    allow_unknown_flags: bool = False
    stays_alive: bool = False


@dataclass(frozen=True)
class CommandMetaData:  # pylint: disable=too-many-instance-attributes
    """Immutable description of a command, as stored by the registry."""

    command_name: str
    namespace: str | None = None
    description: str = ""
    help: str = ""
    aliases: tuple[str, ...] = ()
    args: tuple[ArgumentSpec, ...] = ()
    flags: tuple[FlagSpec, ...] = ()
    options: CommandOptions = field(default_factory=CommandOptions)
    file_path: str | None = None

    def with_file_path(self, file_path: str) -> "CommandMetaData":
        """Return a copy pointing to the module it was discovered in."""
        return replace(self, file_path=file_path)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON friendly representation."""
        data: dict[str, Any] = {
            "command_name": self.command_name,
            "namespace": self.namespace,
            "description": self.description,
            "help": self.help,
            "aliases": list(self.aliases),
            "args": [arg.to_dict() for arg in self.args],
            "flags": [flag.to_dict() for flag in self.flags],
            "options": {
                "allow_unknown_flags": self.options.allow_unknown_flags,
                "stays_alive": self.options.stays_alive,
            },
        }
        if self.file_path is not None:
            data["file_path"] = self.file_path
        return data


@dataclass
class ParsedInput:
    """Output of the argv parser.

    Attributes:
        args: Values aligned with the declared arguments
        flags: Flag values keyed by flag name
        unknown_flags: Flags which were not declared
    """

    args: list[Any] = field(default_factory=list)
    flags: dict[str, Any] = field(default_factory=dict)
    unknown_flags: list[str] = field(default_factory=list)


@dataclass
class ArgumentParserOptions:
    """Parsing instructions for one positional argument."""

    type: ArgumentType
    default: Any = None
    parse: Callable[[Any], Any] | None = None


@dataclass
class FlagsParserOptions:  # pylint: disable=too-many-instance-attributes
    """Parsing instructions for flags, bucketed by type."""

    all: list[str] = field(default_factory=list)
    string: list[str] = field(default_factory=list)
    boolean: list[str] = field(default_factory=list)
    number: list[str] = field(default_factory=list)
    array: list[str] = field(default_factory=list)
    alias: dict[str, list[str]] = field(default_factory=dict)
    default: dict[str, Any] = field(default_factory=dict)
    coerce: dict[str, Callable[[Any], Any]] = field(default_factory=dict)

    def merge(self, other: "FlagsParserOptions | None") -> "FlagsParserOptions":
        """Return new options holding the content of `other` followed by ours."""
        if other is None:
            return replace(
                self,
                all=list(self.all),
                string=list(self.string),
                boolean=list(self.boolean),
                number=list(self.number),
                array=list(self.array),
                alias=dict(self.alias),
                default=dict(self.default),
                coerce=dict(self.coerce),
            )
        return FlagsParserOptions(
            all=other.all + self.all,
            string=other.string + self.string,
            boolean=other.boolean + self.boolean,
            number=other.number + self.number,
            array=other.array + self.array,
            alias={**other.alias, **self.alias},
            default={**other.default, **self.default},
            coerce={**other.coerce, **self.coerce},
        )


@dataclass
class ParserOptions:
    """Everything the parser needs to know about a command."""

    flags: FlagsParserOptions = field(default_factory=FlagsParserOptions)
    arguments: list[ArgumentParserOptions] = field(default_factory=list)
