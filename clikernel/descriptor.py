"""Declarative command specs.

A `CommandSpec` is built incrementally, one argument or flag at a time, and
rejects invalid declarations as soon as they are made. Once complete it is
serialized into an immutable `CommandMetaData`, which is what loaders hand
over to the registry.

```python
spec = (
    CommandSpec("make:controller", description="Make a new HTTP controller", aliases=["mc"])
    .define_argument("name", type="string", description="Name of the controller")
    .define_flag("resource", type="boolean", default=False)
)
```
"""

from collections.abc import Callable, Sequence
from typing import Any

from .errors import InvalidDeclaration, MissingCommandName
from .logging_setup import get_logger
from .models import (
    ARGUMENT_TYPES,
    FLAG_TYPES,
    ArgumentParserOptions,
    ArgumentSpec,
    CommandMetaData,
    CommandOptions,
    FlagSpec,
    FlagsParserOptions,
    ParsedInput,
    ParserOptions,
)
from .utils import dash_case, namespace_of, unique
from .validation import validate

__all__ = ["CommandSpec"]


class CommandSpec:  # pylint: disable=too-many-instance-attributes
    """Mutable builder for a command description."""

    def __init__(
        self,
        command_name: str = "",
        *,
        description: str = "",
        help: str | Sequence[str] = "",  # pylint: disable=redefined-builtin
        aliases: Sequence[str] = (),
        options: CommandOptions | None = None,
    ) -> None:
        self.command_name = command_name
        self.description = description
        self.help = help if isinstance(help, str) else "\n".join(help)
        self.aliases: list[str] = list(aliases)
        self.options = options or CommandOptions()
        self.args: list[ArgumentSpec] = []
        self.flags: list[FlagSpec] = []
        self.log = get_logger("clikernel.descriptor")

    def __repr__(self) -> str:
        return f"<CommandSpec {self.command_name or '(anonymous)'}>"

    @property
    def namespace(self) -> str | None:
        """Namespace derived from the command name."""
        return namespace_of(self.command_name)

    def _owner(self, name: str) -> str:
        return f"{self.command_name or 'anonymous'}.{name}"

    def define_argument(
        self,
        name: str,
        *,
        type: str | None = None,  # pylint: disable=redefined-builtin
        required: bool | None = None,
        default: Any = None,  # noqa: ANN401
        allow_empty_value: bool = False,
        description: str = "",
        argument_name: str | None = None,
        parse: Callable[[Any], Any] | None = None,
    ) -> "CommandSpec":
        """Declare the next positional argument.

        Arguments are accepted in the order they are declared.

        Args:
            name: Attribute receiving the value on the command instance
            type: "string" or "spread"
            required: Defaults to True, unless the argument is a spread or has a default
            default: Value used when the argument is not supplied
            allow_empty_value: Accept empty values
            description: Human-readable description
            argument_name: Display name (defaults to the dash-cased name)
            parse: Callable applied to the supplied value

        Raises:
            InvalidDeclaration: missing type, argument after a spread argument,
                or required argument after an optional one
        """
        if not type:
            raise InvalidDeclaration(f'Cannot define argument "{self._owner(name)}". Specify the argument type')
        if type not in ARGUMENT_TYPES:
            raise InvalidDeclaration(f'Cannot define argument "{self._owner(name)}". Unsupported type "{type}"')
        if required is None:
            required = type != "spread" and default is None

        arg = ArgumentSpec(
            name=name,
            argument_name=argument_name or dash_case(name),
            type=type,  # type: ignore[arg-type]
            required=required,
            default=default,
            allow_empty_value=allow_empty_value,
            description=description,
            parse=parse,
        )
        last_arg = self.args[-1] if self.args else None

        if last_arg and last_arg.type == "spread":
            raise InvalidDeclaration(
                f'Cannot define argument "{self._owner(name)}" after spread argument "{self._owner(last_arg.name)}". '
                "Spread argument should be the last one"
            )
        if arg.required and last_arg and not last_arg.required:
            raise InvalidDeclaration(
                f'Cannot define required argument "{self._owner(name)}" after optional argument "{self._owner(last_arg.name)}"'
            )

        self.log.debug("defining arg %s on %s", arg, self)
        self.args.append(arg)
        return self

    def define_flag(
        self,
        name: str,
        *,
        type: str | None = None,  # pylint: disable=redefined-builtin
        required: bool = False,
        alias: str | Sequence[str] = (),
        default: Any = None,  # noqa: ANN401
        allow_empty_value: bool = False,
        description: str = "",
        flag_name: str | None = None,
        parse: Callable[[Any], Any] | None = None,
    ) -> "CommandSpec":
        """Declare a flag.

        Declaring a flag whose flag name already exists replaces the earlier one.

        Args:
            name: Attribute receiving the value on the command instance
            type: "string", "boolean", "number" or "array"
            required: Whether the flag must be mentioned
            alias: One or more alternate names (eg: "f" for "-f")
            default: Value used when the flag is not mentioned
            allow_empty_value: Accept empty values for string and array flags
            description: Human-readable description
            flag_name: Command-line name (defaults to the dash-cased name)
            parse: Callable applied to the supplied value

        Raises:
            InvalidDeclaration: missing or unsupported type
        """
        if not type:
            raise InvalidDeclaration(f'Cannot define flag "{self._owner(name)}". Specify the flag type')
        if type not in FLAG_TYPES:
            raise InvalidDeclaration(f'Cannot define flag "{self._owner(name)}". Unsupported type "{type}"')

        flag = FlagSpec(
            name=name,
            flag_name=flag_name or dash_case(name),
            type=type,  # type: ignore[arg-type]
            required=required,
            alias=(alias,) if isinstance(alias, str) else tuple(alias),
            default=default,
            allow_empty_value=allow_empty_value,
            description=description,
            parse=parse,
        )

        self.log.debug("defining flag %s on %s", flag, self)
        for index, existing in enumerate(self.flags):
            if existing.flag_name == flag.flag_name:
                self.flags[index] = flag
                break
        else:
            self.flags.append(flag)
        return self

    def get_parser_options(self, flags_options: FlagsParserOptions | None = None) -> ParserOptions:
        """Return the parser options, merged with `flags_options` when given.

        Args:
            flags_options: Flag options to merge (eg: the kernel global flags)
        """
        options = FlagsParserOptions().merge(flags_options)

        for flag in self.flags:
            options.all.append(flag.flag_name)
            if flag.alias:
                options.alias[flag.flag_name] = list(flag.alias)
            if flag.parse:
                options.coerce[flag.flag_name] = flag.parse
            if flag.default is not None:
                options.default[flag.flag_name] = flag.default
            getattr(options, flag.type).append(flag.flag_name)

        arguments = [ArgumentParserOptions(type=arg.type, default=arg.default, parse=arg.parse) for arg in self.args]
        return ParserOptions(flags=options, arguments=arguments)

    def serialize(self, class_name: str | None = None) -> CommandMetaData:
        """Return the immutable metadata for this spec.

        Args:
            class_name: Name of the command class, used in error messages

        Raises:
            MissingCommandName: when no command name was given
        """
        if not self.command_name:
            raise MissingCommandName(class_name or repr(self))

        return CommandMetaData(
            command_name=self.command_name,
            namespace=self.namespace,
            description=self.description,
            help=self.help,
            aliases=unique(self.aliases),
            args=tuple(self.args),
            flags=tuple(self.flags),
            options=self.options,
        )

    def validate(self, parsed: ParsedInput) -> None:
        """Validate parsed input against this spec."""
        validate(self, parsed)
