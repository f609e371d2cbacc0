"""Configuration loading, schema validation and typed access.

Applications may describe where their commands live in a TOML file:

```toml
[clikernel]
binary = "acme"
commands_paths = ["acme/commands"]
ignore_paths = ["acme/commands/_shared.py"]
```

The file defaults to `clikernel.toml` in the working directory and can be
overridden with the `CLIKERNEL_CONFIG` environment variable.
"""

from __future__ import annotations

import difflib
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .logging_setup import get_logger

if TYPE_CHECKING:
    import logging

__all__ = [
    "BOOL_FALSE_STRINGS",
    "BOOL_STRINGS",
    "BOOL_TRUE_STRINGS",
    "CONFIG_FILE",
    "CONFIG_SCHEMA",
    "CONFIG_SECTION",
    "ConfigField",
    "Configuration",
    "coerce_to_bool",
    "load_config",
    "validate_config",
]

# Type alias for config values
ConfigValueType = float | bool | str | list | dict

# Boolean string constants (shared with the argv parser)
BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS

CONFIG_FILE = "clikernel.toml"
CONFIG_SECTION = "clikernel"


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


@dataclass
class ConfigField:
    """Describes an expected configuration field for validation.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, int, bool, list)
        default: Default value if not provided
        description: Human-readable description for error messages
    """

    name: str
    field_type: type = str
    default: Any = None
    description: str = ""


CONFIG_SCHEMA: tuple[ConfigField, ...] = (
    ConfigField("binary", str, default="clikernel", description="Program name shown in usage lines"),
    ConfigField("version", str, default="", description="Version shown by the list command"),
    ConfigField("commands_paths", list, default=[], description="Directories scanned for command modules"),
    ConfigField("ignore_paths", list, default=[], description="Files (relative to a commands path) to skip"),
    ConfigField("debug", bool, default=False, description="Enable debug logging"),
    ConfigField("log_file", str, default="", description="Also write logs to this file"),
)


class Configuration(dict):
    """Configuration wrapper providing typed access and schema defaults."""

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        schema: tuple[ConfigField, ...] = CONFIG_SCHEMA,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            schema: ConfigField definitions providing defaults
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self._schema_defaults = {field.name: field.default for field in schema if field.default is not None}

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value with schema-aware defaults.

        Args:
            name: The configuration key
            default: Fallback if key is missing and not in schema defaults

        Returns:
            The value, schema default, or provided default
        """
        if name in self:
            return dict.get(self, name)  # type: ignore[no-any-return]
        if name in self._schema_defaults:
            return self._schema_defaults[name]  # type: ignore[no-any-return]
        return default

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing."""
        return coerce_to_bool(self.get(name), default)

    def get_int(self, name: str, default: int = 0) -> int:
        """Get an integer value.

        Args:
            name: The key name
            default: Default value if key is missing or invalid
        """
        value = self.get(name)
        if value is None:
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (ValueError, TypeError):
            self.log.warning("Invalid integer value for %s: %s", name, value)
            return default

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string value."""
        value = self.get(name)
        if value is None:
            return default
        return str(value)

    def get_list(self, name: str, default: list | None = None) -> list:
        """Get a list value, wrapping scalars in a list."""
        value = self.get(name)
        if value is None:
            return list(default or [])
        if isinstance(value, list):
            return list(value)
        return [value]


def format_config_error(field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message."""
    msg = f"[{CONFIG_SECTION}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


def validate_config(config: dict[str, Any], schema: tuple[ConfigField, ...] = CONFIG_SCHEMA) -> list[str]:
    """Validate a configuration section against a schema.

    Args:
        config: The `[clikernel]` section
        schema: ConfigField definitions

    Returns:
        List of error messages (empty if validation passed)
    """
    errors = []
    known = {field.name: field for field in schema}

    for key, value in config.items():
        field = known.get(key)
        if field is None:
            matches = difflib.get_close_matches(key, list(known), n=1)
            suggestion = f"did you mean '{matches[0]}'?" if matches else "will be ignored"
            errors.append(format_config_error(key, "Unknown option", suggestion))
            continue
        if field.field_type is bool and isinstance(value, str) and value.lower() in BOOL_STRINGS:
            continue
        if not isinstance(value, field.field_type):
            errors.append(format_config_error(key, f"Expected {field.field_type.__name__}, got {type(value).__name__}"))

    return errors


def load_config(path: str | os.PathLike[str] | None = None, logger: logging.Logger | None = None) -> Configuration:
    """Load the `[clikernel]` section of a TOML file.

    A missing file yields an empty configuration (schema defaults apply).
    A pyproject.toml is read from its `[tool.clikernel]` table.

    Args:
        path: The file to read (defaults to $CLIKERNEL_CONFIG or clikernel.toml)
        logger: Logger used for warnings

    Raises:
        tomllib.TOMLDecodeError: the file exists but is not valid TOML
    """
    log = logger or get_logger("clikernel.config")
    fname = Path(os.path.expanduser(os.path.expandvars(str(path or os.environ.get("CLIKERNEL_CONFIG") or CONFIG_FILE))))

    if not fname.exists():
        log.info("No configuration found at %s, using defaults", fname)
        return Configuration(logger=log)

    log.info("Loading %s", fname)
    with fname.open("rb") as f:
        try:
            content = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            log.critical("Problem reading %s: %s", fname, e)
            raise

    section = content.get("tool", {}).get(CONFIG_SECTION, {}) if fname.name == "pyproject.toml" else content.get(CONFIG_SECTION, {})
    for error in validate_config(section):
        log.warning(error)
    return Configuration(section, logger=log)
