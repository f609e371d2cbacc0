"""Built-in commands."""

from .help import HelpCommand
from .list import ListCommand

__all__ = ["HelpCommand", "ListCommand"]
