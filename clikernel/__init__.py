"""clikernel - a kernel for modular command-line applications.

Commands are declared as independent units (name, aliases, namespace, typed
arguments and flags) and dispatched at runtime by the `Kernel`, which
discovers them through loaders and runs them through an ordered hook pipeline.
"""

from .command import BaseCommand
from .descriptor import CommandSpec
from .kernel import Kernel
from .loaders import FsLoader, ListLoader
from .models import CommandMetaData, CommandOptions, KernelState, ParsedInput

__all__ = [
    "BaseCommand",
    "CommandMetaData",
    "CommandOptions",
    "CommandSpec",
    "FsLoader",
    "Kernel",
    "KernelState",
    "ListLoader",
    "ParsedInput",
]
