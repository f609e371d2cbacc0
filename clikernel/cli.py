"""Process entry point: `clikernel [--config FILE] [command] [args...]`.

Commands are discovered below the directories listed in the `commands_paths`
configuration option.
"""

import asyncio
import sys
import tomllib
from collections.abc import Sequence

from .command import BaseCommand
from .commands.help import HelpCommand
from .config import Configuration, load_config
from .kernel import Kernel
from .loaders import FsLoader, ListLoader
from .logging_setup import get_logger, init_logger
from .models import ExitCode, ParsedInput

__all__ = ["build_kernel", "main", "run", "use_param"]


def use_param(argv: list[str], txt: str) -> str:
    """Check if parameter `txt` is in `argv`.

    if found, removes it from `argv` & returns the argument value
    """
    v = ""
    if txt in argv:
        i = argv.index(txt)
        v = argv[i + 1] if i + 1 < len(argv) else ""
        del argv[i : i + 2]
    return v


async def show_help(command: type[BaseCommand], kernel: Kernel, parsed: ParsedInput) -> bool:  # noqa: ARG001
    """Listener of the global `--help` flag: show the help of the main command instead of running it."""
    instance = await kernel.exec("help", [command.spec.command_name])
    kernel.exit_code = instance.exit_code
    return True


def build_kernel(config: Configuration) -> Kernel:
    """Create a kernel serving the built-in commands and the configured command directories."""
    kernel = Kernel()
    kernel.info["binary"] = config.get_str("binary")
    kernel.info["version"] = config.get_str("version")

    kernel.add_loader(ListLoader([HelpCommand]))
    ignore_paths = config.get_list("ignore_paths")
    for path in config.get_list("commands_paths"):
        kernel.add_loader(FsLoader(path, ignore_paths))

    kernel.define_flag("help", type="boolean", description="View help for a given command")
    kernel.on("help", show_help)
    return kernel


async def run(kernel: Kernel, argv: Sequence[str]) -> int:
    """Run the main command, waiting for it when it stays alive.

    Returns:
        The exit code
    """
    exit_code = await kernel.handle(argv)
    if exit_code is None:
        exit_code = await kernel.wait_for_termination()
    return int(exit_code or ExitCode.SUCCESS)


def main() -> None:
    """Run the command."""
    argv = sys.argv[1:]
    debug_flag = use_param(argv, "--debug")
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    log = get_logger("startup")

    exit_code = int(ExitCode.FAILURE)
    try:
        config = load_config(use_param(argv, "--config") or None)
        if not debug_flag and (config.get_bool("debug") or config.get_str("log_file")):
            init_logger(filename=config.get_str("log_file") or None, force_debug=config.get_bool("debug"))
        exit_code = asyncio.run(run(build_kernel(config), argv))
    except KeyboardInterrupt:
        exit_code = 130
    except tomllib.TOMLDecodeError as e:
        log.critical("Invalid TOML syntax in the config file: %s", e)
    except Exception:  # pylint: disable=W0718
        log.critical("Unhandled exception:", exc_info=True)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
