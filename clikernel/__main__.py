"""Run the clikernel entry point."""

from .cli import main

main()
