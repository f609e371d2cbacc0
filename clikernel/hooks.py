"""Hook pipeline: ordered observers around command resolution and execution.

Each phase holds its handlers in registration order. Running a phase calls
them one after the other, awaiting coroutines before moving to the next one.
A failing handler stops the phase and the error propagates to the caller.

Phase arguments:

- finding(command_name)
- loading(metadata)
- loaded(command_class)
- executing(command, is_main)
- executed(command, is_main)
- terminating(main_command_or_none)
"""

from collections.abc import Callable
from typing import Any

from .aioops import maybe_await
from .logging_setup import get_logger
from .models import HookPhase

__all__ = ["HookHandler", "HookPipeline"]

HookHandler = Callable[..., Any]


class HookPipeline:
    """Registry of phase -> ordered handlers."""

    def __init__(self) -> None:
        self._handlers: dict[HookPhase, list[HookHandler]] = {phase: [] for phase in HookPhase}
        self.log = get_logger("clikernel.hooks")

    def add(self, phase: HookPhase | str, handler: HookHandler) -> "HookPipeline":
        """Register `handler` for `phase`.

        Raises:
            ValueError: unknown phase name
        """
        self._handlers[HookPhase(phase)].append(handler)
        return self

    def remove(self, phase: HookPhase | str, handler: HookHandler) -> None:
        """Unregister `handler` from `phase` (no-op when not registered)."""
        handlers = self._handlers[HookPhase(phase)]
        if handler in handlers:
            handlers.remove(handler)

    def has(self, phase: HookPhase | str) -> bool:
        """Return True when at least one handler is registered for `phase`."""
        return bool(self._handlers[HookPhase(phase)])

    def handlers(self, phase: HookPhase | str) -> list[HookHandler]:
        """Return a copy of the handlers registered for `phase`."""
        return list(self._handlers[HookPhase(phase)])

    async def run(self, phase: HookPhase | str, *args: Any) -> None:  # noqa: ANN401
        """Run every handler of `phase` sequentially with `args`."""
        phase = HookPhase(phase)
        handlers = list(self._handlers[phase])
        if handlers:
            self.log.debug("running %d %s hook(s)", len(handlers), phase)
        for handler in handlers:
            await maybe_await(handler(*args))
