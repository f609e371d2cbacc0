"""Prompt collaborator handed to every command.

Thin async wrapper above questionary. Every method raises `PromptCancelled`
when the user aborts the prompt (Ctrl-C), so commands never have to deal
with the `None` answers questionary returns in that case.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import questionary
from questionary import Choice

from .errors import PromptCancelled
from .logging_setup import get_logger

__all__ = ["Prompt", "Validator"]

Validator = Callable[[str], bool | str]
""" Return True when valid, or an error message """

ChoicesType = Sequence[str] | Mapping[str, Any]


def _to_choices(choices: ChoicesType, checked: Iterable[Any] = ()) -> list[Choice]:
    """Build questionary choices from titles, or from a title -> value mapping."""
    checked = set(checked)
    if isinstance(choices, Mapping):
        return [Choice(title=title, value=value, checked=value in checked) for title, value in choices.items()]
    return [Choice(title=title, value=title, checked=title in checked) for title in choices]


class Prompt:
    """Ask questions to the user."""

    def __init__(self) -> None:
        self.log = get_logger("clikernel.prompt")

    async def _ask(self, question: questionary.Question) -> Any:  # noqa: ANN401
        answer = await question.ask_async()
        if answer is None:
            self.log.debug("prompt cancelled")
            raise PromptCancelled
        return answer

    async def ask(self, message: str, default: str = "", validate: Validator | None = None) -> str:
        """Ask for a line of text.

        Args:
            message: The question
            default: Pre-filled answer
            validate: Optional validator
        """
        if validate is None:
            return str(await self._ask(questionary.text(message, default=default)))
        return str(await self._ask(questionary.text(message, default=default, validate=validate)))

    async def secure(self, message: str, validate: Validator | None = None) -> str:
        """Ask for a secret, without echoing the input."""
        if validate is None:
            return str(await self._ask(questionary.password(message)))
        return str(await self._ask(questionary.password(message, validate=validate)))

    async def confirm(self, message: str, default: bool = False) -> bool:
        """Ask a yes / no question."""
        return bool(await self._ask(questionary.confirm(message, default=default)))

    async def choice(self, message: str, choices: ChoicesType, default: str | None = None) -> Any:  # noqa: ANN401
        """Ask to pick one of `choices`.

        Returns:
            The picked title, or its value when `choices` is a mapping
        """
        return await self._ask(questionary.select(message, choices=_to_choices(choices), default=default))

    async def multiple(self, message: str, choices: ChoicesType, default: Iterable[Any] = ()) -> list[Any]:
        """Ask to pick any number of `choices`.

        Args:
            message: The question
            choices: Titles, or a title -> value mapping
            default: Values checked initially
        """
        return list(await self._ask(questionary.checkbox(message, choices=_to_choices(choices, default))))
