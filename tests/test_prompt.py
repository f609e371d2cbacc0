"""Tests for the prompt collaborator."""

from unittest.mock import AsyncMock

import pytest

from clikernel.errors import PromptCancelled
from clikernel.prompt import Prompt


def answer(mocker, name, value):
    "Patch questionary.`name` so that the question answers `value`"
    question = mocker.patch(f"clikernel.prompt.questionary.{name}")
    question.return_value.ask_async = AsyncMock(return_value=value)
    return question


@pytest.mark.asyncio
async def test_ask(mocker):
    question = answer(mocker, "text", "Home")
    assert await Prompt().ask("Controller name?", default="Index") == "Home"
    question.assert_called_once_with("Controller name?", default="Index")


@pytest.mark.asyncio
async def test_ask_with_validation(mocker):
    question = answer(mocker, "text", "Home")

    def validate(value):
        return bool(value) or "required"

    await Prompt().ask("Controller name?", validate=validate)
    assert question.call_args.kwargs["validate"] is validate


@pytest.mark.asyncio
async def test_secure(mocker):
    answer(mocker, "password", "s3cret")
    assert await Prompt().secure("Password?") == "s3cret"


@pytest.mark.asyncio
async def test_confirm(mocker):
    question = answer(mocker, "confirm", True)
    assert await Prompt().confirm("Continue?", default=True) is True
    question.assert_called_once_with("Continue?", default=True)


@pytest.mark.asyncio
async def test_choice(mocker):
    question = answer(mocker, "select", "mysql")
    assert await Prompt().choice("Database?", ["sqlite", "mysql"]) == "mysql"
    choices = question.call_args.kwargs["choices"]
    assert [choice.value for choice in choices] == ["sqlite", "mysql"]


@pytest.mark.asyncio
async def test_multiple(mocker):
    question = answer(mocker, "checkbox", ["b"])
    assert await Prompt().multiple("Pick", {"A": "a", "B": "b"}, default=["a"]) == ["b"]
    choices = question.call_args.kwargs["choices"]
    assert [(choice.title, choice.value, choice.checked) for choice in choices] == [("A", "a", True), ("B", "b", False)]


@pytest.mark.asyncio
async def test_cancelled(mocker):
    answer(mocker, "text", None)
    with pytest.raises(PromptCancelled):
        await Prompt().ask("Name?")
