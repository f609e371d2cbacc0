"""Tests for the process entry point."""

import sys
import textwrap

import pytest

from clikernel.cli import build_kernel, main, run, use_param
from clikernel.config import Configuration

GREET_SOURCE = textwrap.dedent(
    """
    from clikernel import BaseCommand, CommandSpec


    class Command(BaseCommand):
        spec = CommandSpec("greet", description="Say hello").define_argument("name", type="string")

        async def run(self):
            self.logger.log(f"Hello {self.name}")
    """
)


@pytest.fixture
def config(tmp_path, test_logger):
    commands = tmp_path / "commands"
    commands.mkdir()
    (commands / "greet.py").write_text(GREET_SOURCE)
    (commands / "skipped.py").write_text("")
    return Configuration(
        {"binary": "acme", "version": "1.2.0", "commands_paths": [str(commands)], "ignore_paths": ["skipped.py"]},
        logger=test_logger,
    )


def test_use_param():
    argv = ["--config", "x.toml", "greet"]
    assert use_param(argv, "--config") == "x.toml"
    assert argv == ["greet"]
    assert use_param(argv, "--debug") == ""


@pytest.mark.asyncio
async def test_build_kernel(config):
    kernel = build_kernel(config)
    kernel.ui.switch_mode("raw")
    assert kernel.info == {"binary": "acme", "version": "1.2.0"}
    assert [flag.flag_name for flag in kernel.flags] == ["help"]

    assert await run(kernel, ["greet", "world"]) == 0
    assert kernel.ui.logger.get_logs() == [{"message": "Hello world", "stream": "stdout"}]


@pytest.mark.asyncio
async def test_help_flag(config):
    kernel = build_kernel(config)
    kernel.ui.switch_mode("raw")

    assert await run(kernel, ["greet", "world", "--help"]) == 0
    logs = [log["message"] for log in kernel.ui.logger.get_logs()]
    assert "  acme greet <name>" in logs
    assert "Hello world" not in logs
    assert kernel.main_command is None


@pytest.mark.asyncio
async def test_help_flag_with_invalid_input(config):
    kernel = build_kernel(config)
    kernel.ui.switch_mode("raw")

    # help is shown, then the missing argument is reported
    assert await run(kernel, ["greet", "--help"]) == 1
    logs = kernel.ui.logger.get_logs()
    assert "  acme greet <name>" in [log["message"] for log in logs]
    assert logs[-1] == {"message": 'bg_red(white(  ERROR  )) Missing required argument "name"', "stream": "stderr"}


@pytest.mark.asyncio
async def test_unknown_command(config):
    kernel = build_kernel(config)
    kernel.ui.switch_mode("raw")
    assert await run(kernel, ["gret"]) == 1


def test_main(config, monkeypatch, tmp_path, capsys):
    config_file = tmp_path / "clikernel.toml"
    config_file.write_text(f"[clikernel]\ncommands_paths = [{config.get_list('commands_paths')[0]!r}]\n")
    monkeypatch.setattr(sys, "argv", ["clikernel", "--config", str(config_file), "greet", "you"])

    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 0
    assert "Hello you" in capsys.readouterr().out


def test_main_invalid_config(monkeypatch, tmp_path):
    config_file = tmp_path / "clikernel.toml"
    config_file.write_text("[clikernel\n")
    monkeypatch.setattr(sys, "argv", ["clikernel", "--config", str(config_file)])

    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1
