" generic fixtures "
import logging

import pytest
from pytest_asyncio import fixture

from clikernel import Kernel, ListLoader

from .testtools import MakeController, Serve


def pytest_configure():
    "Runs once before all"
    from clikernel.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger():
    "A silent logger"
    logger = logging.getLogger("clikernel.tests")
    logger.addHandler(logging.NullHandler())
    return logger


@pytest.fixture
def sample_commands():
    "Commands served by the `kernel` fixture"
    return [Serve, MakeController]


@fixture
async def kernel(sample_commands):
    "A kernel rendering in raw mode"
    k = Kernel()
    k.ui.switch_mode("raw")
    k.add_loader(ListLoader(sample_commands))
    yield k
