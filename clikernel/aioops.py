"""Async helpers: awaiting optional coroutines and walking directories."""

__all__ = ["ailistdir", "aiisdir", "maybe_await", "walk_files"]

import inspect
import os
from collections.abc import AsyncIterator
from typing import Any

import aiofiles.os
from aiofiles.os import listdir as ailistdir

aiisdir = aiofiles.os.path.isdir


async def maybe_await(value: Any) -> Any:  # noqa: ANN401
    """Return `value`, awaiting it first when it is awaitable.

    Lets hooks, listeners, loaders and lifecycle methods be plain functions or coroutines.
    """
    if inspect.isawaitable(value):
        return await value
    return value


async def walk_files(root: str) -> AsyncIterator[str]:
    """Yield every file below `root`, recursively, as paths relative to `root`.

    Entries are visited in sorted order so discovery is deterministic.

    Raises:
        FileNotFoundError: when `root` does not exist
    """
    for entry in sorted(await ailistdir(root)):
        full_path = os.path.join(root, entry)
        if await aiisdir(full_path):
            async for child in walk_files(full_path):
                yield os.path.join(entry, child)
        else:
            yield entry
