"""Built-in command loaders."""

from .fs_loader import FsLoader
from .list_loader import ListLoader

__all__ = ["FsLoader", "ListLoader"]
