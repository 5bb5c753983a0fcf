"""Filesystem helpers shared by the store and the command line tool."""

import logging
from pathlib import Path

import aiofiles.os
from aiofiles.ospath import exists as _exists

_LOGGER = logging.getLogger(__name__)

MD_SUFFIX = ".md"

__all__ = [
    "exists",
    "ensure_md_path",
    "ensure_dir_exists",
]


async def exists(path: Path | str) -> bool:
    """Return True if the path exists on disk."""
    return bool(await _exists(path))


def ensure_md_path(path: str) -> str:
    """Normalize a page path relative to the repository with a markdown extension.

    Leading slashes are dropped so that `/notes/todo` and `notes/todo` refer to
    the same page.
    """
    path = path.strip().lstrip("/")
    if not path.lower().endswith(MD_SUFFIX):
        path = f"{path}{MD_SUFFIX}"
    return path


async def ensure_dir_exists(path: Path) -> None:
    """Create the parent directories of the file path if needed."""
    parent = path.parent
    if not await exists(parent):
        _LOGGER.debug("Creating directory %s", parent)
        await aiofiles.os.makedirs(parent, exist_ok=True)
