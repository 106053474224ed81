"""
Filesystem probes — existence checks, directory listings, globbing.

Blocking ``os``/``pathlib`` calls are pushed onto a worker thread so
they become suspension points on the event loop.  Every probe answers
the question it was asked and never raises: an unreadable path is
simply "not a file" / "no entries".
"""

from __future__ import annotations

import asyncio
import glob
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def _is_file(path: str) -> bool:
    try:
        return Path(path).is_file()
    except OSError:
        return False


def _is_dir(path: str) -> bool:
    try:
        return Path(path).is_dir()
    except OSError:
        return False


def _list_dir(path: str, dirs_only: bool) -> list[str]:
    target = Path(path)
    try:
        entries = [p for p in target.iterdir() if not dirs_only or p.is_dir()]
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return []
    return sorted(p.name for p in entries)


async def is_file(path: str) -> bool:
    """Whether ``path`` exists and is a regular file (symlinks followed)."""
    return await asyncio.to_thread(_is_file, path)


async def is_dir(path: str) -> bool:
    """Whether ``path`` exists and is a directory."""
    return await asyncio.to_thread(_is_dir, path)


async def list_dir(path: str, dirs_only: bool = False) -> list[str]:
    """Sorted entry names of a directory, or [] if it can't be read."""
    return await asyncio.to_thread(_list_dir, path, dirs_only)


def _glob(pattern: str) -> list[str]:
    try:
        return sorted(glob.glob(pattern))
    except OSError:
        return []


async def glob_paths(pattern: str) -> list[str]:
    """Sorted matches of a wildcard pattern (``*``, ``?``)."""
    return await asyncio.to_thread(_glob, pattern)
