"""Depth-first file enumeration for target discovery.

The walker keeps an explicit stack of directory iterators instead of
recursing, so deeply nested trees cannot exhaust the interpreter stack.
Entries are visited in the order the operating system lists them; a
subdirectory's files are emitted at the position the subdirectory holds in
its parent's listing.
"""
from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def _list_dir(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as entries:
        return list(entries)


async def walk_files(root: str | Path, exclude: Iterable[str] = ()) -> list[Path]:
    """Return every file below *root*, depth-first in listing order.

    Parameters
    ----------
    root:
        Directory to enumerate.
    exclude:
        Directory names that are never descended into.

    Raises
    ------
    OSError
        If *root* or one of its subdirectories cannot be listed.
    """
    skipped = frozenset(exclude)
    root_path = Path(root)
    files: list[Path] = []

    stack: list[Iterator[os.DirEntry[str]]] = [
        iter(await asyncio.to_thread(_list_dir, root_path))
    ]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        if entry.is_dir():
            if entry.name in skipped:
                logger.debug("Skipping excluded directory %s", entry.path)
                continue
            stack.append(iter(await asyncio.to_thread(_list_dir, Path(entry.path))))
        else:
            files.append(Path(entry.path))

    logger.debug("Found %d file(s) under %s", len(files), root_path)
    return files
