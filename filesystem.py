"""
Awaitable filesystem helpers used by the host callbacks.

Blocking calls run on a worker thread; errors are never caught here.
"""

from __future__ import annotations

import asyncio
import errno
import os
from pathlib import Path


def _ensure_writable_directory(path: Path):
    path.mkdir(parents=True, exist_ok=True)
    if not os.access(path, os.W_OK):
        raise PermissionError(errno.EACCES, "Directory is not writable", str(path))


async def ensure_writable_directory(path: str | Path):
    """Create ``path`` (and parents) if needed and check it can be written to."""
    await asyncio.to_thread(_ensure_writable_directory, Path(path))


def _list_directory(path: Path) -> list[str]:
    return sorted(entry.name for entry in path.iterdir())


async def list_directory(path: str | Path) -> list[str]:
    """Names of the immediate entries of ``path``, sorted."""
    return await asyncio.to_thread(_list_directory, Path(path))


async def read_text_file(path: str | Path, encoding: str = "utf-8") -> str:
    return await asyncio.to_thread(Path(path).read_text, encoding=encoding)
