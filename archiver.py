"""
Archive creation for repacked mods.

The format is picked from the archive suffix, mirroring how the archive is
later opened: ``.zip`` goes through ``zipfile`` and ``.7z`` through ``py7zr``.
Every entry is stored under its own base name, so a staged layout of

    ModName.installing/
    ├── readme.txt
    └── data/
        └── crops.xml

becomes an archive holding ``readme.txt`` and ``data/crops.xml``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import zipfile
from pathlib import Path
from typing import Iterable, Iterator

import py7zr

_log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".zip", ".7z"}


# ── Member collection ─────────────────────────────────────────────────


def _iter_members(
    entry: Path, recursive: bool, skip: Path
) -> Iterator[tuple[Path, str]]:
    """Yield ``(path_on_disk, archive_name)`` for one top-level entry."""
    if entry.is_dir():
        if not recursive:
            return
        yield entry, entry.name
        for root, dirs, files in os.walk(entry):
            dirs.sort()
            root_path = Path(root)
            for d in dirs:
                sub = root_path / d
                yield sub, sub.relative_to(entry.parent).as_posix()
            for f in sorted(files):
                fp = root_path / f
                if fp.resolve() == skip:
                    continue
                yield fp, fp.relative_to(entry.parent).as_posix()
    elif entry.resolve() != skip:
        yield entry, entry.name


def collect_members(
    archive_path: Path, entry_paths: Iterable[str | Path], recursive: bool = True
) -> list[tuple[Path, str]]:
    skip = archive_path.resolve()
    members: list[tuple[Path, str]] = []
    for entry in entry_paths:
        members.extend(_iter_members(Path(entry), recursive, skip))
    return members


# ── Writers ───────────────────────────────────────────────────────────


def _write_zip(archive_path: Path, members: list[tuple[Path, str]]):
    with zipfile.ZipFile(
        archive_path, "w", compression=zipfile.ZIP_DEFLATED, allowZip64=True
    ) as zf:
        for src, arcname in members:
            zf.write(src, arcname)


def _write_7z(archive_path: Path, members: list[tuple[Path, str]]):
    with py7zr.SevenZipFile(archive_path, "w") as sz:
        for src, arcname in members:
            sz.write(src, arcname)


def write_archive(
    archive_path: str | Path, entry_paths: Iterable[str | Path], recursive: bool = True
) -> Path:
    """Build a new archive at ``archive_path`` from ``entry_paths`` (blocking).

    Raises ``ValueError`` for an unsupported suffix. Any I/O error propagates
    and a partially written archive is removed first.
    """
    archive_path = Path(archive_path)
    ext = archive_path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported archive format: {ext}")

    members = collect_members(archive_path, entry_paths, recursive)
    _log.debug("Writing %d member(s) to %s", len(members), archive_path)

    try:
        if ext == ".zip":
            _write_zip(archive_path, members)
        else:
            _write_7z(archive_path, members)
    except Exception:
        archive_path.unlink(missing_ok=True)
        raise

    return archive_path


async def create_archive(
    archive_path: str | Path, entry_paths: Iterable[str | Path], recursive: bool = True
) -> Path:
    """Awaitable ``write_archive``; the archive exists once this returns."""
    return await asyncio.to_thread(
        write_archive, archive_path, list(entry_paths), recursive
    )
