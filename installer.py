"""
Mod installer: decides how staged mod content reaches the mods folder.

Farming Simulator loads every mod as a single ``.zip`` dropped into its mods
folder, so the installer only ever hands the host archives to copy:

1. Content that already holds ``.zip`` files (a zip inside the download) is
   passed through untouched, each archive flattened to the mods root.
2. Loose content is repacked into ``<ModName>.zip`` inside the staging
   directory and that one archive is copied.

Raw per-file copy instructions are never emitted; the host's whole-file copy
breaks on multi-gigabyte files, while a single archive copy does not.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from archiver import create_archive
from filesystem import list_directory
from game_config import GameConfig
from plugin_schema import CopyInstruction, InstallPlan, SupportedResult

_log = logging.getLogger(__name__)


def archive_name_for(staging_path: str | Path, config: GameConfig) -> str:
    """``C:/tmp/ModName.installing`` -> ``ModName.zip``."""
    name = Path(staging_path).name
    suffix = config.staging_suffix
    if suffix and name.endswith(suffix) and name != suffix:
        name = name[: -len(suffix)]
    return name + config.mod_ext


def prebuilt_archives(files: Sequence[str | Path], config: GameConfig) -> list[str | Path]:
    """Members of ``files`` whose extension is exactly the mod archive one."""
    return [f for f in files if Path(f).suffix == config.mod_ext]


async def test_supported_content(
    files: Sequence[str | Path], game_id: str, config: GameConfig
) -> SupportedResult:
    return SupportedResult(supported=game_id == config.game_id, required_files=[])


async def install_content(
    files: Sequence[str | Path], destination_path: str | Path, config: GameConfig
) -> InstallPlan:
    archives = prebuilt_archives(files, config)

    # Already archived: copy as-is, no repack.
    if archives:
        _log.debug("Passing through %d prebuilt archive(s)", len(archives))
        return InstallPlan(
            instructions=[
                CopyInstruction(source=str(f), destination=Path(f).name)
                for f in archives
            ]
        )

    destination = Path(destination_path)
    archive_name = archive_name_for(destination, config)
    archive_path = destination / archive_name
    entries = [destination / name for name in await list_directory(destination)]

    _log.info("Repacking %d entry(ies) into %s", len(entries), archive_path)
    await create_archive(archive_path, entries, recursive=True)

    return InstallPlan(
        instructions=[CopyInstruction(source=archive_name, destination=archive_name)]
    )
