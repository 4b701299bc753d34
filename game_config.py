"""
Static identity and paths for Farming Simulator 19.

A single ``GameConfig`` is built at startup and handed to every host callback;
nothing in the plugin reads module-level mutable state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

MODS_DIR_ENV = "FS19_MODS_DIR"

# Nexus Mods domain, e.g. nexusmods.com/farmingsimulator19
GAME_ID = "farmingsimulator19"
GAME_NAME = "Farming Simulator 19"
GAME_EXECUTABLE = "FarmingSimulator2019.exe"

STEAM_APP_ID = "787860"
EPIC_APP_ID = "Stellula"
XBOX_APP_ID = "FocusHomeInteractiveSA.FarmingSimulator19-Window10"


def default_mods_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Mods folder under the user's Documents.

    Assumes Documents sits directly in the profile; redirected folders (e.g.
    OneDrive) need ``FS19_MODS_DIR``.
    """
    env = os.environ if environ is None else environ
    override = env.get(MODS_DIR_ENV)
    if override:
        return Path(override)
    home = env.get("USERPROFILE") or env.get("HOME") or str(Path.home())
    return Path(home) / "Documents" / "My Games" / "FarmingSimulator2019" / "mods"


@dataclass(frozen=True)
class GameConfig:
    mods_path: Path
    game_id: str = GAME_ID
    name: str = GAME_NAME
    executable: str = GAME_EXECUTABLE
    logo: str = "gameart.jpg"
    steam_app_id: str = STEAM_APP_ID
    epic_app_id: str = EPIC_APP_ID
    xbox_app_id: str = XBOX_APP_ID
    mod_ext: str = ".zip"
    staging_suffix: str = ".installing"
    version_file: str = "VERSION"
    installer_id: str = "farmingsimulator-mod"
    installer_priority: int = 25
    required_files: tuple[str, ...] = (GAME_EXECUTABLE,)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> GameConfig:
        return cls(mods_path=default_mods_path(environ))

    @property
    def store_ids(self) -> tuple[str, ...]:
        """App ids tried, in order, when looking the game up in the stores."""
        return (self.epic_app_id, self.steam_app_id, self.xbox_app_id)

    @property
    def environment(self) -> dict[str, str]:
        return {"SteamAPPId": self.steam_app_id}

    @property
    def details(self) -> dict[str, str]:
        return {
            "steamAppId": self.steam_app_id,
            "epicAppId": self.epic_app_id,
            "xboxAppId": self.xbox_app_id,
        }
