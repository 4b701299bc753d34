"""
Locate installed games through the platform stores.

Each store knows how to turn one of its own app ids into an install path:

    steam   appmanifest_<id>.acf in any library listed by libraryfolders.vdf
    epic    *.item launcher manifests whose AppName matches
    xbox    AppModel package keys named <id>_<version>_... (Windows only)

``StoreLocator.find_by_app_id`` tries every id against every store and
returns the first hit, raising ``GameNotFoundError`` otherwise.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol, Sequence

_log = logging.getLogger(__name__)

_VDF_PAIR_RE = re.compile(r'"([^"\\]*(?:\\.[^"\\]*)*)"\s+"([^"\\]*(?:\\.[^"\\]*)*)"')

XBOX_PACKAGES_KEY = (
    r"Local Settings\Software\Microsoft\Windows\CurrentVersion\AppModel\Repository\Packages"
)


class GameNotFoundError(Exception):
    """None of the requested app ids is installed in any known store."""

    def __init__(self, app_ids: Sequence[str]):
        self.app_ids = list(app_ids)
        super().__init__(f"Game not found (tried app ids: {', '.join(self.app_ids)})")


@dataclass(frozen=True)
class StoreGame:
    app_id: str
    game_path: Path
    store: str


class GameStore(Protocol):
    name: str

    def find_game(self, app_id: str) -> Optional[StoreGame]: ...


# ── Steam ─────────────────────────────────────────────────────────────


def detect_steam_path() -> Path:
    if os.name == "nt":
        import winreg

        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, r"Software\Valve\Steam") as key:
                return Path(winreg.QueryValueEx(key, "SteamPath")[0]).expanduser()
        except OSError:
            pass
        try:
            with winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE, r"SOFTWARE\Wow6432Node\Valve\Steam"
            ) as key:
                return Path(winreg.QueryValueEx(key, "InstallPath")[0]).expanduser()
        except OSError:
            pass
        return Path(r"C:\Program Files (x86)\Steam")
    if sys.platform == "darwin":
        return Path.home() / "Library/Application Support/Steam"
    return Path.home() / ".steam/steam"


def _unescape_vdf(value: str) -> str:
    return value.replace("\\\\", "\\").replace('\\"', '"')


def read_vdf_pairs(text: str) -> list[tuple[str, str]]:
    """Flat list of ``"key" "value"`` pairs from a KeyValues (vdf/acf) text.

    Nesting is ignored; library and app manifests only need a handful of
    leaf values.
    """
    return [
        (_unescape_vdf(k), _unescape_vdf(v)) for k, v in _VDF_PAIR_RE.findall(text)
    ]


class SteamStore:
    name = "steam"

    def __init__(self, steam_path: Optional[Path] = None):
        self._steam_path = steam_path

    @property
    def steam_path(self) -> Path:
        if self._steam_path is None:
            self._steam_path = detect_steam_path()
        return self._steam_path

    def library_paths(self) -> list[Path]:
        libraries = [self.steam_path]
        vdf = self.steam_path / "steamapps" / "libraryfolders.vdf"
        if vdf.is_file():
            for key, value in read_vdf_pairs(vdf.read_text(encoding="utf-8", errors="replace")):
                if key.lower() == "path":
                    libraries.append(Path(value))
                elif key.isdigit() and Path(value).is_dir():
                    # pre-2021 clients: "1" "D:\\SteamLibrary"
                    libraries.append(Path(value))
        seen: set[str] = set()
        unique = []
        for lib in libraries:
            marker = os.path.normcase(str(lib))
            if marker not in seen:
                seen.add(marker)
                unique.append(lib)
        return unique

    def find_game(self, app_id: str) -> Optional[StoreGame]:
        if not app_id.isdigit():
            return None
        for library in self.library_paths():
            manifest = library / "steamapps" / f"appmanifest_{app_id}.acf"
            if not manifest.is_file():
                continue
            pairs = dict(
                (k.lower(), v)
                for k, v in read_vdf_pairs(manifest.read_text(encoding="utf-8", errors="replace"))
            )
            install_dir = pairs.get("installdir")
            if not install_dir:
                _log.warning("Steam manifest %s has no installdir", manifest)
                continue
            return StoreGame(
                app_id=app_id,
                game_path=library / "steamapps" / "common" / install_dir,
                store=self.name,
            )
        return None


# ── Epic ──────────────────────────────────────────────────────────────


def default_epic_manifests_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    program_data = env.get("PROGRAMDATA", r"C:\ProgramData")
    return Path(program_data) / "Epic" / "EpicGamesLauncher" / "Data" / "Manifests"


class EpicStore:
    name = "epic"

    def __init__(self, manifests_dir: Optional[Path] = None):
        self.manifests_dir = manifests_dir or default_epic_manifests_dir()

    def find_game(self, app_id: str) -> Optional[StoreGame]:
        if not self.manifests_dir.is_dir():
            return None
        for item in sorted(self.manifests_dir.glob("*.item")):
            try:
                data = json.loads(item.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                _log.warning("Could not read Epic manifest %s: %s", item.name, exc)
                continue
            if data.get("AppName") == app_id and data.get("InstallLocation"):
                return StoreGame(
                    app_id=app_id,
                    game_path=Path(data["InstallLocation"]),
                    store=self.name,
                )
        return None


# ── Xbox ──────────────────────────────────────────────────────────────


class XboxStore:
    name = "xbox"

    def find_game(self, app_id: str) -> Optional[StoreGame]:
        if sys.platform != "win32":
            return None
        import winreg

        prefix = f"{app_id}_".lower()
        with winreg.OpenKey(winreg.HKEY_CLASSES_ROOT, XBOX_PACKAGES_KEY) as packages:
            index = 0
            while True:
                try:
                    package_name = winreg.EnumKey(packages, index)
                except OSError:
                    break
                index += 1
                if not package_name.lower().startswith(prefix):
                    continue
                with winreg.OpenKey(packages, package_name) as package:
                    root = winreg.QueryValueEx(package, "PackageRootFolder")[0]
                return StoreGame(app_id=app_id, game_path=Path(root), store=self.name)
        return None


# ── Locator ───────────────────────────────────────────────────────────


class StoreLocator:
    """Query a set of stores for the first matching installation."""

    def __init__(self, stores: Optional[Iterable[GameStore]] = None):
        if stores is None:
            stores = (SteamStore(), EpicStore(), XboxStore())
        self.stores: list[GameStore] = list(stores)

    def find_by_app_id(
        self, app_ids: Sequence[str], store: Optional[str] = None
    ) -> StoreGame:
        candidates = [s for s in self.stores if store is None or s.name == store]
        for app_id in app_ids:
            for candidate in candidates:
                try:
                    found = candidate.find_game(app_id)
                except Exception as exc:
                    _log.warning(
                        "%s lookup for %s failed: %s", candidate.name, app_id, exc
                    )
                    continue
                if found is not None:
                    _log.info(
                        "Found %s in %s at %s", app_id, candidate.name, found.game_path
                    )
                    return found
        raise GameNotFoundError(app_ids)
