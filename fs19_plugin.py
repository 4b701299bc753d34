"""
Farming Simulator 19 support for the mod manager host.

``init_plugin`` builds the game and installer descriptors; ``main`` hands them
to a host context. Every callback is a bound method of ``GameSupport`` so the
configuration and store locator travel with it instead of living in globals.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

import installer
from filesystem import ensure_writable_directory, read_text_file
from game_config import GameConfig
from plugin_schema import (
    GameDescriptor,
    InstallerDescriptor,
    InstallPlan,
    LauncherAddInfo,
    LauncherInfo,
    LauncherParameter,
    PluginRegistration,
    SupportedResult,
)
from store_locator import GameNotFoundError, StoreLocator

_log = logging.getLogger(__name__)


class HostContext(Protocol):
    def register_game(self, game: GameDescriptor) -> None: ...

    def register_installer(self, installer: InstallerDescriptor) -> None: ...


class GameSupport:
    """Host callbacks for one game, bound to its configuration."""

    def __init__(self, config: GameConfig, locator: Optional[StoreLocator] = None):
        self.config = config
        self.locator = locator or StoreLocator()

    # ── Discovery ─────────────────────────────────────────────────────

    async def find_game(self) -> str:
        """Root of the installed game; raises ``GameNotFoundError`` otherwise."""
        game = await asyncio.to_thread(self.locator.find_by_app_id, self.config.store_ids)
        return str(game.game_path)

    def query_mod_path(self) -> str:
        return str(self.config.mods_path)

    def executable(self) -> str:
        return self.config.executable

    async def prepare_for_modding(self):
        await ensure_writable_directory(self.config.mods_path)

    # ── Optional metadata ─────────────────────────────────────────────

    async def requires_launcher(self, game_path: str) -> Optional[LauncherInfo]:
        """Xbox launch details when ``game_path`` is the Xbox (Game Pass) copy.

        No Xbox install, or a failed lookup, means no launcher is required.
        """
        app_id = self.config.xbox_app_id
        try:
            xbox = await asyncio.to_thread(self.locator.find_by_app_id, [app_id], "xbox")
        except GameNotFoundError:
            _log.debug("%s has no Xbox install", self.config.name)
            return None
        except Exception as exc:
            _log.warning("Xbox launcher lookup unavailable for %s: %s", self.config.name, exc)
            return None

        if str(xbox.game_path).lower() != str(game_path).lower():
            return None
        return LauncherInfo(
            launcher="xbox",
            add_info=LauncherAddInfo(
                app_id=app_id,
                parameters=[LauncherParameter(app_exec_name="Game")],
            ),
        )

    async def get_game_version(self, discovery_path: str) -> Optional[str]:
        version_file = Path(discovery_path) / self.config.version_file
        try:
            version = await read_text_file(version_file)
        except (OSError, UnicodeDecodeError) as exc:
            _log.warning("Unable to determine game version for %s: %s", self.config.name, exc)
            return None
        return version.strip()

    # ── Installer ─────────────────────────────────────────────────────

    async def test_supported_content(
        self, files: Sequence[str], game_id: str
    ) -> SupportedResult:
        return await installer.test_supported_content(files, game_id, self.config)

    async def install_content(
        self, files: Sequence[str], destination_path: str
    ) -> InstallPlan:
        return await installer.install_content(files, destination_path, self.config)

    # ── Registration ──────────────────────────────────────────────────

    def game_descriptor(self) -> GameDescriptor:
        cfg = self.config
        return GameDescriptor(
            id=cfg.game_id,
            name=cfg.name,
            merge_mods=True,
            query_path=self.find_game,
            supported_tools=[],
            query_mod_path=self.query_mod_path,
            logo=cfg.logo,
            executable=self.executable,
            required_files=list(cfg.required_files),
            setup=self.prepare_for_modding,
            requires_launcher=self.requires_launcher,
            get_game_version=self.get_game_version,
            environment=cfg.environment,
            details=cfg.details,
        )

    def installer_descriptor(self) -> InstallerDescriptor:
        return InstallerDescriptor(
            id=self.config.installer_id,
            priority=self.config.installer_priority,
            test_supported=self.test_supported_content,
            install=self.install_content,
        )


def init_plugin(
    config: Optional[GameConfig] = None, locator: Optional[StoreLocator] = None
) -> PluginRegistration:
    support = GameSupport(config or GameConfig.from_environment(), locator)
    return PluginRegistration(
        game=support.game_descriptor(), installer=support.installer_descriptor()
    )


def main(context: HostContext, config: Optional[GameConfig] = None) -> bool:
    registration = init_plugin(config)
    context.register_game(registration.game)
    context.register_installer(registration.installer)
    _log.info(
        "Registered %s with installer %s",
        registration.game.name,
        registration.installer.id,
    )
    return True
