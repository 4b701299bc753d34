"""
Schema for every value the plugin hands to the mod manager host.

The host speaks camelCase (``requiredFiles``, ``addInfo``, ``appExecName``), so
each model aliases its snake_case fields; serialise with
``model_dump(by_alias=True)`` before crossing the boundary.

Install plan returned by the installer:

{
    "instructions": [
        {"type": "copy", "source": "ModName.zip", "destination": "ModName.zip"}
    ]
}
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HostModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Installation ──────────────────────────────────────────────────────


class CopyInstruction(HostModel):
    """Copy ``source`` (absolute, or relative to the staging dir) to
    ``destination`` (relative to the final mod folder)."""

    type: Literal["copy"] = "copy"
    source: str
    destination: str


class InstallPlan(HostModel):
    instructions: list[CopyInstruction] = Field(default_factory=list)


class SupportedResult(HostModel):
    supported: bool
    required_files: list[str] = Field(default_factory=list)


# ── Launcher ──────────────────────────────────────────────────────────


class LauncherParameter(HostModel):
    app_exec_name: str


class LauncherAddInfo(HostModel):
    app_id: str
    parameters: list[LauncherParameter] = Field(default_factory=list)


class LauncherInfo(HostModel):
    launcher: str
    add_info: LauncherAddInfo


# ── Registration ──────────────────────────────────────────────────────


class GameDescriptor(HostModel):
    """Everything the host needs to manage the game, callbacks included."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    merge_mods: bool = True
    query_path: Callable[[], Awaitable[str]]
    supported_tools: list[dict[str, Any]] = Field(default_factory=list)
    query_mod_path: Callable[[], str]
    logo: str
    executable: Callable[[], str]
    required_files: list[str]
    setup: Callable[[], Awaitable[None]]
    requires_launcher: Callable[[str], Awaitable[LauncherInfo | None]]
    get_game_version: Callable[[str], Awaitable[str | None]]
    environment: dict[str, str] = Field(default_factory=dict)
    details: dict[str, str] = Field(default_factory=dict)


class InstallerDescriptor(HostModel):
    model_config = ConfigDict(frozen=True)

    id: str
    priority: int
    test_supported: Callable[..., Awaitable[SupportedResult]]
    install: Callable[..., Awaitable[InstallPlan]]


class PluginRegistration(HostModel):
    model_config = ConfigDict(frozen=True)

    game: GameDescriptor
    installer: InstallerDescriptor

    def describe(self) -> dict[str, Any]:
        """Serialisable view of the registration with callbacks left out."""
        game = self.game.model_dump(
            by_alias=True,
            exclude={
                "query_path",
                "query_mod_path",
                "executable",
                "setup",
                "requires_launcher",
                "get_game_version",
            },
        )
        game["executable"] = self.game.executable()
        game["modPath"] = self.game.query_mod_path()
        installer = self.installer.model_dump(
            by_alias=True, exclude={"test_supported", "install"}
        )
        return {"game": game, "installer": installer}
