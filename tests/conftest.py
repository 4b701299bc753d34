"""
Shared fixtures and helpers for the Farming Simulator 19 support test suite.
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from game_config import GameConfig
from store_locator import StoreGame


class FakeStore:
    """In-memory store: ``{app_id: game_path}``; optionally raises on lookup."""

    def __init__(self, name: str, games=None, error: Exception | None = None):
        self.name = name
        self.games = dict(games or {})
        self.error = error
        self.calls: list[str] = []

    def find_game(self, app_id):
        self.calls.append(app_id)
        if self.error is not None:
            raise self.error
        path = self.games.get(app_id)
        if path is None:
            return None
        return StoreGame(app_id=app_id, game_path=Path(path), store=self.name)


@pytest.fixture
def config(tmp_path):
    return GameConfig(mods_path=tmp_path / "Documents" / "My Games" / "FarmingSimulator2019" / "mods")


@pytest.fixture
def staging(tmp_path):
    """Staging dir ``ModName.installing`` holding loose files."""
    root = tmp_path / "ModName.installing"
    (root / "data").mkdir(parents=True)
    (root / "readme.txt").write_text("read me", encoding="utf-8")
    (root / "data" / "crops.xml").write_text("<crops/>", encoding="utf-8")
    return root


@pytest.fixture
def mock_archiver():
    """Patch the installer's archive creation so nothing is written."""
    with patch("installer.create_archive", new_callable=AsyncMock) as m:
        yield m
