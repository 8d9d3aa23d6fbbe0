from pathlib import Path

import pytest
from click.testing import CliRunner

from roll_markdown.config import RollConfig
from roll_markdown.filesystem import FileSystemStore
from roll_markdown.pages import PageManager


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    """An empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture()
def store(vault: Path) -> FileSystemStore:
    return FileSystemStore(vault)


@pytest.fixture()
def manager(store: FileSystemStore) -> PageManager:
    return PageManager(store, RollConfig())
