"""Tests for workspace/store.py — workspace config persistence."""

import json
from pathlib import Path

import pytest

from realmctl.errors import WorkspaceConfigError
from realmctl.workspace.store import config_path, load_workspace_config, write_workspace_config
from realmctl.workspace.types import SharingStrategy, WorkspaceConfig


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    ws = tmp_path / "main"
    ws.mkdir()
    return ws


class TestWorkspaceConfigStore:
    def test_save_and_reload(self, workspace_dir: Path):
        config = WorkspaceConfig(
            name="main",
            base_name="chromie-3.3.5a",
            base_path=Path("/games/wotlk"),
            workspace_path=workspace_dir,
            created_at="1700000000",
            sharing_rules={"Screenshots": SharingStrategy.GLOBAL},
        )
        write_workspace_config(config)
        assert load_workspace_config(workspace_dir) == config

    def test_strategies_stored_lowercase(self, workspace_dir: Path):
        config = WorkspaceConfig(
            name="main",
            base_name="b",
            base_path=Path("/b"),
            workspace_path=workspace_dir,
            sharing_rules={"wtf": SharingStrategy.WORKSPACE},
        )
        write_workspace_config(config)
        data = json.loads(config_path(workspace_dir).read_text())
        assert data["sharing_rules"] == {"wtf": "workspace"}

    def test_missing(self, workspace_dir: Path):
        with pytest.raises(WorkspaceConfigError, match="No workspace config"):
            load_workspace_config(workspace_dir)

    def test_corrupt(self, workspace_dir: Path):
        config_path(workspace_dir).write_text("{nope")
        with pytest.raises(WorkspaceConfigError, match="Failed to read"):
            load_workspace_config(workspace_dir)

    def test_bad_strategy(self, workspace_dir: Path):
        data = {"name": "main", "base_name": "b", "sharing_rules": {"wtf": "sometimes"}}
        config_path(workspace_dir).write_text(json.dumps(data))
        with pytest.raises(WorkspaceConfigError, match="Invalid sharing strategy"):
            load_workspace_config(workspace_dir)
