"""Tests for workspace/cleaner.py — clean_workspace."""

from pathlib import Path

import pytest

from realmctl.workspace.cleaner import clean_workspace
from realmctl.workspace.linker import create_workspace


@pytest.fixture
def ws(base_dir: Path, workspace_root: Path) -> Path:
    return create_workspace("main", base_dir, workspace_root).workspace_path


class TestCleanWorkspace:
    def test_empties_ephemeral_dirs(self, ws: Path):
        (ws / "Cache" / "WDB").mkdir()
        (ws / "Cache" / "WDB" / "itemcache.wdb").write_bytes(b"x")
        (ws / "Logs" / "Combat.log").write_text("hit")

        removed = clean_workspace(ws)
        assert removed == [ws / "Cache", ws / "Logs"]
        assert (ws / "Cache").is_dir() and list((ws / "Cache").iterdir()) == []
        assert list((ws / "Logs").iterdir()) == []

    def test_leaves_everything_else(self, ws: Path):
        (ws / "WTF" / "Config.wtf").write_text("SET a 1")
        clean_workspace(ws)
        assert (ws / "WTF" / "Config.wtf").read_text() == "SET a 1"
        assert (ws / "Wow.exe").is_file()

    def test_symlinked_ephemeral_dir_untouched(self, ws: Path, tmp_path: Path):
        outside = tmp_path / "shared-logs"
        outside.mkdir()
        (outside / "keep.log").write_text("x")
        (ws / "Logs").rmdir()
        (ws / "Logs").symlink_to(outside, target_is_directory=True)

        removed = clean_workspace(ws)
        assert ws / "Logs" not in removed
        assert (outside / "keep.log").is_file()

    def test_wdb_files(self, ws: Path):
        (ws / "Data" / "creaturecache.wdb").write_bytes(b"x")
        (ws / "Data" / "enUS" / "questcache.WDB").write_bytes(b"x")

        removed = clean_workspace(ws, wdb=True)
        assert ws / "Data" / "creaturecache.wdb" in removed
        assert ws / "Data" / "enUS" / "questcache.WDB" in removed
        assert (ws / "Data" / "common.MPQ").is_file()
        assert (ws / "Data" / "enUS" / "realmlist.wtf").is_file()

    def test_wdb_kept_without_flag(self, ws: Path):
        (ws / "Data" / "creaturecache.wdb").write_bytes(b"x")
        clean_workspace(ws)
        assert (ws / "Data" / "creaturecache.wdb").is_file()

    def test_already_clean(self, ws: Path):
        assert clean_workspace(ws) == []


class TestCleanFailures:
    def test_recreate_failure_is_logged_and_skipped(self, ws: Path, monkeypatch, caplog):
        (ws / "Cache" / "itemcache.wdb").write_bytes(b"x")
        (ws / "Logs" / "Combat.log").write_text("hit")
        real_mkdir = Path.mkdir

        def mkdir(self, *args, **kwargs):
            if self.name == "Cache":
                raise OSError("read-only file system")
            return real_mkdir(self, *args, **kwargs)

        monkeypatch.setattr(Path, "mkdir", mkdir)
        with caplog.at_level("WARNING", logger="realmctl"):
            removed = clean_workspace(ws)

        assert removed == [ws / "Logs"]
        assert "Failed to clean" in caplog.text
        assert list((ws / "Logs").iterdir()) == []
