"""Shared fixtures: a small 3.3.5a-shaped base tree and a workspace root."""

from pathlib import Path

import pytest

from realmctl.base.profiles import chromie_335a
from realmctl.base.scanner import build_manifest

BASE_FILES = {
    "Wow.exe": b"MZ executable",
    "Data/common.MPQ": b"common archive",
    "Data/lichking.MPQ": b"lichking archive",
    "Data/patch.MPQ": b"patch archive",
    "Data/enUS/realmlist.wtf": b"set realmlist logon.example.org",
    "Screenshots/first.jpg": b"jpeg",
    "WTF/Config.wtf": b'SET gxResolution "1920x1080"',
    "Interface/AddOns/MyAddon/MyAddon.toc": b"## Title: MyAddon",
    "Cache/WDB/enUS/creaturecache.wdb": b"cache",
    "Logs/Combat.log": b"log",
}

BASE_DIRS = ["WTF/Account"]


def make_base_tree(base_dir: Path, files: dict[str, bytes], dirs: list[str] = ()) -> Path:
    for rel, content in files.items():
        path = base_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    for rel in dirs:
        (base_dir / rel).mkdir(parents=True, exist_ok=True)
    return base_dir


@pytest.fixture
def base_files() -> dict[str, bytes]:
    return dict(BASE_FILES)


@pytest.fixture
def make_base():
    """Factory writing an arbitrary base tree."""
    return make_base_tree


@pytest.fixture
def raw_base(tmp_path: Path) -> Path:
    """The sample base tree, not yet scanned."""
    return make_base_tree(tmp_path / "base", BASE_FILES, BASE_DIRS)


@pytest.fixture
def base_dir(raw_base: Path) -> Path:
    """The sample base with a persisted manifest."""
    build_manifest(raw_base, chromie_335a())
    return raw_base


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    return tmp_path / "workspaces"
