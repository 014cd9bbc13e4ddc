"""Tests for base/store.py — manifest persistence."""

import json
from pathlib import Path

import pytest

from realmctl.base.store import load_manifest, manifest_path, write_manifest
from realmctl.base.types import Manifest, Role
from realmctl.errors import ManifestError


@pytest.fixture
def manifest(tmp_path: Path) -> Manifest:
    return Manifest(
        profile="chromie-3.3.5a",
        base_path=tmp_path,
        created_at="1700000000",
        file_roles={"Wow.exe": Role.EXECUTABLE, "Data/common.MPQ": Role.BASE_DATA},
        checksums={"Data/common.MPQ": "deadbeef"},
        version="3.3.5a",
    )


class TestManifest:
    def test_mappings_are_read_only(self, manifest: Manifest):
        with pytest.raises(TypeError):
            manifest.file_roles["Extra"] = Role.OTHER
        with pytest.raises(TypeError):
            manifest.checksums["Wow.exe"] = "00000000"

    def test_caller_dict_is_copied(self, tmp_path: Path):
        roles = {"Wow.exe": Role.EXECUTABLE}
        manifest = Manifest(profile="p", base_path=tmp_path, created_at="0", file_roles=roles)
        roles["Extra"] = Role.OTHER
        assert "Extra" not in manifest.file_roles


class TestManifestPath:
    def test_path(self, tmp_path: Path):
        assert manifest_path(tmp_path) == tmp_path / "manifest.json"


class TestWriteManifest:
    def test_write_and_reload(self, tmp_path: Path, manifest: Manifest):
        write_manifest(manifest, tmp_path)
        loaded = load_manifest(tmp_path)
        assert loaded == manifest

    def test_no_temp_files_left(self, tmp_path: Path, manifest: Manifest):
        write_manifest(manifest, tmp_path)
        assert [p.name for p in tmp_path.iterdir()] == ["manifest.json"]

    def test_roles_stored_by_name(self, tmp_path: Path, manifest: Manifest):
        write_manifest(manifest, tmp_path)
        data = json.loads(manifest_path(tmp_path).read_text())
        assert data["file_roles"]["Data/common.MPQ"] == "BaseData"


class TestLoadManifest:
    def test_missing(self, tmp_path: Path):
        with pytest.raises(ManifestError, match="No manifest"):
            load_manifest(tmp_path)

    def test_corrupt_json(self, tmp_path: Path):
        manifest_path(tmp_path).write_text("{invalid json")
        with pytest.raises(ManifestError, match="Failed to read manifest"):
            load_manifest(tmp_path)

    def test_missing_profile(self, tmp_path: Path):
        manifest_path(tmp_path).write_text(json.dumps({"file_roles": {}}))
        with pytest.raises(ManifestError, match="missing 'profile'"):
            load_manifest(tmp_path)

    def test_unknown_role(self, tmp_path: Path):
        data = {"profile": "p", "file_roles": {"x": "Sparkly"}}
        manifest_path(tmp_path).write_text(json.dumps(data))
        with pytest.raises(ManifestError, match="Unknown role"):
            load_manifest(tmp_path)

    def test_checksum_for_non_base_data_rejected(self, tmp_path: Path):
        data = {
            "profile": "p",
            "file_roles": {"Wow.exe": "Executable"},
            "checksums": {"Wow.exe": "00000000"},
        }
        manifest_path(tmp_path).write_text(json.dumps(data))
        with pytest.raises(ManifestError, match="non-BaseData"):
            load_manifest(tmp_path)
