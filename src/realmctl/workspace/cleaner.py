"""Ephemeral content cleanup (Cache, Logs, Errors, WDB files) for a workspace."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ..base.store import load_manifest
from ..base.types import Role
from .store import load_workspace_config

logger = logging.getLogger(__name__)


def _is_locale_dir(path: Path) -> bool:
    """Locale folders look like enUS, enGB, deDE."""
    return (
        path.is_dir()
        and not path.is_symlink()
        and len(path.name) == 4
        and path.name.isalpha()
    )


def _remove_wdb_files(directory: Path) -> list[Path]:
    removed: list[Path] = []
    if not directory.is_dir() or directory.is_symlink():
        return removed
    for path in sorted(directory.iterdir()):
        if path.suffix.lower() != ".wdb" or not path.is_file() or path.is_symlink():
            continue
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Failed to remove %s: %s", path, e)
            continue
        logger.info("Removed WDB cache: %s", path)
        removed.append(path)
    return removed


def clean_workspace(workspace_path: Path, wdb: bool = False) -> list[Path]:
    """Empty the top-level ephemeral directories of a workspace.

    Which directories are ephemeral comes from the base manifest. Each
    non-empty one is removed and recreated empty. Symlinked entries are left
    alone so shared content is never deleted. Per-item failures are logged
    and skipped.

    Args:
        workspace_path: Directory holding a workspace.json.
        wdb: Also delete ``*.wdb`` files in Data/ and its locale folders.

    Returns:
        Paths that were removed.
    """
    workspace_path = workspace_path.expanduser().absolute()
    config = load_workspace_config(workspace_path)
    manifest = load_manifest(config.base_path)

    removed: list[Path] = []
    for rel_path in manifest.entries_with_role(Role.EPHEMERAL):
        if "/" in rel_path:
            continue
        target = workspace_path / rel_path
        if target.is_symlink() or not target.is_dir():
            continue
        if not any(target.iterdir()):
            continue
        try:
            shutil.rmtree(target)
            target.mkdir()
        except OSError as e:
            logger.warning("Failed to clean %s: %s", target, e)
            continue
        logger.info("Removed %s directory", rel_path)
        removed.append(target)

    if wdb:
        data_dir = workspace_path / "Data"
        removed.extend(_remove_wdb_files(data_dir))
        if data_dir.is_dir() and not data_dir.is_symlink():
            for locale_dir in sorted(data_dir.iterdir()):
                if _is_locale_dir(locale_dir):
                    removed.extend(_remove_wdb_files(locale_dir))

    if not removed:
        logger.info("No files to clean in %s (workspace is already clean)", workspace_path)
    return removed
