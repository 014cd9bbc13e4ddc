"""Workspace materialization from a base manifest.

Builds a workspace in two passes:
  1. Shareable directories (UserMedia / UserConfig), shallowest first: a
     symlink into the matching shared root for Global/Base strategies, a
     real empty directory for the Workspace strategy.
  2. Every other entry: hard links for Executable/BaseData (symlink
     fallback), full copies for MutableData/Other, empty directories for
     Ephemeral content.

Nothing that already exists in the workspace is overwritten. There is no
rollback: a failure mid-walk leaves a partially built workspace, which can
be deleted and created again.

Key class: LinkEngine. Entry point: create_workspace().
"""

from __future__ import annotations

import logging
import shutil
import time
from collections.abc import Mapping
from pathlib import Path

from ..base.store import load_manifest
from ..base.types import SHAREABLE_ROLES, Manifest, Role
from ..errors import LinkError, ValidationError, WorkspaceExistsError
from .sharing import default_strategy_for, matches_rule_key, resolve_strategy
from .store import write_workspace_config
from .types import (
    SHARED_DIRNAME,
    SharedRoots,
    SharingStrategy,
    WorkspaceConfig,
    default_sharing_rules,
)

logger = logging.getLogger(__name__)


def path_depth(rel_path: str) -> int:
    return rel_path.count("/")


def _depth_key(rel_path: str) -> tuple[int, str]:
    return (path_depth(rel_path), rel_path)


def lexists(path: Path) -> bool:
    """True for anything at ``path``, including dangling symlinks."""
    return path.exists() or path.is_symlink()


def shareable_candidates(base_path: Path, manifest: Manifest) -> list[tuple[str, Role]]:
    """UserMedia/UserConfig directories of the base, parents before children."""
    candidates = [
        (rel_path, role)
        for rel_path, role in manifest.file_roles.items()
        if role in SHAREABLE_ROLES and (base_path / rel_path).is_dir()
    ]
    candidates.sort(key=lambda item: _depth_key(item[0]))
    return candidates


def has_shared_ancestor(rel_path: str, processed: Mapping[str, SharingStrategy]) -> bool:
    """True if an already-processed shared directory is a strict ancestor of ``rel_path``."""
    return any(
        strategy.is_shared and rel_path.startswith(shared + "/")
        for shared, strategy in processed.items()
    )


class LinkEngine:
    """Materializes one workspace tree from a base manifest."""

    def __init__(
        self,
        base_path: Path,
        workspace_path: Path,
        manifest: Manifest,
        sharing_rules: Mapping[str, SharingStrategy],
        roots: SharedRoots,
    ) -> None:
        self.base_path = base_path
        self.workspace_path = workspace_path
        self.manifest = manifest
        self.sharing_rules = dict(sharing_rules)
        self.roots = roots

    def link(self) -> None:
        """Run both passes over the manifest."""
        processed = self.link_shared_dirs()
        self.link_remaining(processed)

    # ------------------------------------------------------------------
    # Pass 1
    # ------------------------------------------------------------------

    def link_shared_dirs(self) -> dict[str, SharingStrategy]:
        """Create shared links or private dirs for shareable directories.

        Returns:
            Every processed relative path mapped to its resolved strategy.
        """
        processed: dict[str, SharingStrategy] = {}
        for rel_path, role in shareable_candidates(self.base_path, self.manifest):
            if has_shared_ancestor(rel_path, processed):
                logger.debug("Skipping %s: covered by a shared ancestor", rel_path)
                continue

            strategy = resolve_strategy(
                rel_path, self.sharing_rules, default_strategy_for(role)
            )
            ws_file = self.workspace_path / rel_path
            if strategy.is_shared:
                self._create_shared_link(rel_path, ws_file, strategy)
            elif not lexists(ws_file):
                ws_file.mkdir(parents=True, exist_ok=True)
                logger.debug("Created workspace directory %s", ws_file)
            processed[rel_path] = strategy
        return processed

    def _create_shared_link(
        self, rel_path: str, ws_file: Path, strategy: SharingStrategy
    ) -> None:
        if lexists(ws_file):
            return

        target = self.roots.target_for(rel_path, strategy)
        target.mkdir(parents=True, exist_ok=True)
        ws_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            ws_file.symlink_to(target, target_is_directory=True)
        except OSError as e:
            raise LinkError(f"Failed to create symlink for {rel_path}: {e}") from e
        logger.debug("Linked %s -> %s (%s)", ws_file, target, strategy.value)

    # ------------------------------------------------------------------
    # Pass 2
    # ------------------------------------------------------------------

    def link_remaining(self, processed: Mapping[str, SharingStrategy]) -> None:
        """Materialize every entry not handled by pass 1."""
        for rel_path in sorted(self.manifest.file_roles, key=_depth_key):
            role = self.manifest.file_roles[rel_path]
            base_file = self.base_path / rel_path
            if role in SHAREABLE_ROLES and base_file.is_dir():
                continue

            ws_file = self.workspace_path / rel_path
            if not self._ensure_parent(ws_file):
                logger.debug("Skipping %s: parent is covered by a shared path", rel_path)
                continue
            self._materialize(rel_path, role, base_file, ws_file)

    def _ancestor_is_covered(self, directory: Path) -> bool:
        current = directory
        while current != self.workspace_path:
            if current.is_symlink():
                return True
            rel = current.relative_to(self.workspace_path).as_posix()
            if any(matches_rule_key(rel, key) for key in self.sharing_rules):
                return True
            current = current.parent
        return False

    def _ensure_parent(self, ws_file: Path) -> bool:
        """Create the parent of ``ws_file`` unless an ancestor covers it.

        Returns:
            Whether the parent exists afterwards.
        """
        parent = ws_file.parent
        if parent == self.workspace_path:
            return True
        if not self._ancestor_is_covered(parent):
            parent.mkdir(parents=True, exist_ok=True)
        return parent.is_dir()

    def _materialize(self, rel_path: str, role: Role, base_file: Path, ws_file: Path) -> None:
        if lexists(ws_file):
            return

        if base_file.is_dir():
            # Ephemeral directories are recreated empty; their contents
            # were never scanned.
            ws_file.mkdir()
            return

        if role in (Role.EXECUTABLE, Role.BASE_DATA):
            self._hard_link(rel_path, base_file, ws_file)
        elif role in (Role.MUTABLE_DATA, Role.OTHER):
            shutil.copy2(base_file, ws_file, follow_symlinks=False)
            logger.debug("Copied %s", rel_path)
        else:
            logger.debug("Not materializing %s file %s", role.value, rel_path)

    def _hard_link(self, rel_path: str, base_file: Path, ws_file: Path) -> None:
        try:
            ws_file.hardlink_to(base_file)
            return
        except OSError as e:
            logger.debug("Hard link failed for %s (%s), falling back to symlink", rel_path, e)
        try:
            ws_file.symlink_to(base_file)
        except OSError as e:
            raise LinkError(f"Failed to link {rel_path}: {e}") from e


def _validate_name(name: str) -> None:
    if (
        not name
        or name in (".", "..", SHARED_DIRNAME)
        or "/" in name
        or "\\" in name
    ):
        raise ValidationError(f"Invalid workspace name: {name!r}")


def create_workspace(
    name: str,
    base_path: Path,
    workspace_root: Path,
    sharing_rules: Mapping[str, SharingStrategy] | None = None,
    roots: SharedRoots | None = None,
) -> WorkspaceConfig:
    """Create workspace ``name`` under ``workspace_root`` from the base at ``base_path``.

    Args:
        name: Directory name of the new workspace.
        base_path: Base directory holding a manifest.
        workspace_root: Directory holding workspaces and the .shared roots.
        sharing_rules: Rule key -> strategy. Defaults to default_sharing_rules().
        roots: Shared roots to link into. Defaults to the .shared layout
            under workspace_root for the manifest's profile.

    Returns:
        The persisted WorkspaceConfig.

    Raises:
        ValidationError: If the name is not a plain directory name.
        ManifestError: If the base has no readable manifest.
        WorkspaceExistsError: If the workspace directory already exists.
        LinkError: If a link could not be created.
    """
    _validate_name(name)
    base_path = base_path.expanduser().absolute()
    workspace_root = workspace_root.expanduser().absolute()

    manifest = load_manifest(base_path)

    workspace_path = workspace_root / name
    if lexists(workspace_path):
        raise WorkspaceExistsError(f"Workspace already exists: {workspace_path}")

    rules = dict(default_sharing_rules() if sharing_rules is None else sharing_rules)
    if roots is None:
        roots = SharedRoots.under(workspace_root, manifest.profile)

    workspace_root.mkdir(parents=True, exist_ok=True)
    try:
        workspace_path.mkdir()
    except FileExistsError as e:
        raise WorkspaceExistsError(f"Workspace already exists: {workspace_path}") from e
    for root in roots:
        root.mkdir(parents=True, exist_ok=True)

    LinkEngine(base_path, workspace_path, manifest, rules, roots).link()

    config = WorkspaceConfig(
        name=name,
        base_name=manifest.profile,
        base_path=base_path,
        workspace_path=workspace_path,
        created_at=str(int(time.time())),
        sharing_rules=rules,
    )
    write_workspace_config(config)
    logger.info("Created workspace %s at %s", name, workspace_path)
    return config
