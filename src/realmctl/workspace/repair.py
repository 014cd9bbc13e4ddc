"""Non-destructive repair of shared links and private directories.

Re-derives the shareable directory list the link engine works from and
brings each entry back to its expected state. The only mutations ever made
are creating directories and creating symlinks; anything a user put in
place of an expected link or directory is reported and left alone.

Key class: RepairEngine. Entry point: repair_workspace().
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from ..base.store import load_manifest
from ..base.types import Manifest
from ..errors import LinkError
from .linker import has_shared_ancestor, lexists, shareable_candidates
from .sharing import default_strategy_for, resolve_strategy
from .store import load_workspace_config
from .types import RepairKind, RepairReport, SharedRoots, SharingStrategy

logger = logging.getLogger(__name__)


def _link_target(link: Path) -> Path:
    target = Path(os.readlink(link))
    if not target.is_absolute():
        target = link.parent / target
    return Path(os.path.normpath(target))


def _symlink_resolves(link: Path) -> bool:
    return _link_target(link).exists()


class RepairEngine:
    """Restores one workspace to agreement with its manifest and sharing rules."""

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

    def _blocked_by_ancestor(self, ws_file: Path) -> bool:
        """True if an ancestor is a symlink (live or dangling) or a plain file.

        Nothing below such an ancestor belongs to the workspace tree any more.
        """
        current = ws_file.parent
        while current != self.workspace_path:
            if current.is_symlink() or (current.exists() and not current.is_dir()):
                return True
            current = current.parent
        return False

    def repair(self) -> RepairReport:
        report = RepairReport(workspace_path=self.workspace_path)
        self._ensure_shared_roots(report)

        processed: dict[str, SharingStrategy] = {}
        for rel_path, role in shareable_candidates(self.base_path, self.manifest):
            if has_shared_ancestor(rel_path, processed):
                continue
            if self._blocked_by_ancestor(self.workspace_path / rel_path):
                logger.debug("Skipping %s: ancestor is a symlink or a file", rel_path)
                continue
            strategy = resolve_strategy(
                rel_path, self.sharing_rules, default_strategy_for(role)
            )
            if strategy.is_shared:
                self._repair_shared(rel_path, strategy, report)
            else:
                self._repair_private(rel_path, report)
            processed[rel_path] = strategy
        return report

    def _ensure_shared_roots(self, report: RepairReport) -> None:
        for root in self.roots:
            if not root.is_dir():
                logger.info("Creating missing shared root: %s", root)
                root.mkdir(parents=True, exist_ok=True)
                report.add(root, RepairKind.CREATED_SHARED_ROOT)

    def _repair_private(self, rel_path: str, report: RepairReport) -> None:
        ws_file = self.workspace_path / rel_path
        if ws_file.is_symlink():
            logger.warning(
                "Expected directory but found a symlink at %s. Leaving as-is.", ws_file
            )
            report.add(ws_file, RepairKind.UNEXPECTED_SYMLINK)
        elif ws_file.is_dir():
            return
        elif ws_file.exists():
            logger.warning(
                "Expected directory at %s, but found a file. Leaving as-is.", ws_file
            )
            report.add(ws_file, RepairKind.UNEXPECTED_FILE)
        else:
            logger.info("Creating missing workspace directory: %s", ws_file)
            ws_file.mkdir(parents=True, exist_ok=True)
            report.add(ws_file, RepairKind.CREATED_DIRECTORY)

    def _repair_shared(
        self, rel_path: str, strategy: SharingStrategy, report: RepairReport
    ) -> None:
        ws_file = self.workspace_path / rel_path
        target = self.roots.target_for(rel_path, strategy)

        if ws_file.is_symlink():
            if _symlink_resolves(ws_file):
                return
            if _link_target(ws_file) != Path(os.path.normpath(target)):
                logger.warning(
                    "Dangling symlink %s points to %s instead of %s. Leaving as-is.",
                    ws_file,
                    _link_target(ws_file),
                    target,
                )
                report.add(ws_file, RepairKind.FOREIGN_SYMLINK)
            if not target.is_dir():
                logger.info(
                    "Target missing for symlink %s. Recreating %s.", ws_file, target
                )
                target.mkdir(parents=True, exist_ok=True)
                report.add(target, RepairKind.CREATED_TARGET)
            return

        if ws_file.exists():
            logger.warning(
                "Real file/directory at %s replaces an expected symlink. "
                "Will NOT overwrite or remove user data.",
                ws_file,
            )
            report.add(ws_file, RepairKind.REPLACED_SYMLINK)
            return

        if not target.is_dir():
            logger.info("Creating missing target shared directory: %s", target)
            target.mkdir(parents=True, exist_ok=True)
            report.add(target, RepairKind.CREATED_TARGET)
        ws_file.parent.mkdir(parents=True, exist_ok=True)

        # Creating the target may have made the path reachable through a
        # symlinked ancestor; a second link there would collide.
        if lexists(ws_file):
            logger.debug("%s reachable after creating target, not linking", ws_file)
            return

        logger.info("Creating symlink: %s -> %s", ws_file, target)
        try:
            ws_file.symlink_to(target, target_is_directory=True)
        except OSError as e:
            raise LinkError(f"Failed to create symlink for {rel_path}: {e}") from e
        report.add(ws_file, RepairKind.CREATED_SYMLINK)


def repair_workspace(workspace_path: Path, roots: SharedRoots | None = None) -> RepairReport:
    """Repair the workspace at ``workspace_path``.

    Args:
        workspace_path: Directory holding a workspace.json.
        roots: Shared roots to repair against. Defaults to the .shared
            layout next to the workspace for its base.

    Returns:
        Every corrective and advisory action taken, in order. Conflicting
        user data never makes the call fail.

    Raises:
        WorkspaceConfigError: If the workspace config cannot be loaded.
        ManifestError: If the base manifest cannot be loaded.
    """
    workspace_path = workspace_path.expanduser().absolute()
    logger.info("Verifying workspace: %s", workspace_path)

    config = load_workspace_config(workspace_path)
    manifest = load_manifest(config.base_path)
    if roots is None:
        roots = SharedRoots.under(workspace_path.parent, config.base_name)

    report = RepairEngine(
        config.base_path, workspace_path, manifest, config.sharing_rules, roots
    ).repair()
    logger.info(
        "Repair of %s finished: %d corrective, %d warnings",
        workspace_path,
        len(report.corrective),
        len(report.warnings),
    )
    return report
