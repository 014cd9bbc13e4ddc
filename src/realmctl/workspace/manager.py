"""Workspace root management.

Manages a two-tier layout under one workspace root:
  - Shared roots (.shared/global, .shared/<base-name>): deduplicated content
  - Per-name workspaces (<name>/): materialized client trees + workspace.json

Key class: WorkspaceManager.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from ..errors import WorkspaceNotFoundError
from .cleaner import clean_workspace
from .linker import create_workspace
from .repair import repair_workspace
from .store import config_path, load_workspace_config
from .types import (
    SHARED_DIRNAME,
    RepairReport,
    SharedRoots,
    SharingStrategy,
    WorkspaceConfig,
)

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """Creates, repairs and cleans the workspaces under one root."""

    def __init__(self, workspace_root: Path) -> None:
        self.workspace_root = workspace_root.expanduser().absolute()
        self.shared_dir = self.workspace_root / SHARED_DIRNAME

    def workspace_dir_for(self, name: str) -> Path:
        return self.workspace_root / name

    def shared_roots(self, base_name: str) -> SharedRoots:
        return SharedRoots.under(self.workspace_root, base_name)

    def create(
        self,
        name: str,
        base_path: Path,
        sharing_rules: Mapping[str, SharingStrategy] | None = None,
    ) -> WorkspaceConfig:
        """Materialize a new workspace from the base at ``base_path``.

        Raises:
            WorkspaceExistsError: If ``name`` is already taken.
            ManifestError: If the base has not been scanned.
        """
        return create_workspace(name, base_path, self.workspace_root, sharing_rules)

    def load_config(self, name: str) -> WorkspaceConfig:
        """Load the config of workspace ``name``.

        Raises:
            WorkspaceNotFoundError: If no such workspace exists.
        """
        workspace_path = self.workspace_dir_for(name)
        if not config_path(workspace_path).is_file():
            raise WorkspaceNotFoundError(f"Workspace not found: {name}")
        return load_workspace_config(workspace_path)

    def repair(self, name: str) -> RepairReport:
        """Repair shared links and directories of workspace ``name``.

        Never removes or overwrites user data.
        """
        config = self.load_config(name)
        roots = self.shared_roots(config.base_name)
        return repair_workspace(self.workspace_dir_for(name), roots)

    def clean(self, name: str, wdb: bool = False) -> list[Path]:
        """Empty ephemeral directories of workspace ``name``."""
        self.load_config(name)
        return clean_workspace(self.workspace_dir_for(name), wdb=wdb)

    def list_workspaces(self) -> list[str]:
        """List names of workspaces (directories holding a workspace config)."""
        if not self.workspace_root.is_dir():
            return []
        return sorted(
            p.name
            for p in self.workspace_root.iterdir()
            if p.name != SHARED_DIRNAME and config_path(p).is_file()
        )
