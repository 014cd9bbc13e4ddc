"""JSON persistence for workspace configs (workspace.json in the workspace dir)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..base.store import write_json_atomic
from ..errors import ValidationError, WorkspaceConfigError
from .types import WorkspaceConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "workspace.json"


def config_path(workspace_path: Path) -> Path:
    return workspace_path / CONFIG_FILENAME


def write_workspace_config(config: WorkspaceConfig) -> Path:
    """Persist ``config`` into its own workspace directory."""
    path = config_path(config.workspace_path)
    write_json_atomic(path, config.to_dict())
    logger.debug("Workspace config written to %s", path)
    return path


def load_workspace_config(workspace_path: Path) -> WorkspaceConfig:
    """Load the config stored in ``workspace_path``.

    Raises:
        WorkspaceConfigError: If the file is absent, unreadable or malformed.
    """
    path = config_path(workspace_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise WorkspaceConfigError(f"No workspace config at {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise WorkspaceConfigError(f"Failed to read workspace config {path}: {e}") from e

    if not isinstance(data, dict) or not data.get("base_name"):
        raise WorkspaceConfigError(f"Malformed workspace config {path}: missing 'base_name'")
    try:
        return WorkspaceConfig.from_dict(data)
    except ValidationError as e:
        raise WorkspaceConfigError(f"Malformed workspace config {path}: {e}") from e
