"""Data models for workspaces: sharing strategies, configs, shared roots and repair records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..errors import ValidationError

SHARED_DIRNAME = ".shared"
GLOBAL_SHARED_NAME = "global"


class SharingStrategy(str, Enum):
    """Where the content of a shareable directory physically lives."""

    GLOBAL = "global"  # one instance across every base and workspace
    BASE = "base"  # one instance per base profile
    WORKSPACE = "workspace"  # private to the workspace

    @classmethod
    def parse(cls, value: str) -> SharingStrategy:
        try:
            return cls(value.strip().lower())
        except ValueError as e:
            raise ValidationError(f"Invalid sharing strategy: {value}") from e

    @property
    def is_shared(self) -> bool:
        return self is not SharingStrategy.WORKSPACE


def default_sharing_rules() -> dict[str, SharingStrategy]:
    return {
        "screenshots": SharingStrategy.GLOBAL,
        "interface/addons": SharingStrategy.BASE,
        "wtf": SharingStrategy.WORKSPACE,
    }


@dataclass(frozen=True)
class SharedRoots:
    """The two deduplication roots a workspace links into."""

    global_dir: Path
    base_dir: Path

    @classmethod
    def under(cls, workspace_root: Path, base_name: str) -> SharedRoots:
        shared = workspace_root / SHARED_DIRNAME
        return cls(global_dir=shared / GLOBAL_SHARED_NAME, base_dir=shared / base_name)

    def for_strategy(self, strategy: SharingStrategy) -> Path:
        if strategy is SharingStrategy.GLOBAL:
            return self.global_dir
        if strategy is SharingStrategy.BASE:
            return self.base_dir
        raise ValueError("Workspace strategy has no shared root")

    def target_for(self, rel_path: str, strategy: SharingStrategy) -> Path:
        """Mirror ``rel_path`` under the root that ``strategy`` selects."""
        return self.for_strategy(strategy) / rel_path

    def __iter__(self):
        return iter((self.global_dir, self.base_dir))


@dataclass
class WorkspaceConfig:
    """Per-workspace record (persisted to workspace.json)."""

    name: str
    base_name: str
    base_path: Path
    workspace_path: Path
    created_at: str = ""
    sharing_rules: dict[str, SharingStrategy] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "base_name": self.base_name,
            "base_path": str(self.base_path),
            "workspace_path": str(self.workspace_path),
            "created_at": self.created_at,
            "sharing_rules": {k: v.value for k, v in sorted(self.sharing_rules.items())},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkspaceConfig:
        return cls(
            name=data.get("name", ""),
            base_name=data.get("base_name", ""),
            base_path=Path(data.get("base_path", "")),
            workspace_path=Path(data.get("workspace_path", "")),
            created_at=str(data.get("created_at", "")),
            sharing_rules={
                k: SharingStrategy.parse(v)
                for k, v in data.get("sharing_rules", {}).items()
            },
        )


class RepairKind(str, Enum):
    """What the repair engine did (or declined to do) at a path.

    Attributes:
        CREATED_SHARED_ROOT: A missing shared root directory was created.
        CREATED_DIRECTORY: A missing workspace-private directory was created.
        CREATED_TARGET: A missing directory under a shared root was created.
        CREATED_SYMLINK: A missing workspace symlink was created.
        UNEXPECTED_SYMLINK: A symlink sits where a private directory belongs.
        UNEXPECTED_FILE: A plain file sits where a private directory belongs.
        REPLACED_SYMLINK: A real file or directory sits where a shared link belongs.
        FOREIGN_SYMLINK: A dangling shared link points somewhere other than its target.
    """

    CREATED_SHARED_ROOT = "created_shared_root"
    CREATED_DIRECTORY = "created_directory"
    CREATED_TARGET = "created_target"
    CREATED_SYMLINK = "created_symlink"
    UNEXPECTED_SYMLINK = "unexpected_symlink"
    UNEXPECTED_FILE = "unexpected_file"
    REPLACED_SYMLINK = "replaced_symlink"
    FOREIGN_SYMLINK = "foreign_symlink"

    @property
    def is_warning(self) -> bool:
        return self in _WARNING_KINDS


_WARNING_KINDS = frozenset(
    {
        RepairKind.UNEXPECTED_SYMLINK,
        RepairKind.UNEXPECTED_FILE,
        RepairKind.REPLACED_SYMLINK,
        RepairKind.FOREIGN_SYMLINK,
    }
)


@dataclass(frozen=True)
class RepairAction:
    path: Path
    kind: RepairKind


@dataclass
class RepairReport:
    """Ordered list of everything a repair run did or flagged."""

    workspace_path: Path
    actions: list[RepairAction] = field(default_factory=list)

    def add(self, path: Path, kind: RepairKind) -> None:
        self.actions.append(RepairAction(path=path, kind=kind))

    @property
    def corrective(self) -> list[RepairAction]:
        return [a for a in self.actions if not a.kind.is_warning]

    @property
    def warnings(self) -> list[RepairAction]:
        return [a for a in self.actions if a.kind.is_warning]

    @property
    def is_clean(self) -> bool:
        return not self.actions

    def kinds_at(self, path: Path) -> list[RepairKind]:
        return [a.kind for a in self.actions if a.path == path]
