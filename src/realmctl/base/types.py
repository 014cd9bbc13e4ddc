"""Data models for base classification: roles, rules, profiles and manifests."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

from ..errors import ManifestError, ValidationError


class Role(str, Enum):
    """Semantic role of a path inside a base installation.

    Attributes:
        EXECUTABLE: Main game executable.
        BASE_DATA: Immutable data archives (common*.MPQ etc).
        MUTABLE_DATA: Data files that may be patched per workspace.
        USER_MEDIA: User-created media (screenshots, videos).
        USER_CONFIG: User configuration (WTF, addon settings).
        EPHEMERAL: Caches and logs that can be thrown away.
        OTHER: Anything not matched by a rule.
    """

    EXECUTABLE = "Executable"
    BASE_DATA = "BaseData"
    MUTABLE_DATA = "MutableData"
    USER_MEDIA = "UserMedia"
    USER_CONFIG = "UserConfig"
    EPHEMERAL = "Ephemeral"
    OTHER = "Other"


# Roles whose directories are candidates for shared links
SHAREABLE_ROLES = frozenset({Role.USER_MEDIA, Role.USER_CONFIG})


@dataclass(frozen=True)
class RoleRule:
    """One row of a profile's classification table.

    A literal rule matches the exact path or anything below it; a regex rule
    matches when the pattern is found anywhere in the path, so patterns must
    carry their own ``^`` anchor.
    """

    pattern: str
    role: Role
    is_regex: bool = False
    _compiled: re.Pattern[str] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self.is_regex:
            return
        try:
            compiled = re.compile(self.pattern)
        except re.error as e:
            raise ValidationError(f"Invalid role pattern {self.pattern!r}: {e}") from e
        object.__setattr__(self, "_compiled", compiled)

    def matches(self, rel_path: str) -> bool:
        if self._compiled is not None:
            return self._compiled.search(rel_path) is not None
        return rel_path == self.pattern or rel_path.startswith(self.pattern + "/")

    def to_dict(self) -> dict[str, Any]:
        return {"pattern": self.pattern, "role": self.role.value, "is_regex": self.is_regex}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoleRule:
        return cls(
            pattern=data.get("pattern", ""),
            role=Role(data.get("role", Role.OTHER.value)),
            is_regex=data.get("is_regex", False),
        )


@dataclass(frozen=True)
class WarningRule:
    """Advisory message shown when ``pattern`` exists under the base."""

    pattern: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"pattern": self.pattern, "message": self.message}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WarningRule:
        return cls(pattern=data.get("pattern", ""), message=data.get("message", ""))


@dataclass(frozen=True)
class Profile:
    """Named rule set describing one client version."""

    name: str
    version: str = ""
    required_files: tuple[str, ...] = ()
    required_dirs: tuple[str, ...] = ()
    role_rules: tuple[RoleRule, ...] = ()
    warnings: tuple[WarningRule, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "required_files": list(self.required_files),
            "required_dirs": list(self.required_dirs),
            "role_rules": [r.to_dict() for r in self.role_rules],
            "warnings": [w.to_dict() for w in self.warnings],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        return cls(
            name=data.get("name", ""),
            version=data.get("version", ""),
            required_files=tuple(data.get("required_files", [])),
            required_dirs=tuple(data.get("required_dirs", [])),
            role_rules=tuple(RoleRule.from_dict(r) for r in data.get("role_rules", [])),
            warnings=tuple(WarningRule.from_dict(w) for w in data.get("warnings", [])),
        )


@dataclass(frozen=True)
class Manifest:
    """Role classification of a scanned base (persisted to manifest.json).

    ``file_roles`` keys are relative paths with ``/`` separators.
    ``checksums`` only holds BaseData files. Both mappings are read-only
    views; build new dicts and a new Manifest to change them.
    """

    profile: str
    base_path: Path
    created_at: str
    file_roles: Mapping[str, Role] = field(default_factory=dict)
    checksums: Mapping[str, str] = field(default_factory=dict)
    version: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_roles", MappingProxyType(dict(self.file_roles)))
        object.__setattr__(self, "checksums", MappingProxyType(dict(self.checksums)))
        for rel_path in self.checksums:
            if self.file_roles.get(rel_path) is not Role.BASE_DATA:
                raise ManifestError(
                    f"Checksum recorded for non-BaseData entry: {rel_path}"
                )

    def entries_with_role(self, *roles: Role) -> list[str]:
        """Return relative paths having any of ``roles``, sorted."""
        wanted = set(roles)
        return sorted(p for p, r in self.file_roles.items() if r in wanted)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "profile": self.profile,
            "base_path": str(self.base_path),
            "created_at": self.created_at,
            "file_roles": {p: r.value for p, r in sorted(self.file_roles.items())},
            "checksums": dict(sorted(self.checksums.items())),
        }
        if self.version is not None:
            d["version"] = self.version
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Manifest:
        try:
            file_roles = {p: Role(r) for p, r in data.get("file_roles", {}).items()}
        except ValueError as e:
            raise ManifestError(f"Unknown role in manifest: {e}") from e
        return cls(
            profile=data.get("profile", ""),
            base_path=Path(data.get("base_path", "")),
            created_at=str(data.get("created_at", "")),
            file_roles=file_roles,
            checksums=dict(data.get("checksums", {})),
            version=data.get("version"),
        )
