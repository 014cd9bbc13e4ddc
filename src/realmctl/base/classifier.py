"""Path classification against a profile's ordered rule table.

Key class: PathClassifier.
"""

import logging
from pathlib import Path

from ..errors import MissingRequirement, ValidationError
from .types import Profile, Role

logger = logging.getLogger(__name__)


def normalize_rel_path(rel_path: str) -> str:
    """Use ``/`` separators and drop leading ``./`` and trailing slashes."""
    normalized = rel_path.replace("\\", "/").strip("/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class PathClassifier:
    """Assigns roles to base-relative paths using a Profile."""

    def __init__(self, profile: Profile) -> None:
        self.profile = profile

    def classify(self, rel_path: str) -> Role:
        """Return the role of the first matching rule, or Role.OTHER."""
        path = normalize_rel_path(rel_path)
        for rule in self.profile.role_rules:
            if rule.matches(path):
                return rule.role
        return Role.OTHER

    def verify_requirements(self, base_dir: Path) -> None:
        """Check that every required file and directory is present.

        Raises:
            ValidationError: If base_dir itself is not a directory.
            MissingRequirement: On the first absent or mistyped requirement.
        """
        if not base_dir.is_dir():
            raise ValidationError(f"Directory does not exist: {base_dir}")

        for rel in self.profile.required_files:
            if not (base_dir / rel).is_file():
                raise MissingRequirement(f"Required file not found: {rel}")

        for rel in self.profile.required_dirs:
            if not (base_dir / rel).is_dir():
                raise MissingRequirement(f"Required directory not found: {rel}")

        logger.debug(
            "Profile %s requirements satisfied at %s", self.profile.name, base_dir
        )

    def check_warnings(self, base_dir: Path) -> list[str]:
        """Return advisory messages whose trigger path exists under base_dir."""
        messages: list[str] = []
        for warning in self.profile.warnings:
            path = base_dir / warning.pattern
            if path.exists() or path.is_symlink():
                messages.append(warning.message)
        return messages
