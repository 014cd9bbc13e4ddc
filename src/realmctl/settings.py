"""Settings — reads settings.toml + .env to produce RealmSettings.

Supplies the defaults the engines do not hard-code: where workspaces live,
which builtin profile a new base uses, and the sharing rules layered over
default_sharing_rules().

Key entities:
  - RealmSettings: frozen dataclass with resolved settings.
  - load_settings(): parse .env + settings.toml → RealmSettings.
  - configure_logging(): apply the log format and package log level.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .base.profiles import get_profile
from .base.types import Profile
from .errors import ValidationError
from .workspace.manager import WorkspaceManager
from .workspace.types import SharingStrategy, default_sharing_rules

logger = logging.getLogger(__name__)

_DEFAULT_WORKSPACE_ROOT = "~/.local/share/wow_workspaces"
_DEFAULT_PROFILE = "chromie-3.3.5a"
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def realmctl_dir() -> Path:
    """Config directory: $REALMCTL_DIR or ~/.config/realmctl."""
    env = os.getenv("REALMCTL_DIR", "")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "realmctl"


# ---------------------------------------------------------------------------
# RealmSettings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RealmSettings:
    """Resolved settings. All paths are expanded; no further env lookups needed."""

    config_dir: Path = field(default_factory=realmctl_dir)
    workspace_root: Path = field(
        default_factory=lambda: Path(_DEFAULT_WORKSPACE_ROOT).expanduser()
    )
    profile_name: str = _DEFAULT_PROFILE
    log_level: str = "WARNING"
    sharing_rules: dict[str, SharingStrategy] = field(
        default_factory=default_sharing_rules
    )

    @property
    def settings_file(self) -> Path:
        return self.config_dir / "settings.toml"

    def profile(self) -> Profile:
        """The builtin profile named by ``profile_name``."""
        return get_profile(self.profile_name)

    def manager(self) -> WorkspaceManager:
        return WorkspaceManager(self.workspace_root)


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


def load_settings(config_dir: Path | None = None) -> RealmSettings:
    """Read .env + settings.toml and return RealmSettings.

    A missing settings.toml is not an error; defaults apply.

    Args:
        config_dir: Override for the config directory.
                    Defaults to ``realmctl_dir()``.

    Raises:
        ValueError: If settings.toml is not valid TOML or holds bad values.
    """
    if config_dir is None:
        config_dir = realmctl_dir()

    # Load .env files (local cwd first, then config_dir)
    local_env = Path(".env")
    global_env = config_dir / ".env"
    if local_env.is_file():
        load_dotenv(local_env)
    if global_env.is_file():
        load_dotenv(global_env)

    raw: dict = {}
    toml_path = config_dir / "settings.toml"
    if toml_path.is_file():
        with open(toml_path, "rb") as f:
            try:
                raw = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid settings file {toml_path}: {e}") from e
    else:
        logger.debug("No settings file at %s, using defaults", toml_path)

    workspace_root = os.getenv("REALMCTL_WORKSPACE_ROOT") or raw.get(
        "workspace_root", _DEFAULT_WORKSPACE_ROOT
    )

    log_level = str(raw.get("log_level", "WARNING")).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown log_level: {log_level}")

    sharing_rules = default_sharing_rules()
    sharing_section = raw.get("sharing", {})
    if not isinstance(sharing_section, dict):
        raise ValueError("[sharing] must be a table of key = strategy entries.")
    for key, value in sharing_section.items():
        try:
            sharing_rules[key] = SharingStrategy.parse(str(value))
        except ValidationError as e:
            raise ValueError(f"[sharing] {key}: {e}") from e

    return RealmSettings(
        config_dir=config_dir,
        workspace_root=Path(str(workspace_root)).expanduser(),
        profile_name=str(raw.get("profile", _DEFAULT_PROFILE)),
        log_level=log_level,
        sharing_rules=sharing_rules,
    )


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging and set the realmctl logger level."""
    logging.basicConfig(format=_LOG_FORMAT, level=logging.WARNING)
    logging.getLogger("realmctl").setLevel(level)
