"""Builtin client profiles and lookup by name or alias."""

from __future__ import annotations

from ..errors import ValidationError
from .types import Profile, Role, RoleRule, WarningRule


def _regex(pattern: str, role: Role) -> RoleRule:
    return RoleRule(pattern=pattern, role=role, is_regex=True)


def _ephemeral_warning(name: str) -> WarningRule:
    return WarningRule(
        pattern=name,
        message=f"{name} directory present in base - should be ephemeral",
    )


def chromie_335a() -> Profile:
    """Wrath of the Lich King 3.3.5a client."""
    return Profile(
        name="chromie-3.3.5a",
        version="3.3.5a",
        required_files=(
            "Wow.exe",
            "Data/common.MPQ",
            "Data/patch.MPQ",
            "Data/lichking.MPQ",
        ),
        required_dirs=("Data",),
        role_rules=(
            RoleRule(pattern="Wow.exe", role=Role.EXECUTABLE),
            _regex(r"^Data/common.*\.MPQ$", Role.BASE_DATA),
            _regex(r"^Data/expansion.*\.MPQ$", Role.BASE_DATA),
            _regex(r"^Data/lichking.*\.MPQ$", Role.BASE_DATA),
            _regex(r"^Data/patch.*\.MPQ$", Role.MUTABLE_DATA),
            _regex(r"^Screenshots($|/)", Role.USER_MEDIA),
            _regex(r"^WTF($|/)", Role.USER_CONFIG),
            _regex(r"^Interface($|/)", Role.USER_CONFIG),
            _regex(r"^Cache($|/)", Role.EPHEMERAL),
            _regex(r"^Logs($|/)", Role.EPHEMERAL),
            _regex(r"^Errors($|/)", Role.EPHEMERAL),
        ),
        warnings=(
            _ephemeral_warning("Cache"),
            _ephemeral_warning("Logs"),
            _ephemeral_warning("Errors"),
        ),
    )


def vanilla_112() -> Profile:
    """Vanilla 1.12 client."""
    return Profile(
        name="vanilla-1.12",
        version="1.12",
        required_files=("WoW.exe", "realmlist.wtf"),
        required_dirs=("Data", "WTF", "Interface"),
        role_rules=(
            RoleRule(pattern="WoW.exe", role=Role.EXECUTABLE),
            # Listed before the patch rule, so patch archives classify as BaseData
            _regex(r"^Data/.*\.MPQ$", Role.BASE_DATA),
            _regex(r"^Data/patch.*\.MPQ$", Role.MUTABLE_DATA),
            _regex(r"^Screenshots($|/)", Role.USER_MEDIA),
            _regex(r"^WTF($|/)", Role.USER_CONFIG),
            _regex(r"^Interface($|/)", Role.USER_CONFIG),
            _regex(r"^Logs($|/)", Role.EPHEMERAL),
            _regex(r"^Errors($|/)", Role.EPHEMERAL),
            _regex(r"^WDB($|/)", Role.EPHEMERAL),
        ),
        warnings=(
            _ephemeral_warning("Logs"),
            _ephemeral_warning("Errors"),
        ),
    )


_BUILTIN_PROFILES = {
    "chromie-3.3.5a": chromie_335a,
    "vanilla-1.12": vanilla_112,
}

_ALIASES = {
    "3.3.5a": "chromie-3.3.5a",
    "335": "chromie-3.3.5a",
    "335a": "chromie-3.3.5a",
    "1.12": "vanilla-1.12",
    "112": "vanilla-1.12",
}


def list_profiles() -> list[str]:
    """Return the canonical names of all builtin profiles."""
    return sorted(_BUILTIN_PROFILES)


def get_profile(name: str) -> Profile:
    """Look up a builtin profile by canonical name or alias.

    Raises:
        ValidationError: If no builtin profile matches.
    """
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    factory = _BUILTIN_PROFILES.get(key)
    if factory is None:
        raise ValidationError(
            f"Unknown profile: {name} (available: {', '.join(list_profiles())})"
        )
    return factory()
