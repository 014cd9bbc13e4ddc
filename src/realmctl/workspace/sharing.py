"""Sharing strategy resolution for workspace-relative paths.

Rule keys are free-form strings compared case-insensitively against the
path. A key matches when the path equals it, lies below it, or has a single
component equal to it (so ``addons`` matches ``Interface/AddOns``).

When several keys match, the longest normalized key wins; keys of equal
length are ordered lexicographically and the smallest wins, comparing the
raw key last when two keys differ only in case.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..base.types import Role
from .types import SharingStrategy

_ROLE_DEFAULTS = {
    Role.USER_MEDIA: SharingStrategy.GLOBAL,
    Role.USER_CONFIG: SharingStrategy.WORKSPACE,
}


def _normalize(value: str) -> str:
    return value.replace("\\", "/").strip("/").lower()


def default_strategy_for(role: Role) -> SharingStrategy:
    """Strategy used when no rule key matches a path of ``role``."""
    return _ROLE_DEFAULTS.get(role, SharingStrategy.WORKSPACE)


def matches_rule_key(rel_path: str, key: str) -> bool:
    """True if ``rel_path`` equals ``key`` or lies below it (case-insensitive)."""
    path = _normalize(rel_path)
    norm_key = _normalize(key)
    return bool(norm_key) and (path == norm_key or path.startswith(norm_key + "/"))


def _key_matches(path: str, components: list[str], norm_key: str) -> bool:
    if not norm_key:
        return False
    return path == norm_key or path.startswith(norm_key + "/") or norm_key in components


def resolve_strategy(
    rel_path: str,
    rules: Mapping[str, SharingStrategy],
    default: SharingStrategy,
) -> SharingStrategy:
    """Return the strategy of the best matching rule key, or ``default``."""
    path = _normalize(rel_path)
    components = path.split("/")

    best: tuple[int, str, str] | None = None
    chosen = default
    for key, strategy in rules.items():
        norm_key = _normalize(key)
        if not _key_matches(path, components, norm_key):
            continue
        rank = (-len(norm_key), norm_key, key)
        if best is None or rank < best:
            best = rank
            chosen = strategy
    return chosen
