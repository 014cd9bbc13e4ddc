"""Base scanning — walks a base tree and builds its role manifest.

The walk is depth-first and classifies every entry, files and directories
alike. Ephemeral directories are recorded but not descended into. BaseData
files get a CRC-32 checksum tag. Nothing is persisted until the whole walk
has succeeded.

Key functions: scan_base(), build_manifest().
"""

from __future__ import annotations

import logging
import time
import zlib
from pathlib import Path

from ..errors import ScanError
from .classifier import PathClassifier
from .store import MANIFEST_FILENAME, write_manifest
from .types import Manifest, Profile, Role

logger = logging.getLogger(__name__)

_READ_BUFFER_SIZE = 8192


def compute_checksum(path: Path) -> str:
    """Return the CRC-32 of a file as 8 lowercase hex digits, read in chunks."""
    crc = 0
    with open(path, "rb") as f:
        while chunk := f.read(_READ_BUFFER_SIZE):
            crc = zlib.crc32(chunk, crc)
    return f"{crc & 0xFFFFFFFF:08x}"


def _is_own_artifact(rel_path: str) -> bool:
    """Top-level manifest file and its temp siblings are not part of the base."""
    return rel_path == MANIFEST_FILENAME or (
        "/" not in rel_path and rel_path.startswith(f".{MANIFEST_FILENAME}.")
    )


def _scan_directory(
    base_dir: Path,
    current_dir: Path,
    classifier: PathClassifier,
    file_roles: dict[str, Role],
    checksums: dict[str, str],
) -> None:
    try:
        entries = sorted(current_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ScanError(f"Cannot read directory {current_dir}: {e}") from e

    for path in entries:
        rel_path = path.relative_to(base_dir).as_posix()
        if _is_own_artifact(rel_path):
            continue

        role = classifier.classify(rel_path)
        file_roles[rel_path] = role

        # Links inside the base are recorded but never followed
        if path.is_symlink():
            logger.debug("Recorded symlink %s as %s", rel_path, role.value)
            continue

        if path.is_dir():
            if role is Role.EPHEMERAL:
                logger.debug("Not descending into ephemeral directory %s", rel_path)
                continue
            _scan_directory(base_dir, path, classifier, file_roles, checksums)
        elif role is Role.BASE_DATA:
            try:
                checksums[rel_path] = compute_checksum(path)
            except OSError as e:
                raise ScanError(f"Cannot read {rel_path}: {e}") from e


def scan_base(base_dir: Path, profile: Profile) -> Manifest:
    """Classify every entry under ``base_dir`` and return a new Manifest.

    Raises:
        ScanError: If any directory or BaseData file cannot be read.
    """
    classifier = PathClassifier(profile)
    file_roles: dict[str, Role] = {}
    checksums: dict[str, str] = {}

    _scan_directory(base_dir, base_dir, classifier, file_roles, checksums)

    return Manifest(
        profile=profile.name,
        base_path=base_dir,
        created_at=str(int(time.time())),
        file_roles=file_roles,
        checksums=checksums,
        version=profile.version or None,
    )


def build_manifest(base_dir: Path, profile: Profile) -> Manifest:
    """Verify, scan and persist a base in one step.

    Profile warnings are logged, never fatal. The manifest is written only
    after the scan completed.

    Raises:
        ValidationError: If base_dir does not meet the profile requirements.
        ScanError: If the scan hits an unreadable entry.
    """
    base_dir = base_dir.expanduser().resolve()
    classifier = PathClassifier(profile)
    classifier.verify_requirements(base_dir)
    for message in classifier.check_warnings(base_dir):
        logger.warning("%s: %s", base_dir, message)

    manifest = scan_base(base_dir, profile)
    logger.info(
        "Scanned %s with profile %s: %d entries, %d checksums",
        base_dir,
        profile.name,
        len(manifest.file_roles),
        len(manifest.checksums),
    )
    write_manifest(manifest, base_dir)
    return manifest
