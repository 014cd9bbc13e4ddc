"""JSON persistence for base manifests.

The manifest lives at a fixed filename inside the base directory and is
written atomically, so a failed or interrupted write never leaves a partial
manifest behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from ..errors import ManifestError
from .types import Manifest

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"


def manifest_path(base_dir: Path) -> Path:
    """Return the manifest location for a base directory."""
    return base_dir / MANIFEST_FILENAME


def write_json_atomic(path: Path, data: dict) -> None:
    """Write ``data`` as JSON via a temp file in the same directory + os.replace."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_manifest(manifest: Manifest, base_dir: Path) -> Path:
    """Persist ``manifest`` into ``base_dir`` and return the file path."""
    path = manifest_path(base_dir)
    write_json_atomic(path, manifest.to_dict())
    logger.info("Manifest written to %s (%d entries)", path, len(manifest.file_roles))
    return path


def load_manifest(base_dir: Path) -> Manifest:
    """Load the manifest stored in ``base_dir``.

    Raises:
        ManifestError: If the file is absent, unreadable, not valid JSON,
            missing required fields or violates the checksum invariant.
    """
    path = manifest_path(base_dir)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ManifestError(
            f"No manifest at {path} - is this a valid base? Run base initialization first."
        ) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"Failed to read manifest {path}: {e}") from e

    if not isinstance(data, dict) or not data.get("profile"):
        raise ManifestError(f"Malformed manifest {path}: missing 'profile'")
    return Manifest.from_dict(data)
