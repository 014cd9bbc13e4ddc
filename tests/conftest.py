"""Root conftest — isolates settings lookups BEFORE any realmctl module is imported.

load_settings() and realmctl_dir() read REALMCTL_DIR and
REALMCTL_WORKSPACE_ROOT, so real values from the developer's environment
must not leak into tests.
"""

import os
import tempfile

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["REALMCTL_DIR"] = tempfile.mkdtemp(prefix="realmctl-test-")
os.environ.pop("REALMCTL_WORKSPACE_ROOT", None)
