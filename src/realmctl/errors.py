"""Exception hierarchy shared by the base and workspace engines.

Generic read/write/copy failures are not wrapped; they propagate as the
builtin OSError.
"""


class RealmError(Exception):
    """Base class for all realmctl errors."""


class ValidationError(RealmError):
    """A profile, name or option failed validation."""


class MissingRequirement(ValidationError):
    """A file or directory required by the profile is absent or of the wrong type."""


class ScanError(RealmError):
    """An entry of the base tree could not be read during a manifest scan."""


class ManifestError(RealmError):
    """The base manifest is absent, unreadable or inconsistent."""


class WorkspaceConfigError(RealmError):
    """The workspace config is absent, unreadable or malformed."""


class WorkspaceExistsError(RealmError):
    """A workspace with the requested name already exists under the root."""


class WorkspaceNotFoundError(RealmError):
    """No workspace with the requested name exists under the root."""


class LinkError(RealmError):
    """A hard link or symlink could not be created and no fallback applied."""
