"""realmctl - manage multiple game client workspaces built from one shared base.

A base installation is scanned once into a role manifest; workspaces are then
materialized from it with hard links, symlinks into shared roots, copies and
empty directories, and can later be repaired without touching user data.

Package entry point. Exports the version string only; functional modules
live in realmctl.base and realmctl.workspace.
"""

__version__ = "0.1.0"
