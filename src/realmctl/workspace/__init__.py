"""Workspace management — linking, sharing resolution, repair and cleanup.

Provides WorkspaceManager as the entry point over one workspace root, the
link engine that materializes a workspace from a base manifest, and the
repair engine that restores shared links without touching user data.
"""
