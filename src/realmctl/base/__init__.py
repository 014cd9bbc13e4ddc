"""Base installations — profiles, path classification and role manifests.

Provides PathClassifier for mapping relative paths to roles, scan_base() and
build_manifest() for producing a Manifest, and the JSON store that persists
it inside the base directory.
"""
