"""File and directory names shared across cargo-clean-all."""

from __future__ import annotations

MANIFEST_FILE = "Cargo.toml"
ARTIFACT_DIR = "target"
EXECUTABLES_DIR = "executables"

# Never searched.  ``.cargo`` may hold target dirs of installed crates,
# which are not ours to delete.
METADATA_DIRS = frozenset({".git", ".cargo"})
