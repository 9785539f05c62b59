"""Name and path predicates used while walking for Cargo projects."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from cargo_clean_all.constants import ARTIFACT_DIR, MANIFEST_FILE, METADATA_DIRS


def is_manifest(name: str) -> bool:
    """Whether a file name marks its directory as a project root."""
    return name == MANIFEST_FILE


def is_metadata_dir(name: str) -> bool:
    """Whether a directory is VCS metadata or the cargo home cache."""
    return name in METADATA_DIRS


def is_artifact_dir(name: str, has_manifest_in_parent: bool) -> bool:
    """Whether a directory is the build output of the project above it.

    A ``target`` directory without a ``Cargo.toml`` next to it is an
    ordinary directory and may contain projects of its own.
    """
    return has_manifest_in_parent and name == ARTIFACT_DIR


def best_effort_canonical(path: Path | str) -> Path:
    """Resolve *path*, falling back to its absolute literal form.

    The fallback covers paths that do not exist (yet) or cannot be
    resolved because of permissions.
    """
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError):
        return Path(os.path.abspath(path))


def canonical_prefixes(prefixes: Iterable[Path | str]) -> tuple[Path, ...]:
    """Canonicalize a list of configured path prefixes once."""
    return tuple(best_effort_canonical(p) for p in prefixes)


def starts_with_any(path: Path, prefixes: Iterable[Path]) -> bool:
    """Component-wise prefix test of an already canonical path."""
    return any(path.is_relative_to(prefix) for prefix in prefixes)


def matches_ignore_or_skip(path: Path | str, prefixes: Iterable[Path | str]) -> bool:
    """Whether *path* lies at or below any of the configured *prefixes*.

    Both sides are canonicalized on a best-effort basis first.
    """
    return starts_with_any(best_effort_canonical(path), canonical_prefixes(prefixes))
