"""Shared test fixtures."""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

DAY = 24 * 60 * 60


def _write_file(path: Path, size: int = 0, mtime: float | None = None, executable: bool = False) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        # Sparse, so large sizes cost no disk space.
        f.truncate(size)
    if executable:
        path.chmod(0o755)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def write_file():
    """Create a file of a given apparent size and modification time."""
    return _write_file


@pytest.fixture
def root(tmp_path):
    """Canonical, empty search root."""
    path = tmp_path.resolve() / "root"
    path.mkdir()
    return path


@pytest.fixture
def make_project():
    """Create a Cargo project, optionally with a filled target dir."""

    def _make(path: Path, target_size: int = 0, age_days: float = 0.0, with_target: bool = True) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / "Cargo.toml").write_text(f'[package]\nname = "{path.name}"\n')
        if with_target:
            target = path / "target"
            target.mkdir(exist_ok=True)
            if target_size:
                _write_file(target / "debug" / "blob", target_size, mtime=time.time() - age_days * DAY)
        return path

    return _make
