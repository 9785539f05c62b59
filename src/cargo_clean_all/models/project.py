"""Project discovery and analysis dataclasses."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from cargo_clean_all.constants import ARTIFACT_DIR

# Timestamp reported for empty or missing target directories.
EPOCH = 0.0

_SECONDS_PER_DAY = 60 * 60 * 24


@dataclass(frozen=True, slots=True)
class DepthBudget:
    """Remaining descent budget for a directory walk.

    ``remaining=None`` is unlimited.  ``Remaining(0)`` is exhausted: an
    item carrying it is dropped without being read.
    """

    remaining: int | None = None

    @classmethod
    def unlimited(cls) -> DepthBudget:
        return cls(None)

    @classmethod
    def from_limit(cls, max_depth: int) -> DepthBudget:
        """Build a budget from a max-depth setting where 0 means unlimited."""
        if max_depth < 0:
            raise ValueError(f"max_depth must not be negative: {max_depth}")
        return cls(None) if max_depth == 0 else cls(max_depth)

    @property
    def is_unlimited(self) -> bool:
        return self.remaining is None

    @property
    def exhausted(self) -> bool:
        return not self.is_unlimited and self.remaining <= 0

    def descend(self) -> DepthBudget:
        """Budget for a direct child of the directory holding this budget."""
        if self.is_unlimited:
            return self
        return DepthBudget(max(self.remaining - 1, 0))


@dataclass(frozen=True, slots=True)
class WorkItem:
    """A directory waiting to be inspected by a discovery worker."""

    path: Path
    budget: DepthBudget = DepthBudget()


@dataclass(frozen=True, slots=True)
class ProjectRecord:
    """A directory containing a ``Cargo.toml``, found during discovery."""

    path: Path
    has_artifact_dir: bool = False


@dataclass(slots=True)
class ProjectAnalysis:
    """A project with the measured size and age of its target directory."""

    project_path: Path
    size: int = 0
    last_modified: float = EPOCH
    selected: bool = False

    @property
    def name(self) -> str:
        return self.project_path.name or str(self.project_path)

    @property
    def target_dir(self) -> Path:
        return self.project_path / ARTIFACT_DIR

    def days_since_modified(self, now: float | None = None) -> float:
        """Days elapsed since the newest file in the target dir was written.

        Files dated in the future count as modified just now.
        """
        if now is None:
            now = time.time()
        return max(now - self.last_modified, 0.0) / _SECONDS_PER_DAY
