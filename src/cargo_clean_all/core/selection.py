"""Retention policy deciding which target directories to clean."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from cargo_clean_all.core.classifier import canonical_prefixes, matches_ignore_or_skip
from cargo_clean_all.models.project import ProjectAnalysis


@dataclass(frozen=True)
class SelectionPolicy:
    """Thresholds a project must exceed to be cleaned by default.

    A project is kept when its target dir is no larger than ``keep_size``
    bytes, when it was modified less than ``keep_days`` days ago, or when
    it lies below one of the ``ignore`` paths.
    """

    keep_size: int = 0
    keep_days: int = 0
    ignore: tuple[Path, ...] = ()

    @classmethod
    def create(cls, keep_size: int = 0, keep_days: int = 0, ignore: Iterable[Path | str] = ()) -> SelectionPolicy:
        """Build a policy with canonicalized ignore paths."""
        return cls(keep_size=keep_size, keep_days=keep_days, ignore=canonical_prefixes(ignore))

    def is_ignored(self, project: ProjectAnalysis) -> bool:
        return matches_ignore_or_skip(project.project_path, self.ignore)

    def is_preselected(self, project: ProjectAnalysis, now: float | None = None) -> bool:
        return (
            project.days_since_modified(now) >= self.keep_days
            and project.size > self.keep_size
            and not self.is_ignored(project)
        )


def sort_by_size(projects: Iterable[ProjectAnalysis]) -> list[ProjectAnalysis]:
    """Order projects by target dir size, smallest first."""
    return sorted(projects, key=lambda p: (p.size, str(p.project_path)))


def preselect(
    projects: Sequence[ProjectAnalysis],
    policy: SelectionPolicy,
    now: float | None = None,
) -> list[bool]:
    """Default selection for each project, in the same order."""
    if now is None:
        now = time.time()
    return [policy.is_preselected(project, now) for project in projects]


def apply_selection(projects: Sequence[ProjectAnalysis], indices: Iterable[int]) -> None:
    """Mark the projects at *indices* as selected for cleaning.

    Unlisted projects keep their current flag; a selection is never
    withdrawn.
    """
    for index in indices:
        if not 0 <= index < len(projects):
            raise IndexError(f"Selection index out of range: {index}")
        projects[index].selected = True


def selected_indices(flags: Sequence[bool]) -> list[int]:
    return [i for i, flag in enumerate(flags) if flag]


def partition(projects: Iterable[ProjectAnalysis]) -> tuple[list[ProjectAnalysis], list[ProjectAnalysis]]:
    """Split projects into (to_clean, kept) by their ``selected`` flag."""
    to_clean: list[ProjectAnalysis] = []
    kept: list[ProjectAnalysis] = []
    for project in projects:
        (to_clean if project.selected else kept).append(project)
    return to_clean, kept
