"""Scanning and cleaning orchestration engine."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence

from cargo_clean_all.config import CleanAllConfig
from cargo_clean_all.core import cleaner
from cargo_clean_all.core.aggregator import analyze
from cargo_clean_all.core.discovery import ErrorCallback, discover
from cargo_clean_all.core.selection import (
    SelectionPolicy,
    apply_selection,
    partition,
    preselect,
    sort_by_size,
)
from cargo_clean_all.models.clean_result import CleanupReport
from cargo_clean_all.models.project import ProjectAnalysis, ProjectRecord

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]  # (phase, status_message)


class CleanAllEngine:
    """Runs discovery, analysis, selection and cleanup for one config."""

    def __init__(self, config: CleanAllConfig, on_error: ErrorCallback | None = None) -> None:
        self.config = config
        self.on_error = on_error
        self.policy = SelectionPolicy.create(
            keep_size=config.keep_size,
            keep_days=config.keep_days,
            ignore=config.ignore,
        )

    def scan(self, on_progress: ProgressCallback | None = None) -> list[ProjectAnalysis]:
        """Find projects with a target dir and measure them.

        Returns:
            Analyses ordered by target dir size, smallest first.
        """
        if on_progress:
            on_progress("discover", "scanning")
        records = discover(
            self.config.root_dir,
            worker_count=self.config.threads,
            depth_limit=self.config.max_depth,
            skip_prefixes=self.config.skip,
            on_error=self.on_error,
        )
        if on_progress:
            on_progress("discover", f"found {len(records)} projects")

        with_target = [r for r in records if r.has_artifact_dir]
        if on_progress:
            on_progress("analyze", f"measuring {len(with_target)} target directories")
        projects = sort_by_size(self._analyze(with_target))
        if on_progress:
            on_progress("analyze", "done")
        return projects

    def _analyze(self, records: Sequence[ProjectRecord]) -> list[ProjectAnalysis]:
        """Measure target dirs concurrently, one task per project."""
        if len(records) < 2:
            return [analyze(r) for r in records]
        max_workers = self.config.threads or os.cpu_count() or 1
        with ThreadPoolExecutor(max_workers=min(max_workers, len(records))) as executor:
            return list(executor.map(analyze, records))

    def preselect(self, projects: Sequence[ProjectAnalysis]) -> list[bool]:
        """Default selection of *projects* under the configured policy."""
        return preselect(projects, self.policy)

    def select(
        self,
        projects: Sequence[ProjectAnalysis],
        indices: Sequence[int],
    ) -> tuple[list[ProjectAnalysis], list[ProjectAnalysis]]:
        """Mark *indices* as selected and split into (to_clean, kept)."""
        apply_selection(projects, indices)
        return partition(projects)

    def clean(
        self,
        projects: Sequence[ProjectAnalysis],
        on_progress: cleaner.ProgressCallback | None = None,
    ) -> CleanupReport:
        """Delete the target directories of the selected *projects*."""
        selected = [p for p in projects if p.selected]
        if len(selected) != len(projects):
            log.warning("Skipping %d projects that are not selected", len(projects) - len(selected))
        return cleaner.clean_projects(
            selected,
            preserve=self.config.keep_executables,
            on_progress=on_progress,
            on_error=self.on_error,
        )
