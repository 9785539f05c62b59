"""Deletion of target directories, optionally keeping built executables."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Callable, Iterable

from cargo_clean_all.constants import EXECUTABLES_DIR
from cargo_clean_all.models.clean_result import CleanupOutcome, CleanupReport
from cargo_clean_all.models.project import ProjectAnalysis

log = logging.getLogger(__name__)

ProgressCallback = Callable[[ProjectAnalysis, int, int], None]  # (project, index, total)
ErrorCallback = Callable[[Path, OSError], None]


def is_executable(path: Path, st: os.stat_result | None = None) -> bool:
    """Whether *path* is a regular file the platform would execute."""
    try:
        if st is None:
            st = path.stat()
    except OSError:
        return False
    if not stat.S_ISREG(st.st_mode):
        return False
    if sys.platform == "win32":
        return path.suffix.lower() == ".exe"
    return bool(st.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def find_executables(target_dir: Path, on_error: ErrorCallback | None = None) -> list[Path]:
    """Executables directly inside each profile dir (``debug``, ``release``, ...)."""
    found: list[Path] = []
    try:
        profiles = sorted(p for p in target_dir.iterdir() if p.is_dir() and not p.is_symlink())
    except OSError as exc:
        log.debug("Cannot read %s: %s", target_dir, exc)
        if on_error:
            on_error(target_dir, exc)
        return found

    for profile in profiles:
        try:
            files = sorted(profile.iterdir())
        except OSError as exc:
            log.debug("Cannot read %s: %s", profile, exc)
            if on_error:
                on_error(profile, exc)
            continue
        found.extend(f for f in files if not f.is_symlink() and is_executable(f))
    return found


def preserve_executables(
    project: ProjectAnalysis,
    outcome: CleanupOutcome,
    on_error: ErrorCallback | None = None,
) -> None:
    """Move built executables to ``<project>/executables/<profile>/``.

    A file that cannot be moved is logged and left in place; it is then
    deleted along with the rest of the target dir.
    """
    target_dir = project.target_dir
    keep_dir = project.project_path / EXECUTABLES_DIR

    for exe in find_executables(target_dir, on_error):
        destination = keep_dir / exe.relative_to(target_dir)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(exe, destination)
        except OSError as exc:
            log.debug("Could not preserve executable %s: %s", exe, exc)
            outcome.preserve_errors.append(f"{exe}: {exc}")
            if on_error:
                on_error(exe, exc)
            continue
        log.debug("Preserved %s -> %s", exe, destination)
        outcome.preserved.append(destination)


def clean_project(
    project: ProjectAnalysis,
    preserve: bool = False,
    on_error: ErrorCallback | None = None,
) -> CleanupOutcome:
    """Delete one project's target directory and report the outcome."""
    outcome = CleanupOutcome(project_path=project.project_path, expected_bytes=project.size)

    if preserve:
        preserve_executables(project, outcome, on_error)

    try:
        shutil.rmtree(project.target_dir)
    except OSError as exc:
        log.warning("Failed to remove %s: %s", project.target_dir, exc)
        outcome.error = str(exc)
    return outcome


def clean_projects(
    projects: Iterable[ProjectAnalysis],
    preserve: bool = False,
    on_progress: ProgressCallback | None = None,
    on_error: ErrorCallback | None = None,
) -> CleanupReport:
    """Delete the target directories of all *projects*.

    A failure on one project never stops the others; each outcome is
    recorded in the returned report.
    """
    projects = list(projects)
    report = CleanupReport()
    for index, project in enumerate(projects, 1):
        if on_progress:
            on_progress(project, index, len(projects))
        report.outcomes.append(clean_project(project, preserve, on_error))

    log.info(
        "Cleaned %d of %d target directories",
        len(report.succeeded),
        len(report.outcomes),
    )
    return report
