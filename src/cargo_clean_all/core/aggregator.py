"""Size and age measurement of target directories."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from cargo_clean_all.models.project import EPOCH, ProjectAnalysis, ProjectRecord

log = logging.getLogger(__name__)


def aggregate(path: Path | str) -> tuple[int, float]:
    """Total size and newest modification time of everything below *path*.

    Entries that vanish or cannot be read while the tree is walked count
    as ``(0, EPOCH)`` instead of failing the whole measurement.

    Returns:
        (total_bytes, most_recent_mtime) tuple.  ``(0, EPOCH)`` for a
        missing or empty directory.
    """
    try:
        st = os.stat(path)
    except OSError:
        return 0, EPOCH

    if not stat.S_ISDIR(st.st_mode):
        return st.st_size, st.st_mtime

    total = 0
    newest = EPOCH
    stack: list[Path | str] = [path]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as exc:
            log.debug("Cannot read %s: %s", current, exc)
            continue
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(entry.path)
                    continue
                st = entry.stat(follow_symlinks=False)
            except OSError as exc:
                log.debug("Cannot access %s: %s", entry.path, exc)
                continue
            total += st.st_size
            newest = max(newest, st.st_mtime)
    return total, newest


def analyze(record: ProjectRecord) -> ProjectAnalysis:
    """Measure the target directory of a discovered project."""
    analysis = ProjectAnalysis(project_path=record.path)
    analysis.size, analysis.last_modified = aggregate(analysis.target_dir)
    return analysis
