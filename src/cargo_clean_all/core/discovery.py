"""Concurrent directory walk that finds Cargo projects."""

from __future__ import annotations

import logging
import os
import queue
import threading
from pathlib import Path
from typing import Callable, Iterable

from cargo_clean_all.core.classifier import (
    best_effort_canonical,
    canonical_prefixes,
    is_artifact_dir,
    is_manifest,
    is_metadata_dir,
    starts_with_any,
)
from cargo_clean_all.models.project import DepthBudget, ProjectRecord, WorkItem

log = logging.getLogger(__name__)

ErrorCallback = Callable[[Path, OSError], None]  # (path, error) for unreadable dirs


class DiscoveryError(Exception):
    """Raised when the worker pool for the directory walk cannot be started."""


class WorkQueue:
    """Unbounded work queue that detects when no more work can arrive.

    Every :meth:`put` counts one item as in flight.  A consumer calls
    :meth:`task_done` only after it has finished an item, including every
    item it enqueued while handling it.  A new item can therefore only be
    added while its parent is still counted, and the count drops to zero
    exactly once, after the last item.  At that point one end-of-stream
    marker per consumer is queued and :meth:`get` returns ``None``.
    """

    def __init__(self, consumers: int) -> None:
        self._queue: queue.SimpleQueue[WorkItem | None] = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._consumers = consumers
        self._in_flight = 0
        self._closed = False

    def put(self, item: WorkItem) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("Work queue is closed")
            self._in_flight += 1
        self._queue.put(item)

    def get(self) -> WorkItem | None:
        """Block until an item is available; ``None`` means end of stream."""
        return self._queue.get()

    def task_done(self) -> None:
        with self._lock:
            if self._in_flight <= 0:
                raise ValueError("task_done() called more times than items were put")
            self._in_flight -= 1
            if self._in_flight:
                return
        self.close()

    def close(self, consumers: int | None = None) -> None:
        """Wake *consumers* (default: all of them) with end of stream."""
        with self._lock:
            self._closed = True
        for _ in range(self._consumers if consumers is None else consumers):
            self._queue.put(None)


def discover(
    root: Path | str,
    worker_count: int = 0,
    depth_limit: int = 0,
    skip_prefixes: Iterable[Path | str] = (),
    on_error: ErrorCallback | None = None,
) -> set[ProjectRecord]:
    """Find every directory below *root* that contains a ``Cargo.toml``.

    Args:
        root: Directory to search.
        worker_count: Number of walker threads; 0 uses one per CPU.
        depth_limit: How many directory levels to read, counting *root*
            as the first; 0 is unlimited.
        skip_prefixes: Directories that are never read.
        on_error: Called for every directory that cannot be listed.

    Returns:
        One record per project, in no particular order.

    Raises:
        DiscoveryError: If no walker thread could be started.
    """
    if worker_count < 0:
        raise ValueError(f"worker_count must not be negative: {worker_count}")
    if worker_count == 0:
        worker_count = os.cpu_count() or 1

    budget = DepthBudget.from_limit(depth_limit)
    root_path = best_effort_canonical(root)
    skip = canonical_prefixes(skip_prefixes)
    if starts_with_any(root_path, skip):
        log.info("Search root %s is below a skipped path, nothing to scan", root_path)
        return set()

    jobs = WorkQueue(worker_count)
    results: queue.SimpleQueue[ProjectRecord] = queue.SimpleQueue()
    workers = _start_workers(worker_count, jobs, results, skip, on_error)

    jobs.put(WorkItem(root_path, budget))

    for worker in workers:
        worker.join()

    found: dict[Path, ProjectRecord] = {}
    while True:
        try:
            record = results.get_nowait()
        except queue.Empty:
            break
        found[record.path] = record

    log.info("Found %d Cargo projects below %s", len(found), root_path)
    return set(found.values())


def _start_workers(
    count: int,
    jobs: WorkQueue,
    results: queue.SimpleQueue[ProjectRecord],
    skip: tuple[Path, ...],
    on_error: ErrorCallback | None,
) -> list[threading.Thread]:
    """Start the walker threads, stopping the started ones on failure."""
    workers: list[threading.Thread] = []
    for index in range(count):
        worker = threading.Thread(
            target=_worker_loop,
            args=(jobs, results, skip, on_error),
            name=f"discovery-{index}",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as exc:
            jobs.close(consumers=len(workers))
            for started in workers:
                started.join()
            raise DiscoveryError(f"Could not start discovery worker {index + 1} of {count}: {exc}") from exc
        workers.append(worker)
    log.debug("Started %d discovery workers", len(workers))
    return workers


def _worker_loop(
    jobs: WorkQueue,
    results: queue.SimpleQueue[ProjectRecord],
    skip: tuple[Path, ...],
    on_error: ErrorCallback | None,
) -> None:
    while True:
        item = jobs.get()
        if item is None:
            return
        try:
            record = scan_directory(item, jobs.put, skip, on_error)
            if record is not None:
                results.put(record)
        except Exception:
            log.exception("Unexpected error while scanning %s", item.path)
        finally:
            jobs.task_done()


def scan_directory(
    item: WorkItem,
    enqueue: Callable[[WorkItem], None],
    skip: tuple[Path, ...] = (),
    on_error: ErrorCallback | None = None,
) -> ProjectRecord | None:
    """Inspect one directory, queueing its subdirectories for later.

    Returns a record if the directory is a Cargo project.
    """
    if item.budget.exhausted:
        return None

    try:
        with os.scandir(item.path) as it:
            entries = list(it)
    except OSError as exc:
        log.debug("Error reading directory '%s': %s", item.path, exc)
        if on_error:
            on_error(item.path, exc)
        return None

    subdirs: list[str] = []
    has_manifest = False
    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(entry.name)
            elif is_manifest(entry.name):
                has_manifest = True
        except OSError as exc:
            log.debug("Cannot access '%s': %s", entry.path, exc)

    has_artifact_dir = False
    child_budget = item.budget.descend()
    for name in subdirs:
        if is_metadata_dir(name):
            continue
        # Symlinks are not followed, so children of a canonical root stay canonical.
        path = item.path / name
        if skip and starts_with_any(path, skip):
            log.debug("Skipping %s", path)
            continue
        if is_artifact_dir(name, has_manifest):
            has_artifact_dir = True
            continue
        enqueue(WorkItem(path, child_budget))

    if has_manifest:
        return ProjectRecord(item.path, has_artifact_dir)
    return None
