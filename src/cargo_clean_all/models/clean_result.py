"""Cleanup result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class CleanupOutcome:
    """Result of cleaning a single project's target directory."""

    project_path: Path
    expected_bytes: int = 0
    error: str | None = None
    preserved: list[Path] = field(default_factory=list)
    preserve_errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class CleanupReport:
    """Outcomes of a cleanup batch.

    Only fully succeeded deletions are counted as reclaimed.  A failed
    recursive delete may still have removed part of its directory, so
    ``reclaimed_bytes`` is a lower-bound approximation.
    """

    outcomes: list[CleanupOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[CleanupOutcome]:
        return [o for o in self.outcomes if o.succeeded]

    @property
    def failed(self) -> list[CleanupOutcome]:
        return [o for o in self.outcomes if not o.succeeded]

    @property
    def expected_bytes(self) -> int:
        return sum(o.expected_bytes for o in self.outcomes)

    @property
    def reclaimed_bytes(self) -> int:
        return self.expected_bytes - sum(o.expected_bytes for o in self.failed)
