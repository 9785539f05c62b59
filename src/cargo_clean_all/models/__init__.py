"""cargo-clean-all data models."""

from cargo_clean_all.models.project import (
    EPOCH,
    DepthBudget,
    ProjectAnalysis,
    ProjectRecord,
    WorkItem,
)
from cargo_clean_all.models.clean_result import CleanupOutcome, CleanupReport

__all__ = [
    "EPOCH",
    "CleanupOutcome",
    "CleanupReport",
    "DepthBudget",
    "ProjectAnalysis",
    "ProjectRecord",
    "WorkItem",
]
